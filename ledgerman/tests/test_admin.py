"""
Tests for admin registration.
"""

from decimal import Decimal

import pytest
from django.contrib import admin
from django.urls import reverse

from ledgerman import ledger
from ledgerman.models import Item, StockBatch, StockMovement, Warehouse


pytestmark = pytest.mark.django_db


class TestAdminRegistration:

    def test_master_data_editable(self, rf, admin_user):
        request = rf.get('/')
        request.user = admin_user

        for model in (Warehouse, Item):
            model_admin = admin.site._registry[model]
            assert model_admin.has_add_permission(request)

    @pytest.mark.parametrize('model', [StockBatch, StockMovement])
    def test_ledger_read_only(self, rf, admin_user, model):
        request = rf.get('/')
        request.user = admin_user
        model_admin = admin.site._registry[model]

        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_change_permission(request)
        assert not model_admin.has_delete_permission(request)

    def test_batch_changelist(self, admin_client, item, loja, ref):
        ledger.receive(Decimal('5'), item, loja, Decimal('1'), ref())

        response = admin_client.get(reverse('admin:ledgerman_stockbatch_changelist'))

        assert response.status_code == 200

    def test_movement_changelist(self, admin_client, item, loja, ref):
        ledger.receive(Decimal('5'), item, loja, Decimal('1'), ref())

        response = admin_client.get(reverse('admin:ledgerman_stockmovement_changelist'))

        assert response.status_code == 200
