"""
Tests for Location, Reference and Item unit conversion.
"""

from decimal import Decimal

import pytest

from ledgerman.exceptions import InvalidQuantity, NotFound
from ledgerman.location import Location, Reference
from ledgerman.models import HolderKind, Item, ReferenceKind, StockAdjustmentLine


pytestmark = pytest.mark.django_db


class TestLocation:

    def test_of_branch(self, branch):
        location = Location.of(branch)

        assert location.kind == HolderKind.BRANCH
        assert location.id == branch.pk
        assert str(location) == f"branch:{branch.pk}"

    def test_of_warehouse(self, warehouse):
        assert Location.of(warehouse).kind == HolderKind.WAREHOUSE

    def test_branch_and_warehouse_with_same_id_differ(self, branch, warehouse):
        """Kind is part of identity."""
        assert Location(HolderKind.BRANCH, 1) != Location(HolderKind.WAREHOUSE, 1)

    def test_value_semantics(self, branch):
        """Built from a string kind, equal and hashable."""
        assert Location('branch', branch.pk) == Location.of(branch)
        assert len({Location('branch', branch.pk), Location.of(branch)}) == 1

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            Location('truck', 1)

    def test_of_non_holder(self, item):
        with pytest.raises(TypeError):
            Location.of(item)

    def test_resolve(self, branch):
        assert Location.of(branch).resolve() == branch

    def test_resolve_missing(self):
        with pytest.raises(NotFound):
            Location(HolderKind.WAREHOUSE, 9999).resolve()

    def test_holder_location_property(self, warehouse, armazem):
        assert warehouse.location == armazem


class TestReference:

    def test_of_unsaved_line(self):
        with pytest.raises(ValueError):
            Reference.of(StockAdjustmentLine())

    def test_of_non_line(self, item):
        with pytest.raises(TypeError):
            Reference.of(item)

    def test_str(self):
        assert str(Reference(ReferenceKind.WAYBILL_LINE, 7)) == "waybill_line:7"

    def test_resolve_missing(self):
        with pytest.raises(NotFound):
            Reference(ReferenceKind.AUDIT_LINE, 9999).resolve()


class TestItemUnits:
    """Tests for Item.to_base_quantity()."""

    def test_base_unit_unchanged(self, item):
        assert item.to_base_quantity(Decimal('3')) == Decimal('3')

    def test_wholesale_conversion(self, item):
        """3 fardos of 10 = 30 units."""
        assert item.to_base_quantity(Decimal('3'), wholesale=True) == Decimal('30')

    def test_wholesale_without_factor(self, db):
        plain = Item.objects.create(code='SAL-1KG', name='Sal 1kg')

        with pytest.raises(InvalidQuantity):
            plain.to_base_quantity(Decimal('1'), wholesale=True)
