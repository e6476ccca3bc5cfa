"""
Pytest fixtures for Ledgerman tests.
"""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest
from django.contrib.auth import get_user_model

from ledgerman.adapters import reset_document_numbering
from ledgerman.context import ActingContext
from ledgerman.location import Location, Reference
from ledgerman.models import Branch, Item, ReferenceKind, Warehouse


User = get_user_model()


@pytest.fixture(autouse=True)
def _fresh_numbering():
    """Numbering backend is cached per process; tests may swap it."""
    reset_document_numbering()
    yield
    reset_document_numbering()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def branch(db):
    """Sales branch."""
    return Branch.objects.create(code='centro', name='Loja Centro', initial='CT')


@pytest.fixture
def other_branch(db):
    return Branch.objects.create(code='norte', name='Loja Norte', initial='NT')


@pytest.fixture
def warehouse(db):
    """Main storage."""
    return Warehouse.objects.create(code='principal', name='Armazém Principal', initial='AP')


@pytest.fixture
def loja(branch):
    """Location of the sales branch."""
    return Location.of(branch)


@pytest.fixture
def armazem(warehouse):
    """Location of the main storage."""
    return Location.of(warehouse)


@pytest.fixture
def item(db):
    """Stocked item with a wholesale unit."""
    return Item.objects.create(
        code='ACUCAR-1KG',
        name='Açúcar 1kg',
        category='Mercearia',
        unit='un',
        wholesale_unit='fardo',
        wholesale_factor=Decimal('10'),
    )


@pytest.fixture
def other_item(db):
    return Item.objects.create(code='CAFE-500G', name='Café 500g')


@pytest.fixture
def ref():
    """Factory of distinct adjustment-line references."""
    ids = count(1)

    def make(kind=ReferenceKind.ADJUSTMENT_LINE):
        return Reference(kind, next(ids))

    return make


@pytest.fixture
def ctx(user, branch):
    """Acting context: test user at the sales branch."""
    return ActingContext(user=user, branch=branch)


@pytest.fixture
def today():
    """Return today's date."""
    return date.today()
