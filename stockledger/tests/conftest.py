"""
Pytest fixtures for Stockledger tests.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from stockledger import ledger
from stockledger.models import Product, ProductVariant, Supplier, Unit, UnitConversion


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def kg(db):
    return Unit.objects.create(name='Kilogram', symbol='kg')


@pytest.fixture
def g(db):
    return Unit.objects.create(name='Gram', symbol='g')


@pytest.fixture
def pcs(db):
    return Unit.objects.create(name='Piece', symbol='pcs')


@pytest.fixture
def kg_to_g(kg, g):
    """1 kg = 1000 g."""
    return UnitConversion.objects.create(from_unit=kg, to_unit=g, factor=Decimal('1000'))


@pytest.fixture
def product(db, kg):
    """Product sold by the kilogram, owning batches directly."""
    return Product.objects.create(name='Basmati Rice', sku='RICE-001', unit=kg)


@pytest.fixture
def coffee(db, kg):
    """Product with a variant."""
    return Product.objects.create(name='Arabica Coffee', sku='COF-001', unit=kg)


@pytest.fixture
def variant(db, coffee, g):
    """Coffee variant counted in grams."""
    return ProductVariant.objects.create(
        product=coffee,
        name='250 g bag',
        sku='COF-001-250',
        unit=g,
    )


@pytest.fixture
def supplier(db):
    return Supplier.objects.create(name='Acme Wholesale')


@pytest.fixture
def expiry():
    """Expiry date three months ahead."""
    return date.today() + timedelta(days=90)


@pytest.fixture
def batch(product, expiry):
    """Product-level batch with 100 kg."""
    return ledger.add_batch(
        None, 'LOT-100', expiry, Decimal('100'),
        buy_price=Decimal('2.50'), product=product,
    )


@pytest.fixture
def variant_batch(variant, expiry):
    """Variant-level batch with 5000 g."""
    return ledger.add_batch(
        variant, 'COF-LOT-1', expiry, Decimal('5000'),
        barcodes=['8901234567890', '8901234567891'],
    )
