"""
Catalog models — the parts of the product catalog and supplier
registry the ledger references.

Each record carries an aggregate `current_stock` counter. The counter is
denormalized: it only changes through ledger events (see
ProductBatch.apply_delta), never by direct edits.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    """Catalog product. Owns batches directly when it has no variants."""

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    sku = models.CharField(max_length=64, unique=True, verbose_name=_('SKU'))
    unit = models.ForeignKey(
        'stockledger.Unit',
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name=_('Unit'),
    )
    current_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Current stock'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class ProductVariant(models.Model):
    """Sellable variant of a product, with its own unit and stock counter."""

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name=_('Product'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    sku = models.CharField(max_length=64, unique=True, verbose_name=_('SKU'))
    unit = models.ForeignKey(
        'stockledger.Unit',
        on_delete=models.PROTECT,
        related_name='variants',
        verbose_name=_('Unit'),
    )
    current_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Current stock'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Variant')
        verbose_name_plural = _('Variants')
        ordering = ['product', 'name']

    def __str__(self) -> str:
        return f"{self.product} / {self.name}"


class Supplier(models.Model):
    name = models.CharField(max_length=200, verbose_name=_('Name'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Supplier')
        verbose_name_plural = _('Suppliers')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name
