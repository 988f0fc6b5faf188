"""
ProductBatch model — quantity-on-hand per lot.

A batch is created once on receipt and then only changes through ledger
events (StockIn, StockOut, sale line items). It is never deleted by the
ledger; an empty batch is simply exhausted.

Usage:
    batch = ledger.add_batch(
        variant, 'LOT-2026-10-A', expiry_date=date(2027, 1, 31),
        initial_quantity=Decimal('100'), buy_price=Decimal('2.50'),
    )
    ledger.record_stock_out(batch, Decimal('4'), reason='Damaged')
"""

from datetime import date
from decimal import Decimal

from django.db import models
from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class BatchQuerySet(models.QuerySet):
    """Custom QuerySet for ProductBatch with convenience filters."""

    def for_variant(self, variant):
        return self.filter(variant=variant)

    def for_product(self, product):
        """Batches owned by the product itself or by any of its variants."""
        return self.filter(product=product)

    def active(self):
        """Batches with remaining stock."""
        return self.filter(remaining_quantity__gt=0)

    def exhausted(self):
        return self.filter(remaining_quantity__lte=0)

    def expiring_before(self, day):
        """Batches expiring on or before the given date."""
        return self.filter(expiry_date__lte=day)

    def expired(self):
        """Batches past their expiry date."""
        return self.filter(expiry_date__lt=date.today())

    def search(self, text):
        """Case-insensitive match on product name or batch code."""
        if not text:
            return self
        return self.filter(
            Q(product__name__icontains=text) | Q(batch_code__icontains=text)
        )


class ProductBatch(models.Model):
    """
    Lot of a product (or product variant) received at a point in time.

    Quantities are expressed in the owner's native unit: the variant's
    unit when the batch belongs to a variant, the product's unit otherwise.

    Rules:
    - initial_quantity is set at creation and never changes
    - remaining_quantity only changes through ledger events
    - remaining_quantity never goes below zero (checked under row lock);
      it may exceed initial_quantity after stock-ins
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='batches',
        verbose_name=_('Product'),
    )
    variant = models.ForeignKey(
        'stockledger.ProductVariant',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='batches',
        verbose_name=_('Variant'),
    )

    batch_code = models.CharField(max_length=64, db_index=True, verbose_name=_('Batch code'))
    expiry_date = models.DateField(db_index=True, verbose_name=_('Expiry date'))

    initial_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Initial quantity'),
    )
    remaining_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Remaining quantity'),
    )
    buy_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Unit cost'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Product batch')
        verbose_name_plural = _('Product batches')
        ordering = ['expiry_date', 'created_at']
        indexes = [
            models.Index(fields=['product', 'expiry_date'], name='sl_batch_product_expiry_idx'),
            models.Index(fields=['variant', 'expiry_date'], name='sl_batch_variant_expiry_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(remaining_quantity__gte=0),
                name='product_batch_remaining_non_negative',
            ),
        ]

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def owner(self):
        """The record whose current_stock mirrors this batch."""
        return self.variant if self.variant_id else self.product

    @property
    def native_unit(self):
        return self.owner.unit

    @property
    def is_expired(self) -> bool:
        return date.today() > self.expiry_date

    @property
    def is_exhausted(self) -> bool:
        return self.remaining_quantity <= 0

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def apply_delta(self, delta: Decimal) -> None:
        """
        Move remaining_quantity and the owner's counter by the same delta.

        The single write path for both quantities. Callers must already be
        inside transaction.atomic() and own the batch row lock.
        """
        from stockledger.models.catalog import Product, ProductVariant

        now = timezone.now()
        ProductBatch.objects.filter(pk=self.pk).update(
            remaining_quantity=F('remaining_quantity') + delta,
            updated_at=now,
        )
        if self.variant_id:
            owner_qs = ProductVariant.objects.filter(pk=self.variant_id)
        else:
            owner_qs = Product.objects.filter(pk=self.product_id)
        owner_qs.update(current_stock=F('current_stock') + delta, updated_at=now)

    def expected_remaining(self) -> Decimal:
        """
        Remaining quantity rebuilt from the event tables.

        initial + stock-ins - stock-outs - sale line items, all in the
        native unit. Used by the counter audit.
        """
        def total(qs):
            return qs.aggregate(t=Coalesce(Sum('base_quantity'), Decimal('0')))['t']

        return (
            self.initial_quantity
            + total(self.stock_ins.all())
            - total(self.stock_outs.all())
            - total(self.transaction_items.all())
        )

    def __str__(self) -> str:
        return f"{self.batch_code} (exp:{self.expiry_date})"


class BatchBarcode(models.Model):
    """Barcode printed on a batch. The first one given at creation is primary."""

    batch = models.ForeignKey(
        ProductBatch,
        on_delete=models.CASCADE,
        related_name='barcodes',
        verbose_name=_('Batch'),
    )
    code = models.CharField(max_length=64, unique=True, verbose_name=_('Code'))
    is_primary = models.BooleanField(default=False, verbose_name=_('Primary'))

    class Meta:
        verbose_name = _('Batch barcode')
        verbose_name_plural = _('Batch barcodes')

    def __str__(self) -> str:
        return self.code
