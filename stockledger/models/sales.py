"""
Transaction / TransactionItem models — sales records owned by the
checkout subsystem.

A sale that consumes batch quantity is NOT mirrored into a StockOut row.
Its line items stay here and the unified stock-out view reads them as
implicit stock-outs.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Transaction(models.Model):
    """Completed sale."""

    tran_id = models.CharField(max_length=64, blank=True, default='', db_index=True,
                               verbose_name=_('Transaction number'))
    final_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Final amount'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Date'))

    class Meta:
        verbose_name = _('Transaction')
        verbose_name_plural = _('Transactions')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return self.tran_id or f"Transaction {self.pk}"


class TransactionItem(models.Model):
    """Sale line item drawing quantity from one batch."""

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Transaction'),
    )
    batch = models.ForeignKey(
        'stockledger.ProductBatch',
        on_delete=models.PROTECT,
        related_name='transaction_items',
        verbose_name=_('Batch'),
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantity'))
    unit = models.ForeignKey(
        'stockledger.Unit',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Unit'),
    )
    base_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity (batch unit)'),
    )
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Unit price'),
    )

    class Meta:
        verbose_name = _('Transaction item')
        verbose_name_plural = _('Transaction items')

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit} | {self.transaction}"
