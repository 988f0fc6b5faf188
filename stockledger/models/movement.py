"""
StockIn / StockOut models — immutable ledger of batch quantity changes.
"""

from django.conf import settings
from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.exceptions import StockError


class LedgerEvent(models.Model):
    """
    Immutable record of a batch quantity change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new events in the opposite direction
    - Updates ProductBatch.remaining_quantity and the owner's counter
      atomically on save()

    quantity/unit are what the caller recorded; base_quantity is the same
    amount in the batch's native unit, which is what hits the batch.
    """

    direction = 0

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity'),
    )
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
    date = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Date'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('User'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ['-date']

    def clean_event(self):
        """Per-event validation hook, runs before the row is written."""

    def save(self, *args, **kwargs):
        """Save event and update batch + owner counters atomically."""
        if self.pk:
            raise StockError('IMMUTABLE_RECORD', record=str(self))

        self.clean_event()

        with transaction.atomic():
            if self.direction < 0:
                self._check_available()
            super().save(*args, **kwargs)
            self.batch.apply_delta(self.direction * self.base_quantity)

    def _check_available(self):
        """Lock the batch row and refuse to take it below zero."""
        from stockledger.models.batch import ProductBatch

        available = ProductBatch.objects.select_for_update().values_list(
            'remaining_quantity', flat=True,
        ).get(pk=self.batch_id)
        if available < self.base_quantity:
            raise StockError(
                'INSUFFICIENT_QUANTITY',
                batch_id=self.batch_id,
                available=available,
                requested=self.base_quantity,
            )

    def delete(self, *args, **kwargs):
        """Prevent deletion — events are immutable."""
        raise StockError('IMMUTABLE_RECORD', record=str(self))


class StockIn(LedgerEvent):
    """Quantity added to a batch (supplier delivery, positive correction)."""

    direction = 1

    batch = models.ForeignKey(
        'stockledger.ProductBatch',
        on_delete=models.PROTECT,
        related_name='stock_ins',
        verbose_name=_('Batch'),
    )
    supplier = models.ForeignKey(
        'stockledger.Supplier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_ins',
        verbose_name=_('Supplier'),
    )

    class Meta(LedgerEvent.Meta):
        verbose_name = _('Stock in')
        verbose_name_plural = _('Stock ins')
        indexes = [
            models.Index(fields=['batch', 'date'], name='sl_stockin_batch_date_idx'),
        ]

    def __str__(self) -> str:
        return f"+{self.quantity} {self.unit} | batch {self.batch_id}"


class StockOut(LedgerEvent):
    """Quantity manually removed from a batch (spoilage, correction...)."""

    direction = -1

    batch = models.ForeignKey(
        'stockledger.ProductBatch',
        on_delete=models.PROTECT,
        related_name='stock_outs',
        verbose_name=_('Batch'),
    )
    reason = models.CharField(
        max_length=255,
        verbose_name=_('Reason'),
        help_text=_('Required. E.g. "Expired", "Damaged in transit"'),
    )

    class Meta(LedgerEvent.Meta):
        verbose_name = _('Stock out')
        verbose_name_plural = _('Stock outs')
        indexes = [
            models.Index(fields=['batch', 'date'], name='sl_stockout_batch_date_idx'),
        ]

    def clean_event(self):
        if not self.reason or not self.reason.strip():
            raise StockError('REASON_REQUIRED')

    def __str__(self) -> str:
        return f"-{self.quantity} {self.unit} | {self.reason}"
