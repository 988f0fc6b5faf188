"""
Counter audit — detect and repair drift in denormalized stock counters.

Product.current_stock must equal the sum of remaining_quantity over the
product's own batches (variant is null). ProductVariant.current_stock
must equal the sum over the variant's batches. Batch remaining_quantity
must equal what the event tables imply (see
ProductBatch.expected_remaining).
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import DecimalField, OuterRef, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from stockledger.models.batch import ProductBatch
from stockledger.models.catalog import Product, ProductVariant

logger = logging.getLogger('stockledger')

QUANTITY = DecimalField(max_digits=12, decimal_places=3)


@dataclass(frozen=True)
class CounterDrift:
    """One counter whose stored value disagrees with its source of truth."""

    kind: str  # 'product' | 'variant' | 'batch'
    pk: int
    stored: Decimal
    expected: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored - self.expected


def _batch_total(group: str, **filters):
    """Sum of remaining_quantity over the batches matching filters."""
    totals = (
        ProductBatch.objects.filter(**filters)
        .order_by()
        .values(group)
        .annotate(total=Sum('remaining_quantity'))
        .values('total')[:1]
    )
    return Coalesce(Subquery(totals), Value(Decimal('0')), output_field=QUANTITY)


class StockAudit:
    """Counter drift detection and repair."""

    @classmethod
    def find_counter_drift(cls, include_batches: bool = False) -> list[CounterDrift]:
        """
        List every counter that disagrees with the batches under it.

        With include_batches=True, batch remaining_quantity is also
        checked against its event history.
        """
        drift = []

        products = Product.objects.annotate(
            expected=_batch_total('product', product=OuterRef('pk'), variant__isnull=True),
        ).values_list('pk', 'current_stock', 'expected')
        for pk, stored, expected in products:
            if stored != expected:
                drift.append(CounterDrift('product', pk, stored, expected))

        variants = ProductVariant.objects.annotate(
            expected=_batch_total('variant', variant=OuterRef('pk')),
        ).values_list('pk', 'current_stock', 'expected')
        for pk, stored, expected in variants:
            if stored != expected:
                drift.append(CounterDrift('variant', pk, stored, expected))

        if include_batches:
            for batch in ProductBatch.objects.all():
                expected = batch.expected_remaining()
                if batch.remaining_quantity != expected:
                    drift.append(
                        CounterDrift('batch', batch.pk, batch.remaining_quantity, expected)
                    )

        for item in drift:
            logger.warning(
                "stock.counter.drift",
                extra={
                    "kind": item.kind,
                    "pk": item.pk,
                    "stored": str(item.stored),
                    "expected": str(item.expected),
                },
            )
        return drift

    @classmethod
    def sync_counters(cls, dry_run: bool = False) -> list[CounterDrift]:
        """
        Rewrite drifted product and variant counters from batch totals.

        Batch drift is reported by find_counter_drift() but never repaired
        here: rewriting a batch would hide a missing event.

        Returns:
            The product/variant drift found (and fixed unless dry_run)
        """
        with transaction.atomic():
            drift = [item for item in cls.find_counter_drift() if item.kind != 'batch']
            if dry_run:
                return drift

            for item in drift:
                model = Product if item.kind == 'product' else ProductVariant
                model.objects.filter(pk=item.pk).update(current_stock=item.expected)

            if drift:
                logger.info("stock.counter.sync", extra={"fixed": len(drift)})
            return drift
