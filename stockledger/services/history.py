"""
Stock history — read-only, fully materialized movement timelines.

History is scoped to one variant, batch or product, so loading every
event and sorting in memory is acceptable. No locking.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from stockledger.exceptions import StockError
from stockledger.models.batch import ProductBatch
from stockledger.models.catalog import Product, ProductVariant, Supplier
from stockledger.models.enums import MovementType
from stockledger.models.movement import StockIn, StockOut
from stockledger.models.unit import Unit


@dataclass(frozen=True)
class MovementRow:
    """One StockIn or StockOut, tagged by type."""

    id: int
    type: MovementType
    date: datetime
    quantity: Decimal
    base_quantity: Decimal
    unit: Unit
    batch_id: int
    batch_code: str
    supplier: Supplier | None = None
    reason: str | None = None


def _rows(stock_ins, stock_outs) -> list[MovementRow]:
    rows = [
        MovementRow(
            id=item.pk,
            type=MovementType.IN,
            date=item.date,
            quantity=item.quantity,
            base_quantity=item.base_quantity,
            unit=item.unit,
            batch_id=item.batch_id,
            batch_code=item.batch.batch_code,
            supplier=item.supplier,
        )
        for item in stock_ins.select_related('batch', 'unit', 'supplier')
    ]
    rows += [
        MovementRow(
            id=item.pk,
            type=MovementType.OUT,
            date=item.date,
            quantity=item.quantity,
            base_quantity=item.base_quantity,
            unit=item.unit,
            batch_id=item.batch_id,
            batch_code=item.batch.batch_code,
            reason=item.reason,
        )
        for item in stock_outs.select_related('batch', 'unit')
    ]
    # Newest first
    return sorted(rows, key=lambda row: row.date, reverse=True)


class StockHistory:
    """Read-only movement history queries."""

    @classmethod
    def get_stock_history(cls, variant) -> list[MovementRow]:
        """
        All stock-ins and stock-outs for every batch of a variant.

        Raises:
            StockError('VARIANT_NOT_FOUND')
        """
        pk = variant.pk if isinstance(variant, ProductVariant) else variant
        if not ProductVariant.objects.filter(pk=pk).exists():
            raise StockError('VARIANT_NOT_FOUND', variant_id=pk)

        return _rows(
            StockIn.objects.filter(batch__variant_id=pk),
            StockOut.objects.filter(batch__variant_id=pk),
        )

    @classmethod
    def get_batch_stock_movement_history(cls, batch) -> list[MovementRow]:
        """
        All stock-ins and stock-outs of one batch.

        Raises:
            StockError('BATCH_NOT_FOUND')
        """
        pk = batch.pk if isinstance(batch, ProductBatch) else batch
        if not ProductBatch.objects.filter(pk=pk).exists():
            raise StockError('BATCH_NOT_FOUND', batch_id=pk)

        return _rows(
            StockIn.objects.filter(batch_id=pk),
            StockOut.objects.filter(batch_id=pk),
        )

    @classmethod
    def get_product_stock_movement_history(cls, product) -> list[MovementRow]:
        """Product-wide history, variant batches included."""
        pk = product.pk if isinstance(product, Product) else product
        if not Product.objects.filter(pk=pk).exists():
            raise StockError('PRODUCT_NOT_FOUND', product_id=pk)

        return _rows(
            StockIn.objects.filter(batch__product_id=pk),
            StockOut.objects.filter(batch__product_id=pk),
        )
