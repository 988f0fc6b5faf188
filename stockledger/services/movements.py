"""
Stock movements — state-changing operations on batches.

This is the only writer of batch quantities. All methods use
transaction.atomic() and lock the batch row with select_for_update()
before validating, so checks and writes share one atomic scope.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError
from stockledger.models.batch import BatchBarcode, ProductBatch
from stockledger.models.catalog import Product, ProductVariant, Supplier
from stockledger.models.movement import StockIn, StockOut
from stockledger.models.sales import Transaction, TransactionItem
from stockledger.quantities import (
    check_quantity_limit,
    positive_decimal,
    quantize_quantity,
    to_decimal,
)
from stockledger.services.conversions import UnitConversions

logger = logging.getLogger('stockledger')


@dataclass(frozen=True)
class SaleLine:
    """One line of a checkout: how much of which batch, in which unit."""

    batch: object
    quantity: Decimal
    unit: object = None  # None = batch's native unit
    unit_price: Decimal = Decimal('0')


class StockMovements:
    """State-changing stock movement methods."""

    @classmethod
    def record_stock_in(cls, batch, quantity, unit=None, date=None,
                        supplier=None, user=None) -> StockIn:
        """
        Add quantity to a batch.

        Creates StockIn, increments remaining_quantity and the owner's
        current_stock by the quantity converted to the batch's unit.

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('BATCH_NOT_FOUND'): If the batch does not exist
            StockError('UNIT_NOT_FOUND'|'NO_CONVERSION_PATH'): Bad unit
            StockError('SUPPLIER_NOT_FOUND'): Unknown supplier id

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on ProductBatch
            - StockIn.save() updates counters with F() expressions
        """
        qty = cls._clean_quantity(quantity)

        with transaction.atomic():
            locked = cls._lock_batch(batch)
            unit_pk, base = cls._to_native(locked, qty, unit)
            check_quantity_limit(locked.remaining_quantity + base)
            supplier_obj = cls._resolve_supplier(supplier)

            stock_in = StockIn.objects.create(
                batch=locked,
                quantity=cls._recorded(qty),
                unit_id=unit_pk,
                base_quantity=base,
                date=date or timezone.now(),
                supplier=supplier_obj,
                user=user,
            )
            logger.info(
                "stock.in",
                extra={
                    "batch_id": locked.pk,
                    "qty": str(qty),
                    "unit_id": unit_pk,
                    "base_qty": str(base),
                    "supplier_id": supplier_obj.pk if supplier_obj else None,
                },
            )
            return stock_in

    @classmethod
    def record_stock_out(cls, batch, quantity, unit=None, date=None,
                         reason='', user=None) -> StockOut:
        """
        Remove quantity from a batch for a reason (spoilage, correction...).

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('REASON_REQUIRED'): If reason is blank
            StockError('BATCH_NOT_FOUND'): If the batch does not exist
            StockError('INSUFFICIENT_QUANTITY'): If quantity > remaining

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on ProductBatch
            - Verifies remaining quantity after lock
        """
        qty = cls._clean_quantity(quantity)
        if not reason or not reason.strip():
            raise StockError('REASON_REQUIRED')

        with transaction.atomic():
            locked = cls._lock_batch(batch)
            unit_pk, base = cls._to_native(locked, qty, unit)

            if locked.remaining_quantity < base:
                raise StockError(
                    'INSUFFICIENT_QUANTITY',
                    batch_id=locked.pk,
                    available=locked.remaining_quantity,
                    requested=base,
                )

            stock_out = StockOut.objects.create(
                batch=locked,
                quantity=cls._recorded(qty),
                unit_id=unit_pk,
                base_quantity=base,
                date=date or timezone.now(),
                reason=reason.strip(),
                user=user,
            )
            logger.info(
                "stock.out",
                extra={
                    "batch_id": locked.pk,
                    "qty": str(qty),
                    "unit_id": unit_pk,
                    "base_qty": str(base),
                    "reason": stock_out.reason,
                },
            )
            return stock_out

    @classmethod
    def add_batch(cls, variant, batch_code, expiry_date, initial_quantity,
                  buy_price=Decimal('0'), unit=None, barcodes=None,
                  product=None) -> ProductBatch:
        """
        Receive a new batch.

        Pass a variant (variant-level batch) or product= with variant=None
        (product-level batch). The batch starts with
        remaining_quantity = initial_quantity and the owner's counter is
        incremented by the same amount. No StockIn is recorded: creating
        the batch is the receipt.

        Barcodes are scoped to the batch; the first one is primary.

        Raises:
            StockError('INVALID_OWNER'): Neither or mismatched owners
            StockError('VARIANT_NOT_FOUND'|'PRODUCT_NOT_FOUND')
            StockError('INVALID_QUANTITY'): If initial_quantity <= 0
            StockError('INVALID_FIELD'): Blank code, missing expiry, negative price
            StockError('DUPLICATE_BARCODE'): Barcode already used
        """
        owner_product, owner_variant = cls._resolve_owner(variant, product)
        qty = cls._clean_quantity(initial_quantity)

        if not batch_code or not str(batch_code).strip():
            raise StockError('INVALID_FIELD', field='batch_code')
        if expiry_date is None:
            raise StockError('INVALID_FIELD', field='expiry_date')
        price = to_decimal(buy_price, 'INVALID_FIELD')
        if price < 0:
            raise StockError('INVALID_FIELD', field='buy_price', value=str(price))

        codes = [str(code).strip() for code in (barcodes or []) if str(code).strip()]
        if len(set(codes)) != len(codes):
            raise StockError('DUPLICATE_BARCODE', codes=codes)
        taken = list(BatchBarcode.objects.filter(code__in=codes).values_list('code', flat=True))
        if taken:
            raise StockError('DUPLICATE_BARCODE', codes=taken)

        native_unit = (owner_variant or owner_product).unit_id
        unit_pk = cls._unit_or_default(unit, native_unit)
        base = cls._converted(unit_pk, native_unit, qty)

        with transaction.atomic():
            batch = ProductBatch.objects.create(
                product=owner_product,
                variant=owner_variant,
                batch_code=str(batch_code).strip(),
                expiry_date=expiry_date,
                initial_quantity=base,
                remaining_quantity=Decimal('0'),
                buy_price=price,
            )
            batch.apply_delta(base)

            if codes:
                BatchBarcode.objects.bulk_create([
                    BatchBarcode(batch=batch, code=code, is_primary=(index == 0))
                    for index, code in enumerate(codes)
                ])

            batch.refresh_from_db()
            logger.info(
                "batch.add",
                extra={
                    "batch_id": batch.pk,
                    "batch_code": batch.batch_code,
                    "variant_id": owner_variant.pk if owner_variant else None,
                    "product_id": owner_product.pk,
                    "qty": str(base),
                },
            )
            return batch

    @classmethod
    def add_stock_to_batch(cls, batch, quantity, supplier=None, user=None) -> ProductBatch:
        """Stock-in in the batch's own unit, dated now. Returns the updated batch."""
        stock_in = cls.record_stock_in(batch, quantity, supplier=supplier, user=user)
        return ProductBatch.objects.get(pk=stock_in.batch_id)

    @classmethod
    def remove_stock_from_batch(cls, batch, quantity, reason, user=None) -> ProductBatch:
        """Stock-out (wastage, damage...) in the batch's own unit. Returns the updated batch."""
        stock_out = cls.record_stock_out(batch, quantity, reason=reason, user=user)
        return ProductBatch.objects.get(pk=stock_out.batch_id)

    @classmethod
    def adjust_quantity(cls, batch, adjustment, reason='', unit=None, user=None):
        """
        Inventory correction by a signed amount.

        Positive -> StockIn, negative -> StockOut, zero -> None.
        """
        delta = to_decimal(adjustment)
        if delta == 0:
            return None

        if delta > 0:
            return cls.record_stock_in(batch, delta, unit=unit, user=user)

        return cls.record_stock_out(
            batch,
            -delta,
            unit=unit,
            reason=reason or stockledger_settings.DEFAULT_ADJUSTMENT_REASON,
            user=user,
        )

    @classmethod
    def update_batch(cls, batch, batch_code=None, expiry_date=None,
                     buy_price=None) -> ProductBatch:
        """Update batch metadata. Quantities cannot be edited here."""
        pk = cls._batch_pk(batch)
        try:
            instance = ProductBatch.objects.get(pk=pk)
        except ProductBatch.DoesNotExist:
            raise StockError('BATCH_NOT_FOUND', batch_id=pk)

        fields = []
        if batch_code is not None:
            if not str(batch_code).strip():
                raise StockError('INVALID_FIELD', field='batch_code')
            instance.batch_code = str(batch_code).strip()
            fields.append('batch_code')
        if expiry_date is not None:
            instance.expiry_date = expiry_date
            fields.append('expiry_date')
        if buy_price is not None:
            price = to_decimal(buy_price, 'INVALID_FIELD')
            if price < 0:
                raise StockError('INVALID_FIELD', field='buy_price', value=str(price))
            instance.buy_price = price
            fields.append('buy_price')

        if fields:
            instance.save(update_fields=fields + ['updated_at'])
        return instance

    @classmethod
    def consume_for_sale(cls, lines, tran_id='', final_amount=Decimal('0'),
                         date=None) -> Transaction:
        """
        Sale-driven decrement, called by checkout.

        Creates the Transaction and its TransactionItem rows and decrements
        each batch and owner counter. No StockOut rows are written: the
        line items are the stock-out record.

        Either every line is applied or none is.

        Raises:
            StockError('INVALID_FIELD'): If there are no lines
            StockError('BATCH_NOT_FOUND'): Unknown batch
            StockError('INSUFFICIENT_QUANTITY'): A batch cannot cover its lines

        Concurrency:
            - Runs under transaction.atomic()
            - Locks every referenced batch, in pk order
        """
        lines = list(lines)
        if not lines:
            raise StockError('INVALID_FIELD', field='lines')

        cleaned = [
            (cls._batch_pk(line.batch), cls._clean_quantity(line.quantity), line)
            for line in lines
        ]
        amount = to_decimal(final_amount, 'INVALID_FIELD')

        with transaction.atomic():
            locked = {
                pk: cls._lock_batch(pk)
                for pk in sorted({pk for pk, _, _ in cleaned})
            }

            prepared = []
            needed = defaultdict(Decimal)
            for pk, qty, line in cleaned:
                unit_pk, base = cls._to_native(locked[pk], qty, line.unit)
                needed[pk] += base
                prepared.append((
                    locked[pk],
                    cls._recorded(qty),
                    unit_pk,
                    base,
                    to_decimal(line.unit_price, 'INVALID_FIELD'),
                ))

            for pk, total in needed.items():
                if locked[pk].remaining_quantity < total:
                    raise StockError(
                        'INSUFFICIENT_QUANTITY',
                        batch_id=pk,
                        available=locked[pk].remaining_quantity,
                        requested=total,
                    )

            sale = Transaction.objects.create(
                tran_id=tran_id,
                final_amount=amount,
                created_at=date or timezone.now(),
            )
            TransactionItem.objects.bulk_create([
                TransactionItem(
                    transaction=sale,
                    batch=batch,
                    quantity=qty,
                    unit_id=unit_pk,
                    base_quantity=base,
                    unit_price=price,
                )
                for batch, qty, unit_pk, base, price in prepared
            ])

            for pk, total in needed.items():
                locked[pk].apply_delta(-total)

            logger.info(
                "stock.sale",
                extra={
                    "transaction_id": sale.pk,
                    "lines": len(prepared),
                    "batches": sorted(needed),
                },
            )
            return sale

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _clean_quantity(cls, quantity) -> Decimal:
        """Positive and within field capacity, not rounded yet."""
        return check_quantity_limit(positive_decimal(quantity))

    @classmethod
    def _recorded(cls, qty: Decimal) -> Decimal:
        """The caller's quantity as stored on the event row."""
        value = quantize_quantity(qty)
        if value <= 0:
            raise StockError('INVALID_QUANTITY', requested=qty)
        return value

    @classmethod
    def _batch_pk(cls, batch):
        return batch.pk if isinstance(batch, ProductBatch) else batch

    @classmethod
    def _lock_batch(cls, batch) -> ProductBatch:
        pk = cls._batch_pk(batch)
        try:
            return ProductBatch.objects.select_for_update().get(pk=pk)
        except ProductBatch.DoesNotExist:
            raise StockError('BATCH_NOT_FOUND', batch_id=pk)

    @classmethod
    def _native_unit_pk(cls, batch: ProductBatch):
        if batch.variant_id:
            return ProductVariant.objects.values_list('unit_id', flat=True).get(pk=batch.variant_id)
        return Product.objects.values_list('unit_id', flat=True).get(pk=batch.product_id)

    @classmethod
    def _unit_or_default(cls, unit, default_pk):
        if unit is None:
            return default_pk
        return UnitConversions.require_unit(unit)

    @classmethod
    def _converted(cls, unit_pk, native_pk, qty: Decimal) -> Decimal:
        base = quantize_quantity(UnitConversions.convert(unit_pk, native_pk, qty))
        if base <= 0:
            raise StockError('INVALID_QUANTITY', requested=qty)
        return base

    @classmethod
    def _to_native(cls, batch: ProductBatch, qty: Decimal, unit):
        """Return (unit pk recorded, quantity in the batch's unit)."""
        native_pk = cls._native_unit_pk(batch)
        unit_pk = cls._unit_or_default(unit, native_pk)
        return unit_pk, cls._converted(unit_pk, native_pk, qty)

    @classmethod
    def _resolve_owner(cls, variant, product):
        """Return (product, variant or None) for a new batch."""
        if variant is not None:
            if isinstance(variant, ProductVariant):
                variant_obj = variant
            else:
                try:
                    variant_obj = ProductVariant.objects.select_related('product').get(pk=variant)
                except ProductVariant.DoesNotExist:
                    raise StockError('VARIANT_NOT_FOUND', variant_id=variant)
            if product is not None:
                product_pk = product.pk if isinstance(product, Product) else product
                if product_pk != variant_obj.product_id:
                    raise StockError('INVALID_OWNER', variant_id=variant_obj.pk, product_id=product_pk)
            return variant_obj.product, variant_obj

        if product is None:
            raise StockError('INVALID_OWNER')
        if isinstance(product, Product):
            return product, None
        try:
            return Product.objects.get(pk=product), None
        except Product.DoesNotExist:
            raise StockError('PRODUCT_NOT_FOUND', product_id=product)

    @classmethod
    def _resolve_supplier(cls, supplier):
        if supplier is None or isinstance(supplier, Supplier):
            return supplier
        try:
            return Supplier.objects.get(pk=supplier)
        except Supplier.DoesNotExist:
            raise StockError('SUPPLIER_NOT_FOUND', supplier_id=supplier)
