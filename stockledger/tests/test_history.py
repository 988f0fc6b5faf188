"""
Tests for movement history queries.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from stockledger import ledger, StockError
from stockledger.models import MovementType


pytestmark = pytest.mark.django_db


class TestStockHistory:
    """Tests for ledger.get_stock_history()."""

    def test_merges_ins_and_outs_newest_first(self, variant, variant_batch, supplier):
        now = timezone.now()
        ledger.record_stock_in(variant_batch, 100, supplier=supplier, date=now - timedelta(days=3))
        ledger.record_stock_out(variant_batch, 50, reason='Damaged', date=now - timedelta(days=1))
        ledger.record_stock_in(variant_batch, 10, date=now - timedelta(days=2))

        history = ledger.get_stock_history(variant)

        assert [row.type for row in history] == [MovementType.OUT, MovementType.IN, MovementType.IN]
        assert history[0].reason == 'Damaged'
        assert history[2].supplier == supplier
        assert history[2].base_quantity == Decimal('100')

    def test_spans_all_variant_batches(self, variant, variant_batch, expiry):
        other = ledger.add_batch(variant, 'COF-LOT-2', expiry, 100)
        ledger.record_stock_out(variant_batch, 1, reason='Spill')
        ledger.record_stock_out(other, 1, reason='Spill')

        history = ledger.get_stock_history(variant)

        assert {row.batch_id for row in history} == {variant_batch.pk, other.pk}

    def test_excludes_sales(self, variant, variant_batch):
        """Sale line items are not StockIn/StockOut rows."""
        from stockledger import SaleLine

        ledger.consume_for_sale([SaleLine(variant_batch, 5)])

        assert ledger.get_stock_history(variant) == []

    def test_unknown_variant(self, db):
        with pytest.raises(StockError) as exc:
            ledger.get_stock_history(31337)

        assert exc.value.code == 'VARIANT_NOT_FOUND'


class TestBatchHistory:
    """Tests for ledger.get_batch_stock_movement_history()."""

    def test_only_this_batch(self, batch, variant_batch):
        ledger.record_stock_out(batch, 1, reason='Damaged')
        ledger.record_stock_out(variant_batch, 1, reason='Damaged')

        history = ledger.get_batch_stock_movement_history(batch)

        assert len(history) == 1
        assert history[0].batch_code == 'LOT-100'

    def test_unknown_batch(self, db):
        with pytest.raises(StockError) as exc:
            ledger.get_batch_stock_movement_history(31337)

        assert exc.value.code == 'BATCH_NOT_FOUND'


class TestProductHistory:
    def test_includes_variant_batches(self, coffee, variant_batch, expiry):
        own = ledger.add_batch(None, 'COF-BULK', expiry, 3, product=coffee)
        ledger.record_stock_in(own, 1)
        ledger.record_stock_out(variant_batch, 1, reason='Spill')

        history = ledger.get_product_stock_movement_history(coffee)

        assert len(history) == 2
