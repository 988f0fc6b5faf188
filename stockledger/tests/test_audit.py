"""
Tests for counter audit and the sync_stock_counters command.
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from stockledger import ledger
from stockledger.models import Product, ProductBatch, ProductVariant


pytestmark = pytest.mark.django_db


class TestFindCounterDrift:
    """Tests for ledger.find_counter_drift()."""

    def test_clean_ledger_has_no_drift(self, batch, variant_batch):
        ledger.record_stock_out(batch, 10, reason='Damaged')
        ledger.record_stock_in(variant_batch, 5)

        assert ledger.find_counter_drift(include_batches=True) == []

    def test_detects_product_drift(self, batch, product):
        Product.objects.filter(pk=product.pk).update(current_stock=Decimal('7'))

        drift = ledger.find_counter_drift()

        assert len(drift) == 1
        assert drift[0].kind == 'product'
        assert drift[0].stored == Decimal('7')
        assert drift[0].expected == Decimal('100')
        assert drift[0].difference == Decimal('-93')

    def test_variant_batches_do_not_count_for_product(self, coffee, variant, variant_batch):
        """Coffee owns no batches itself, so 0 is its correct counter."""
        assert ledger.find_counter_drift() == []

    def test_detects_batch_drift(self, batch):
        ProductBatch.objects.filter(pk=batch.pk).update(remaining_quantity=Decimal('50'))

        kinds = {item.kind for item in ledger.find_counter_drift(include_batches=True)}

        assert 'batch' in kinds

    def test_logs_drift(self, batch, product, caplog):
        Product.objects.filter(pk=product.pk).update(current_stock=Decimal('1'))

        with caplog.at_level('WARNING', logger='stockledger'):
            ledger.find_counter_drift()

        assert 'stock.counter.drift' in caplog.text


class TestSyncCounters:
    """Tests for ledger.sync_counters()."""

    def test_repairs_counters(self, batch, product, variant, variant_batch):
        Product.objects.filter(pk=product.pk).update(current_stock=Decimal('0'))
        ProductVariant.objects.filter(pk=variant.pk).update(current_stock=Decimal('1'))

        fixed = ledger.sync_counters()

        product.refresh_from_db()
        variant.refresh_from_db()
        assert len(fixed) == 2
        assert product.current_stock == Decimal('100')
        assert variant.current_stock == Decimal('5000')
        assert ledger.find_counter_drift() == []

    def test_dry_run_changes_nothing(self, batch, product):
        Product.objects.filter(pk=product.pk).update(current_stock=Decimal('0'))

        assert len(ledger.sync_counters(dry_run=True)) == 1

        product.refresh_from_db()
        assert product.current_stock == Decimal('0')


class TestSyncStockCountersCommand:
    def test_command(self, batch, product):
        Product.objects.filter(pk=product.pk).update(current_stock=Decimal('3'))
        out = StringIO()

        call_command('sync_stock_counters', stdout=out)

        product.refresh_from_db()
        assert product.current_stock == Decimal('100')
        assert '1 counter(s) corrected' in out.getvalue()

    def test_command_dry_run(self, batch, product):
        Product.objects.filter(pk=product.pk).update(current_stock=Decimal('3'))
        out = StringIO()

        call_command('sync_stock_counters', '--dry-run', stdout=out)

        product.refresh_from_db()
        assert product.current_stock == Decimal('3')
        assert 'would be corrected' in out.getvalue()
