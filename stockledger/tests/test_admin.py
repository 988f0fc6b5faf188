"""
Smoke tests for the admin registrations.
"""

import pytest
from django.contrib import admin
from django.urls import reverse

from stockledger import ledger
from stockledger.models import ProductBatch, StockIn, StockOut, Unit, UnitConversion


pytestmark = pytest.mark.django_db


class TestAdminRegistration:
    @pytest.mark.parametrize('model', [Unit, UnitConversion, ProductBatch, StockIn, StockOut])
    def test_registered(self, model):
        assert admin.site.is_registered(model)

    def test_stock_out_changelist(self, admin_client, batch):
        ledger.record_stock_out(batch, 1, reason='Damaged')

        response = admin_client.get(reverse('admin:stockledger_stockout_changelist'))

        assert response.status_code == 200
        assert b'Damaged' in response.content

    def test_stock_out_is_read_only(self, admin_client, batch):
        stock_out = ledger.record_stock_out(batch, 1, reason='Damaged')

        add = admin_client.get(reverse('admin:stockledger_stockout_add'))
        delete = admin_client.post(
            reverse('admin:stockledger_stockout_delete', args=[stock_out.pk]), {'post': 'yes'},
        )

        assert add.status_code == 403
        assert delete.status_code == 403
        assert StockOut.objects.filter(pk=stock_out.pk).exists()

    def test_batch_change_page(self, admin_client, batch):
        response = admin_client.get(
            reverse('admin:stockledger_productbatch_change', args=[batch.pk]),
        )

        assert response.status_code == 200
