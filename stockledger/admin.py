"""
Stockledger Admin.

- Unit / UnitConversion / Supplier: editable
- Product / ProductVariant: editable, current_stock read-only
- ProductBatch: metadata editable, quantities read-only, no add/delete
  (batches are received through ledger.add_batch)
- StockIn / StockOut: read-only audit trail
- Transaction: read-only, line items inline
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockledger.models import (
    BatchBarcode,
    Product,
    ProductBatch,
    ProductVariant,
    StockIn,
    StockOut,
    Supplier,
    Transaction,
    TransactionItem,
    Unit,
    UnitConversion,
)


class ReadOnlyAdminMixin:
    """Immutable records: viewable, never added, changed or deleted."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# UNITS
# =========================================================================

@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ['symbol', 'name']
    search_fields = ['symbol', 'name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(UnitConversion)
class UnitConversionAdmin(admin.ModelAdmin):
    """Directed edge: 1 from_unit = factor to_unit."""

    list_display = ['__str__', 'from_unit', 'to_unit', 'factor']
    list_filter = ['from_unit', 'to_unit']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']
    readonly_fields = ['created_at']


class ProductVariantInline(admin.TabularInline):
    model = ProductVariant
    extra = 0
    fields = ['name', 'sku', 'unit', 'current_stock']
    readonly_fields = ['current_stock']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — current_stock only moves through the ledger."""

    list_display = ['name', 'sku', 'unit', 'current_stock']
    search_fields = ['name', 'sku']
    readonly_fields = ['current_stock', 'created_at', 'updated_at']
    inlines = [ProductVariantInline]
    actions = ['sync_stock_counters']

    @admin.action(description=_('Recompute stock counters from batches'))
    def sync_stock_counters(self, request, queryset):
        from stockledger import ledger

        drift = ledger.sync_counters()
        self.message_user(request, _('{count} counter(s) corrected.').format(count=len(drift)))


@admin.register(ProductVariant)
class ProductVariantAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'sku', 'unit', 'current_stock']
    list_filter = ['product']
    search_fields = ['name', 'sku', 'product__name']
    readonly_fields = ['current_stock', 'created_at', 'updated_at']


# =========================================================================
# BATCHES
# =========================================================================

class BatchBarcodeInline(admin.TabularInline):
    model = BatchBarcode
    extra = 0


@admin.register(ProductBatch)
class ProductBatchAdmin(admin.ModelAdmin):
    """Batch admin — lot traceability. Quantities are ledger-owned."""

    list_display = ['batch_code', 'product', 'variant', 'expiry_date',
                    'initial_quantity', 'remaining_quantity', 'is_expired_display']
    list_filter = ['expiry_date']
    search_fields = ['batch_code', 'product__name', 'barcodes__code']
    readonly_fields = ['product', 'variant', 'initial_quantity', 'remaining_quantity',
                       'created_at', 'updated_at']
    date_hierarchy = 'expiry_date'
    inlines = [BatchBarcodeInline]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Expired?'), boolean=True)
    def is_expired_display(self, obj):
        return obj.is_expired


# =========================================================================
# LEDGER EVENTS (read-only audit trail)
# =========================================================================

@admin.register(StockIn)
class StockInAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockIn admin — read-only. Immutable audit trail."""

    list_display = ['date', 'batch', 'quantity', 'unit', 'base_quantity', 'supplier', 'user']
    list_filter = ['date', 'supplier']
    search_fields = ['batch__batch_code', 'batch__product__name']
    date_hierarchy = 'date'


@admin.register(StockOut)
class StockOutAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StockOut admin — read-only. Immutable audit trail."""

    list_display = ['date', 'batch', 'quantity', 'unit', 'base_quantity', 'reason', 'user']
    list_filter = ['date']
    search_fields = ['reason', 'batch__batch_code', 'batch__product__name']
    date_hierarchy = 'date'


class TransactionItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = TransactionItem
    extra = 0


@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Sales read as implicit stock-outs."""

    list_display = ['__str__', 'created_at', 'final_amount']
    search_fields = ['tran_id']
    date_hierarchy = 'created_at'
    inlines = [TransactionItemInline]
