"""
Ledger Service — The single public interface for all stock ledger operations.

Usage:
    from stockledger import ledger, StockError

    batch = ledger.add_batch(variant, 'LOT-A', date(2027, 1, 31), 100)
    ledger.record_stock_out(batch, 40, reason='Damaged')
    ledger.convert_quantity(kg, g, 2)  # Decimal('2000')
    page = ledger.list_stock_outs(SearchParams(page=2, page_size=5))
"""

from stockledger.services.audit import StockAudit
from stockledger.services.conversions import UnitConversions
from stockledger.services.history import StockHistory
from stockledger.services.listings import StockListings
from stockledger.services.movements import StockMovements


class Ledger(StockMovements, UnitConversions, StockListings, StockHistory, StockAudit):
    """
    Single interface for all stock ledger operations.

    Mutations (StockMovements):
        record_stock_in, record_stock_out, add_batch, add_stock_to_batch,
        remove_stock_from_batch, adjust_quantity, update_batch,
        consume_for_sale

    Units (UnitConversions):
        convert_quantity, create_conversion, update_conversion,
        delete_conversion, get_conversions_for_unit, create_unit,
        update_unit, delete_unit, unit_in_use

    Reads (StockListings, StockHistory):
        list_stock_ins, list_stock_outs, list_batches,
        get_stock_history, get_batch_stock_movement_history,
        get_product_stock_movement_history

    Maintenance (StockAudit):
        find_counter_drift, sync_counters

    IMPORTANT: All state-changing methods use atomic transactions
    with row locking. See each method's docstring.
    """

    @classmethod
    def convert_quantity(cls, from_unit, to_unit, quantity):
        """Alias of convert()."""
        return cls.convert(from_unit, to_unit, quantity)

    @classmethod
    def get_all_stock_ins(cls, params=None):
        """Alias of list_stock_ins()."""
        return cls.list_stock_ins(params)

    @classmethod
    def get_all_stock_outs(cls, params=None):
        """Alias of list_stock_outs()."""
        return cls.list_stock_outs(params)
