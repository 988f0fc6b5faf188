"""
Stock ledger services — modular organization of ledger operations.

Re-exports all public service classes:
    from stockledger.services import StockMovements, UnitConversions, StockListings
"""

from stockledger.services.audit import CounterDrift, StockAudit
from stockledger.services.conversions import UnitConversions
from stockledger.services.history import MovementRow, StockHistory
from stockledger.services.listings import (
    Page,
    SearchParams,
    StockListings,
    StockOutPage,
    StockOutRow,
)
from stockledger.services.movements import SaleLine, StockMovements

__all__ = [
    'StockMovements',
    'UnitConversions',
    'StockListings',
    'StockHistory',
    'StockAudit',
    'SaleLine',
    'SearchParams',
    'Page',
    'StockOutPage',
    'StockOutRow',
    'MovementRow',
    'CounterDrift',
]
