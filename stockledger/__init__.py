"""
Django Stockledger — batch-based inventory stock ledger.

Usage:
    from stockledger import ledger, StockError

    batch = ledger.add_batch(variant, 'LOT-A', expiry, 100)
    ledger.record_stock_out(batch, 40, reason='Spoiled')
    ledger.list_stock_outs()
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from stockledger.service import Ledger
        return Ledger
    elif name == 'StockError':
        from stockledger.exceptions import StockError
        return StockError
    elif name == 'SearchParams':
        from stockledger.services.listings import SearchParams
        return SearchParams
    elif name == 'SaleLine':
        from stockledger.services.movements import SaleLine
        return SaleLine
    elif name == 'Unit':
        from stockledger.models.unit import Unit
        return Unit
    elif name == 'UnitConversion':
        from stockledger.models.unit import UnitConversion
        return UnitConversion
    elif name == 'ProductBatch':
        from stockledger.models.batch import ProductBatch
        return ProductBatch
    elif name == 'StockIn':
        from stockledger.models.movement import StockIn
        return StockIn
    elif name == 'StockOut':
        from stockledger.models.movement import StockOut
        return StockOut
    elif name == 'StockOutSource':
        from stockledger.models.enums import StockOutSource
        return StockOutSource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'StockError',
    'SearchParams',
    'SaleLine',
    'Unit',
    'UnitConversion',
    'ProductBatch',
    'StockIn',
    'StockOut',
    'StockOutSource',
]

__version__ = '0.1.0'
