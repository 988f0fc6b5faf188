"""
Stockledger Models.

Core models for the inventory stock ledger:
- Unit / UnitConversion: measurement units and directed conversion edges
- Product / ProductVariant / Supplier: catalog records the ledger references
- ProductBatch: quantity-on-hand per lot
- BatchBarcode: barcodes scoped to a batch
- StockIn / StockOut: immutable ledger of batch changes
- Transaction / TransactionItem: sales, read as implicit stock-outs
"""

from stockledger.models.batch import BatchBarcode, ProductBatch
from stockledger.models.catalog import Product, ProductVariant, Supplier
from stockledger.models.enums import MovementType, SortDirection, StockOutSource
from stockledger.models.movement import StockIn, StockOut
from stockledger.models.sales import Transaction, TransactionItem
from stockledger.models.unit import Unit, UnitConversion

__all__ = [
    'MovementType',
    'SortDirection',
    'StockOutSource',
    'Unit',
    'UnitConversion',
    'Product',
    'ProductVariant',
    'Supplier',
    'ProductBatch',
    'BatchBarcode',
    'StockIn',
    'StockOut',
    'Transaction',
    'TransactionItem',
]
