"""
Exceptions for Stockledger.

All errors are StockError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


CATEGORY_VALIDATION = 'validation'
CATEGORY_INSUFFICIENT_STOCK = 'insufficient_stock'
CATEGORY_NOT_FOUND = 'not_found'
CATEGORY_NO_CONVERSION_PATH = 'no_conversion_path'


class StockError(Exception):
    """
    Structured exception for ledger operations.

    Usage:
        try:
            ledger.record_stock_out(batch, 10, reason='Spoiled')
        except StockError as e:
            if e.code == 'INSUFFICIENT_QUANTITY':
                print(f"Only {e.available} left in the batch")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
        category: validation | insufficient_stock | not_found | no_conversion_path
    """

    _default_messages = {
        'INVALID_QUANTITY': 'Quantity must be positive',
        'INVALID_FACTOR': 'Conversion factor must be positive',
        'INVALID_CONVERSION': 'A unit cannot be converted to itself',
        'DUPLICATE_CONVERSION': 'A conversion between these units already exists',
        'DUPLICATE_BARCODE': 'Barcode already exists',
        'REASON_REQUIRED': 'A reason is required',
        'INVALID_OWNER': 'A batch belongs to exactly one product or variant',
        'INVALID_SEARCH_PARAMS': 'Invalid search parameters',
        'INVALID_FIELD': 'Invalid or missing field',
        'IMMUTABLE_RECORD': 'Stock movements are immutable',
        'DUPLICATE_UNIT': 'A unit with this symbol already exists',
        'UNIT_IN_USE': 'Unit is in use and cannot be deleted',
        'INSUFFICIENT_QUANTITY': 'Insufficient quantity in the batch',
        'BATCH_NOT_FOUND': 'Product batch not found',
        'VARIANT_NOT_FOUND': 'Variant not found',
        'PRODUCT_NOT_FOUND': 'Product not found',
        'UNIT_NOT_FOUND': 'Unit not found',
        'SUPPLIER_NOT_FOUND': 'Supplier not found',
        'CONVERSION_NOT_FOUND': 'Unit conversion not found',
        'NO_CONVERSION_PATH': 'No conversion found between the specified units',
    }

    _categories = {
        'INSUFFICIENT_QUANTITY': CATEGORY_INSUFFICIENT_STOCK,
        'BATCH_NOT_FOUND': CATEGORY_NOT_FOUND,
        'VARIANT_NOT_FOUND': CATEGORY_NOT_FOUND,
        'PRODUCT_NOT_FOUND': CATEGORY_NOT_FOUND,
        'UNIT_NOT_FOUND': CATEGORY_NOT_FOUND,
        'SUPPLIER_NOT_FOUND': CATEGORY_NOT_FOUND,
        'CONVERSION_NOT_FOUND': CATEGORY_NOT_FOUND,
        'NO_CONVERSION_PATH': CATEGORY_NO_CONVERSION_PATH,
    }

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def category(self) -> str:
        """Error family; anything not listed is a validation error."""
        return self._categories.get(self.code, CATEGORY_VALIDATION)

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'category': self.category,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
