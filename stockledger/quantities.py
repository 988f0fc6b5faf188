"""
Quantity helpers — isolated, testable, reusable.

Every quantity entering the ledger goes through to_decimal(); every
quantity written to a quantity DecimalField goes through
quantize_quantity(). Binary floats never reach arithmetic, and rounding
happens once, on the value that is stored.

Examples:
    to_decimal('2.5')        -> Decimal('2.5')
    to_decimal(0.1)          -> Decimal('0.1')   (via str, not the float bits)
    quantize_quantity(Decimal('0.3333333')) -> Decimal('0.333')
    quantize_quantity(Decimal('1e10'))      -> StockError('INVALID_QUANTITY')
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError

# max_digits of every quantity field
QUANTITY_MAX_DIGITS = 12


def to_decimal(value, code: str = 'INVALID_QUANTITY') -> Decimal:
    """
    Coerce int/str/float/Decimal into a finite Decimal.

    Raises:
        StockError(code): If the value is not a finite number
    """
    if isinstance(value, bool):
        raise StockError(code, value=str(value))

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, TypeError, ValueError):
            raise StockError(code, value=str(value))

    if not result.is_finite():
        raise StockError(code, value=str(value))
    return result


def positive_decimal(value, code: str = 'INVALID_QUANTITY') -> Decimal:
    """to_decimal() that also rejects zero and negatives."""
    result = to_decimal(value, code)
    if result <= 0:
        raise StockError(code, requested=result)
    return result


def quantity_limit() -> Decimal:
    """Smallest magnitude a quantity field cannot hold."""
    places = stockledger_settings.QUANTITY_DECIMAL_PLACES
    return Decimal(10) ** (QUANTITY_MAX_DIGITS - places)


def check_quantity_limit(value: Decimal) -> Decimal:
    """
    Reject values too large for a quantity field.

    Raises:
        StockError('INVALID_QUANTITY'): If abs(value) >= quantity_limit()
    """
    limit = quantity_limit()
    if abs(value) >= limit:
        raise StockError(
            'INVALID_QUANTITY',
            f'Quantity must be below {limit}',
            requested=value,
            limit=limit,
        )
    return value


def quantize_quantity(value: Decimal) -> Decimal:
    """
    Round to the stored quantity precision (ROUND_HALF_UP).

    Raises:
        StockError('INVALID_QUANTITY'): If the result does not fit the field
    """
    check_quantity_limit(value)
    places = stockledger_settings.QUANTITY_DECIMAL_PLACES
    try:
        result = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise StockError('INVALID_QUANTITY', requested=value)
    return check_quantity_limit(result)
