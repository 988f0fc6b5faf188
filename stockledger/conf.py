"""
Stockledger configuration.

Usage in settings.py:
    STOCKLEDGER = {
        "DEFAULT_PAGE_SIZE": 10,
        "MAX_PAGE_SIZE": 100,
        "TRANSACTION_ROW_PREFIX": "trx-",
        "TRANSACTION_REASON": "TRANSACTION",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StockLedgerSettings:
    """Stockledger configuration settings."""

    # Listing page size when the caller does not pass one
    DEFAULT_PAGE_SIZE: int = 10

    # Upper bound accepted for page_size
    MAX_PAGE_SIZE: int = 100

    # Id prefix of sale-derived rows in the unified stock-out view
    TRANSACTION_ROW_PREFIX: str = "trx-"

    # Reason tag of sale-derived rows in the unified stock-out view
    TRANSACTION_REASON: str = "TRANSACTION"

    # Reason used by adjust_quantity() when none is given
    DEFAULT_ADJUSTMENT_REASON: str = "Inventory adjustment"

    # Must match the decimal_places of the quantity fields
    QUANTITY_DECIMAL_PLACES: int = 3


def get_stockledger_settings() -> StockLedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKLEDGER", {})
    return StockLedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockLedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockledger_settings(), name)


stockledger_settings = _LazySettings()
