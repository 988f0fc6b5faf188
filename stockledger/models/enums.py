"""
Enums for Stockledger models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class MovementType(models.TextChoices):
    """Direction of a ledger event in history views."""
    IN = 'IN', _('Stock in')
    OUT = 'OUT', _('Stock out')


class StockOutSource(models.TextChoices):
    """
    Where a stock-out row comes from.

    MANUAL:      A StockOut record (spoilage, correction, etc.)
    TRANSACTION: A sales-transaction line item, read as an implicit stock-out.
    """
    MANUAL = 'manual', _('Manual')
    TRANSACTION = 'transaction', _('Transaction')


class SortDirection(models.TextChoices):
    ASC = 'asc', _('Ascending')
    DESC = 'desc', _('Descending')
