"""
Unit and UnitConversion models — measurement units and the directed
conversion edges between them.
"""

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _


class Unit(models.Model):
    """Measurement unit (kg, g, box, piece...)."""

    name = models.CharField(max_length=50, verbose_name=_('Name'))
    symbol = models.CharField(max_length=20, unique=True, verbose_name=_('Symbol'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Unit')
        verbose_name_plural = _('Units')
        ordering = ['name']

    def __str__(self) -> str:
        return self.symbol


class UnitConversion(models.Model):
    """
    Directed conversion edge: 1 from_unit = factor to_unit.

    Only one direction is stored. The reverse direction is derived at
    read time by dividing by the factor (see services.conversions).
    """

    from_unit = models.ForeignKey(
        Unit,
        on_delete=models.CASCADE,
        related_name='conversions_from',
        verbose_name=_('From unit'),
    )
    to_unit = models.ForeignKey(
        Unit,
        on_delete=models.CASCADE,
        related_name='conversions_to',
        verbose_name=_('To unit'),
    )
    factor = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        verbose_name=_('Factor'),
        help_text=_('How many target units make one source unit'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Unit conversion')
        verbose_name_plural = _('Unit conversions')
        constraints = [
            models.UniqueConstraint(
                fields=['from_unit', 'to_unit'],
                name='unique_unit_conversion_pair',
            ),
            models.CheckConstraint(
                condition=~Q(from_unit=F('to_unit')),
                name='unit_conversion_distinct_units',
            ),
        ]

    def __str__(self) -> str:
        return f"1 {self.from_unit} = {self.factor} {self.to_unit}"
