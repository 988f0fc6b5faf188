"""
Unit conversions — single-hop resolver over directed conversion edges.

An edge (A -> B, factor f) means 1 A = f B. Resolution order:
identity, direct edge (multiply), reverse edge (divide), failure.
There is no multi-hop search: A -> B and B -> C does not make A -> C
resolvable.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction
from django.db.models import Q

from stockledger.exceptions import StockError
from stockledger.models.catalog import Product, ProductVariant
from stockledger.models.movement import StockIn, StockOut
from stockledger.models.sales import TransactionItem
from stockledger.models.unit import Unit, UnitConversion
from stockledger.quantities import positive_decimal, to_decimal

logger = logging.getLogger('stockledger')

FACTOR_PLACES = Decimal('0.000001')


def _unit_pk(unit):
    return unit.pk if isinstance(unit, Unit) else unit


def _clean_factor(factor) -> Decimal:
    value = positive_decimal(factor, 'INVALID_FACTOR')
    value = value.quantize(FACTOR_PLACES, rounding=ROUND_HALF_UP)
    if value <= 0:
        raise StockError('INVALID_FACTOR', factor=str(factor))
    return value


class UnitConversions:
    """Unit conversion resolver and edge maintenance."""

    @classmethod
    def convert(cls, from_unit, to_unit, quantity) -> Decimal:
        """
        Convert quantity from one unit to another.

        Args:
            from_unit: Unit instance or pk
            to_unit: Unit instance or pk
            quantity: Number (int, str, Decimal)

        Returns:
            Decimal, not quantized (callers storing it quantize)

        Raises:
            StockError('UNIT_NOT_FOUND'): If a unit does not exist
            StockError('NO_CONVERSION_PATH'): If no single edge links the units
        """
        value = to_decimal(quantity)
        from_pk = _unit_pk(from_unit)
        to_pk = _unit_pk(to_unit)

        if from_pk == to_pk:
            return value

        direct = UnitConversion.objects.filter(
            from_unit_id=from_pk, to_unit_id=to_pk,
        ).values_list('factor', flat=True).first()
        if direct is not None:
            return value * direct

        reverse = UnitConversion.objects.filter(
            from_unit_id=to_pk, to_unit_id=from_pk,
        ).values_list('factor', flat=True).first()
        if reverse is not None:
            return value / reverse

        for pk in (from_pk, to_pk):
            if not Unit.objects.filter(pk=pk).exists():
                raise StockError('UNIT_NOT_FOUND', unit_id=pk)

        raise StockError('NO_CONVERSION_PATH', from_unit=from_pk, to_unit=to_pk)

    @classmethod
    def create_conversion(cls, from_unit, to_unit, factor) -> UnitConversion:
        """
        Create a directed conversion edge.

        Raises:
            StockError('INVALID_FACTOR'): If factor <= 0
            StockError('INVALID_CONVERSION'): If from_unit == to_unit
            StockError('UNIT_NOT_FOUND'): If a unit does not exist
            StockError('DUPLICATE_CONVERSION'): If the ordered pair exists
        """
        value = _clean_factor(factor)
        from_pk = _unit_pk(from_unit)
        to_pk = _unit_pk(to_unit)

        if from_pk == to_pk:
            raise StockError('INVALID_CONVERSION', unit_id=from_pk)

        for pk in (from_pk, to_pk):
            if not Unit.objects.filter(pk=pk).exists():
                raise StockError('UNIT_NOT_FOUND', unit_id=pk)

        if UnitConversion.objects.filter(from_unit_id=from_pk, to_unit_id=to_pk).exists():
            raise StockError('DUPLICATE_CONVERSION', from_unit=from_pk, to_unit=to_pk)

        try:
            with transaction.atomic():
                conversion = UnitConversion.objects.create(
                    from_unit_id=from_pk,
                    to_unit_id=to_pk,
                    factor=value,
                )
        except IntegrityError:
            # Lost a race against a concurrent create of the same pair
            raise StockError('DUPLICATE_CONVERSION', from_unit=from_pk, to_unit=to_pk)

        logger.info(
            "unit.conversion.create",
            extra={
                "conversion_id": conversion.pk,
                "from_unit": from_pk,
                "to_unit": to_pk,
                "factor": str(value),
            },
        )
        return conversion

    @classmethod
    def update_conversion(cls, conversion, factor) -> UnitConversion:
        """Change the factor of an existing edge."""
        conversion = cls._get_conversion(conversion)
        conversion.factor = _clean_factor(factor)
        conversion.save(update_fields=['factor', 'updated_at'])
        logger.info(
            "unit.conversion.update",
            extra={"conversion_id": conversion.pk, "factor": str(conversion.factor)},
        )
        return conversion

    @classmethod
    def delete_conversion(cls, conversion) -> None:
        conversion = cls._get_conversion(conversion)
        pk = conversion.pk
        conversion.delete()
        logger.info("unit.conversion.delete", extra={"conversion_id": pk})

    @classmethod
    def get_conversions_for_unit(cls, unit):
        """Edges where the unit is either source or target."""
        pk = cls.require_unit(unit)
        return UnitConversion.objects.filter(
            Q(from_unit_id=pk) | Q(to_unit_id=pk)
        ).select_related('from_unit', 'to_unit').order_by('from_unit__name', 'to_unit__name')

    @classmethod
    def conversions_from_unit(cls, unit):
        pk = cls.require_unit(unit)
        return UnitConversion.objects.filter(
            from_unit_id=pk,
        ).select_related('to_unit').order_by('to_unit__name')

    @classmethod
    def conversions_to_unit(cls, unit):
        pk = cls.require_unit(unit)
        return UnitConversion.objects.filter(
            to_unit_id=pk,
        ).select_related('from_unit').order_by('from_unit__name')

    # ══════════════════════════════════════════════════════════════
    # UNITS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_unit(cls, name, symbol) -> Unit:
        """
        Register a unit.

        Raises:
            StockError('INVALID_FIELD'): Blank name or symbol
            StockError('DUPLICATE_UNIT'): Symbol already taken
        """
        name, symbol = cls._clean_unit_fields(name, symbol)
        if Unit.objects.filter(symbol=symbol).exists():
            raise StockError('DUPLICATE_UNIT', symbol=symbol)

        try:
            with transaction.atomic():
                unit = Unit.objects.create(name=name, symbol=symbol)
        except IntegrityError:
            raise StockError('DUPLICATE_UNIT', symbol=symbol)

        logger.info("unit.create", extra={"unit_id": unit.pk, "symbol": symbol})
        return unit

    @classmethod
    def update_unit(cls, unit, name=None, symbol=None) -> Unit:
        """Rename a unit. Conversions and recorded events keep pointing at it."""
        instance = cls._get_unit(unit)
        name, symbol = cls._clean_unit_fields(
            instance.name if name is None else name,
            instance.symbol if symbol is None else symbol,
        )
        if Unit.objects.filter(symbol=symbol).exclude(pk=instance.pk).exists():
            raise StockError('DUPLICATE_UNIT', symbol=symbol)

        instance.name = name
        instance.symbol = symbol
        instance.save(update_fields=['name', 'symbol', 'updated_at'])
        logger.info("unit.update", extra={"unit_id": instance.pk, "symbol": symbol})
        return instance

    @classmethod
    def delete_unit(cls, unit) -> None:
        """
        Delete an unused unit together with its conversion edges.

        Raises:
            StockError('UNIT_NOT_FOUND')
            StockError('UNIT_IN_USE'): Referenced by a product, variant,
                stock movement or sale line
        """
        instance = cls._get_unit(unit)
        if cls.unit_in_use(instance):
            raise StockError('UNIT_IN_USE', unit_id=instance.pk)

        pk = instance.pk
        instance.delete()
        logger.info("unit.delete", extra={"unit_id": pk})

    @classmethod
    def unit_in_use(cls, unit) -> bool:
        pk = _unit_pk(unit)
        return any(
            model.objects.filter(unit_id=pk).exists()
            for model in (Product, ProductVariant, StockIn, StockOut, TransactionItem)
        )

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def require_unit(cls, unit):
        pk = _unit_pk(unit)
        if not Unit.objects.filter(pk=pk).exists():
            raise StockError('UNIT_NOT_FOUND', unit_id=pk)
        return pk

    @classmethod
    def _get_conversion(cls, conversion) -> UnitConversion:
        if isinstance(conversion, UnitConversion):
            return conversion
        try:
            return UnitConversion.objects.get(pk=conversion)
        except UnitConversion.DoesNotExist:
            raise StockError('CONVERSION_NOT_FOUND', conversion_id=conversion)

    @classmethod
    def _get_unit(cls, unit) -> Unit:
        if isinstance(unit, Unit):
            return unit
        try:
            return Unit.objects.get(pk=unit)
        except Unit.DoesNotExist:
            raise StockError('UNIT_NOT_FOUND', unit_id=unit)

    @classmethod
    def _clean_unit_fields(cls, name, symbol):
        name = (name or '').strip()
        symbol = (symbol or '').strip()
        if not name:
            raise StockError('INVALID_FIELD', field='name')
        if not symbol:
            raise StockError('INVALID_FIELD', field='symbol')
        return name, symbol
