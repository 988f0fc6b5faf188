"""
Tests for unit conversions.
"""

from decimal import Decimal

import pytest

from stockledger import ledger, StockError
from stockledger.models import Unit, UnitConversion


pytestmark = pytest.mark.django_db


class TestConvert:
    """Tests for ledger.convert_quantity()."""

    def test_same_unit_is_identity(self, kg):
        """Converting a unit to itself returns the quantity unchanged."""
        assert ledger.convert_quantity(kg, kg, Decimal('2.5')) == Decimal('2.5')

    def test_direct_edge_multiplies(self, kg, g, kg_to_g):
        """kg -> g uses the stored factor."""
        assert ledger.convert_quantity(kg, g, 2) == Decimal('2000')

    def test_reverse_edge_divides(self, kg, g, kg_to_g):
        """g -> kg divides by the kg -> g factor."""
        assert ledger.convert_quantity(g, kg, 2000) == Decimal('2')

    def test_accepts_primary_keys(self, kg, g, kg_to_g):
        """Units can be passed as ids."""
        assert ledger.convert_quantity(kg.pk, g.pk, '0.5') == Decimal('500')

    def test_round_trip_within_precision(self, kg, g, pcs):
        """Converting there and back returns the original within 3 places."""
        ledger.create_conversion(pcs, g, Decimal('3'))
        there = ledger.convert_quantity(g, pcs, Decimal('10'))
        back = ledger.convert_quantity(pcs, g, there)

        assert abs(back - Decimal('10')) < Decimal('0.001')

    def test_no_transitive_conversion(self, kg, g, pcs, kg_to_g):
        """kg -> g and g -> pcs does not make kg -> pcs resolvable."""
        ledger.create_conversion(g, pcs, Decimal('0.01'))

        with pytest.raises(StockError) as exc:
            ledger.convert_quantity(kg, pcs, 1)

        assert exc.value.code == 'NO_CONVERSION_PATH'
        assert exc.value.category == 'no_conversion_path'

    def test_unknown_unit(self, kg):
        """A missing unit is reported as not found."""
        with pytest.raises(StockError) as exc:
            ledger.convert_quantity(kg, 999999, 1)

        assert exc.value.code == 'UNIT_NOT_FOUND'
        assert exc.value.category == 'not_found'

    def test_rejects_non_numeric(self, kg, g, kg_to_g):
        """Garbage quantities are rejected."""
        with pytest.raises(StockError) as exc:
            ledger.convert_quantity(kg, g, 'abc')

        assert exc.value.code == 'INVALID_QUANTITY'


class TestCreateConversion:
    """Tests for ledger.create_conversion()."""

    def test_creates_edge(self, kg, g):
        """A new edge is stored with its factor."""
        conversion = ledger.create_conversion(kg, g, '1000')

        assert conversion.factor == Decimal('1000')
        assert UnitConversion.objects.filter(from_unit=kg, to_unit=g).count() == 1

    @pytest.mark.parametrize('factor', [0, -1, '-0.5'])
    def test_rejects_non_positive_factor(self, kg, g, factor):
        """Factor must be > 0."""
        with pytest.raises(StockError) as exc:
            ledger.create_conversion(kg, g, factor)

        assert exc.value.code == 'INVALID_FACTOR'

    def test_rejects_same_unit(self, kg):
        """A unit cannot convert to itself."""
        with pytest.raises(StockError) as exc:
            ledger.create_conversion(kg, kg, 1)

        assert exc.value.code == 'INVALID_CONVERSION'

    def test_rejects_duplicate_pair(self, kg, g, kg_to_g):
        """The ordered pair is unique."""
        with pytest.raises(StockError) as exc:
            ledger.create_conversion(kg, g, 1000)

        assert exc.value.code == 'DUPLICATE_CONVERSION'

    def test_reverse_pair_is_distinct(self, kg, g, kg_to_g):
        """g -> kg is a different ordered pair and may be stored."""
        conversion = ledger.create_conversion(g, kg, '0.001')

        assert conversion.pk != kg_to_g.pk

    def test_rejects_unknown_unit(self, kg):
        """Both units must exist."""
        with pytest.raises(StockError) as exc:
            ledger.create_conversion(kg, 424242, 2)

        assert exc.value.code == 'UNIT_NOT_FOUND'


class TestConversionMaintenance:
    """Tests for update/delete/list of conversion edges."""

    def test_update_factor(self, kg, g, kg_to_g):
        """Updating the factor changes later conversions."""
        ledger.update_conversion(kg_to_g, '500')

        assert ledger.convert_quantity(kg, g, 2) == Decimal('1000')

    def test_delete_conversion(self, kg, g, kg_to_g):
        """After deleting the edge, neither direction resolves."""
        ledger.delete_conversion(kg_to_g.pk)

        with pytest.raises(StockError) as exc:
            ledger.convert_quantity(g, kg, 1000)

        assert exc.value.code == 'NO_CONVERSION_PATH'

    def test_delete_unknown_conversion(self, db):
        with pytest.raises(StockError) as exc:
            ledger.delete_conversion(123456)

        assert exc.value.code == 'CONVERSION_NOT_FOUND'

    def test_conversions_for_unit_include_both_directions(self, kg, g, pcs, kg_to_g):
        """Edges where the unit is source or target are both listed."""
        ledger.create_conversion(pcs, g, 3)
        other = Unit.objects.create(name='Litre', symbol='l')
        ledger.create_conversion(other, pcs, 4)

        edges = list(ledger.get_conversions_for_unit(g))

        assert len(edges) == 2
        assert {(e.from_unit_id, e.to_unit_id) for e in edges} == {(kg.pk, g.pk), (pcs.pk, g.pk)}

    def test_conversions_from_and_to_unit(self, kg, g, kg_to_g):
        assert list(ledger.conversions_from_unit(kg)) == [kg_to_g]
        assert list(ledger.conversions_to_unit(kg)) == []
        assert list(ledger.conversions_to_unit(g)) == [kg_to_g]


class TestUnitMaintenance:
    """Tests for create/update/delete of units."""

    def test_create_unit(self, db):
        unit = ledger.create_unit(' Litre ', ' l ')

        assert unit.name == 'Litre'
        assert unit.symbol == 'l'

    def test_create_duplicate_symbol(self, kg):
        with pytest.raises(StockError) as exc:
            ledger.create_unit('Kilo', 'kg')

        assert exc.value.code == 'DUPLICATE_UNIT'
        assert Unit.objects.filter(symbol='kg').count() == 1

    @pytest.mark.parametrize('name,symbol,field', [('', 'l', 'name'), ('Litre', '  ', 'symbol')])
    def test_create_requires_fields(self, db, name, symbol, field):
        with pytest.raises(StockError) as exc:
            ledger.create_unit(name, symbol)

        assert exc.value.code == 'INVALID_FIELD'
        assert exc.value.data['field'] == field

    def test_update_unit(self, pcs):
        unit = ledger.update_unit(pcs, name='Pieces')

        unit.refresh_from_db()
        assert unit.name == 'Pieces'
        assert unit.symbol == 'pcs'

    def test_update_to_taken_symbol(self, kg, pcs):
        with pytest.raises(StockError) as exc:
            ledger.update_unit(pcs, symbol='kg')

        assert exc.value.code == 'DUPLICATE_UNIT'

    def test_delete_unused_unit_drops_its_conversions(self, g, pcs):
        """An unused unit goes, and so do the edges that mention it."""
        ledger.create_conversion(pcs, g, 3)

        ledger.delete_unit(pcs.pk)

        assert not Unit.objects.filter(pk=pcs.pk).exists()
        assert UnitConversion.objects.count() == 0

    def test_delete_unit_used_by_product(self, kg, product):
        with pytest.raises(StockError) as exc:
            ledger.delete_unit(kg)

        assert exc.value.code == 'UNIT_IN_USE'
        assert Unit.objects.filter(pk=kg.pk).exists()

    def test_delete_unit_used_by_stock_movement(self, batch, kg, pcs):
        """A unit referenced only by a recorded stock-in is still in use."""
        bag = ledger.create_unit('Bag', 'bag')
        ledger.create_conversion(bag, kg, 25)
        ledger.record_stock_in(batch, 2, unit=bag)

        with pytest.raises(StockError) as exc:
            ledger.delete_unit(bag)

        assert exc.value.code == 'UNIT_IN_USE'
        assert ledger.unit_in_use(bag)
        assert not ledger.unit_in_use(pcs)

    def test_delete_unknown_unit(self, db):
        with pytest.raises(StockError) as exc:
            ledger.delete_unit(313131)

        assert exc.value.code == 'UNIT_NOT_FOUND'
