"""Tests for city storage: parcels, units and the neighborhood index."""

import pytest

from rentmarket.city import City, Parcel, Unit, capacity_for_area


class TestCapacity:
    @pytest.mark.parametrize("area,expected", [
        (10.0, 1), (50.0, 1), (99.9, 1), (100.0, 2), (175.0, 3),
    ])
    def test_one_slot_per_min_area(self, area, expected):
        assert capacity_for_area(area) == expected


class TestCity:
    def test_units_indexed_by_neighborhood(self):
        city = City()
        city.add_parcel(Parcel(pos=(0, 0), neighborhood=1))
        city.add_parcel(Parcel(pos=(1, 0), neighborhood=None))
        city.add_unit(Unit(id=0, pos=(0, 0), rent=100, area=60.0))
        city.add_unit(Unit(id=1, pos=(1, 0), rent=100, area=60.0))
        city.add_unit(Unit(id=2, pos=(0, 0), rent=100, area=60.0))

        assert city.neighborhoods == [1]
        assert city.units_in(1) == (0, 2)
        assert city.units_in(5) == ()
        assert city.parcel_of(city.unit(1)).neighborhood is None

    def test_empty_neighborhood_is_still_listed(self):
        city = City()
        city.add_parcel(Parcel(pos=(0, 0), neighborhood=4))
        assert city.neighborhoods == [4]
        assert city.units_in(4) == ()

    def test_neighborhood_index_is_read_only(self):
        city = City()
        city.add_parcel(Parcel(pos=(0, 0), neighborhood=1))
        city.add_unit(Unit(id=0, pos=(0, 0), rent=100, area=60.0))

        units = city.units_in(1)
        with pytest.raises(AttributeError):
            units.append(99)
        assert city.units_in(1) == (0,)

    def test_unit_needs_a_parcel(self):
        with pytest.raises(KeyError):
            City().add_unit(Unit(id=0, pos=(3, 3), rent=100, area=60.0))

    def test_duplicate_unit_id_rejected(self):
        city = City()
        city.add_parcel(Parcel(pos=(0, 0)))
        city.add_unit(Unit(id=0, pos=(0, 0), rent=100, area=60.0))
        with pytest.raises(ValueError, match="Duplicate unit id"):
            city.add_unit(Unit(id=0, pos=(0, 0), rent=200, area=60.0))

    def test_unit_properties(self):
        unit = Unit(id=0, pos=(0, 0), rent=300, area=150.0, capacity=3, tenants={1})
        assert unit.rent_per_area == pytest.approx(2.0)
        assert unit.vacancies == 2
        assert not unit.is_vacant
