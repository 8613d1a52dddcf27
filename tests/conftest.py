"""Shared fixtures for the rental market test suite."""

import random

import pytest

from rentmarket.city import City, Parcel, Unit


class OrderedRandom(random.Random):
    """A Random whose sample() returns the population in order, truncated to k."""

    def sample(self, population, k, **kwargs):
        return list(population)[:k]


class FixedRandom(random.Random):
    """A Random whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def ordered_rng():
    return OrderedRandom(0)


@pytest.fixture
def fixed_rng():
    """Factory: fixed_rng(value) -> Random whose random() is always `value`."""
    return FixedRandom


@pytest.fixture
def build_city():
    """
    Factory: build_city(*units, neighborhoods={pos: id}, desirability=0.0).

    Creates one parcel per distinct unit position. Parcels default to
    neighborhood 0 unless `neighborhoods` maps their position elsewhere
    (including to None).
    """
    def _build(*units: Unit, neighborhoods=None, desirability: float = 0.0) -> City:
        neighborhoods = neighborhoods or {}
        city = City()
        for unit in units:
            if unit.pos not in city.parcels:
                city.add_parcel(Parcel(
                    pos=unit.pos,
                    desirability=desirability,
                    neighborhood=neighborhoods.get(unit.pos, 0),
                ))
            city.add_unit(unit)
        return city
    return _build
