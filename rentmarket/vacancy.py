"""
The vacancy pool: ids of every unit with at least one free slot.

All changes to a unit's occupant set go through the pool, so membership
and occupancy are updated together and checked after every change.
"""

import random
from typing import Dict, Iterable, Iterator, List

from .city import City, Unit


class VacancyPoolError(RuntimeError):
    """Pool membership and unit occupancy disagree, or a full unit was overfilled."""


class VacancyPool:
    def __init__(self, unit_ids: Iterable[int] = ()):
        # dict keys keep insertion order, so sampling is reproducible for a seed
        self._ids: Dict[int, None] = dict.fromkeys(unit_ids)

    @classmethod
    def from_city(cls, city: City) -> "VacancyPool":
        return cls(uid for uid in sorted(city.units) if city.units[uid].vacancies > 0)

    def __contains__(self, unit_id: int) -> bool:
        return unit_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def sample(self, rng: random.Random, k: int) -> List[int]:
        """Up to `k` distinct unit ids, drawn uniformly without replacement."""
        return rng.sample(list(self._ids), min(k, len(self._ids)))

    def vacate(self, unit: Unit, tenant_id: int) -> None:
        if tenant_id not in unit.tenants:
            raise VacancyPoolError(f"Tenant {tenant_id} does not live in unit {unit.id}")
        unit.tenants.remove(tenant_id)
        self._ids[unit.id] = None
        self.verify(unit)

    def occupy(self, unit: Unit, tenant_id: int) -> None:
        if unit.vacancies <= 0:
            raise VacancyPoolError(f"Unit {unit.id} is full ({unit.capacity} occupants)")
        if tenant_id in unit.tenants:
            raise VacancyPoolError(f"Tenant {tenant_id} already lives in unit {unit.id}")
        unit.tenants.add(tenant_id)
        if unit.vacancies == 0:
            self._ids.pop(unit.id, None)
        self.verify(unit)

    def verify(self, unit: Unit) -> None:
        has_room = len(unit.tenants) < unit.capacity
        if has_room != (unit.id in self._ids):
            raise VacancyPoolError(
                f"Unit {unit.id} has {len(unit.tenants)}/{unit.capacity} occupants "
                f"but {'is' if unit.id in self._ids else 'is not'} in the vacancy pool"
            )

    def verify_all(self, units: Iterable[Unit]) -> None:
        for unit in units:
            self.verify(unit)
