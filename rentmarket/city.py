"""
City storage for the rental market simulation.

Parcels sit on an abstract integer grid; each parcel holds zero or more
rental units and may belong to a neighborhood. Agents read and write units
through a City, and never own them.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .constants import MIN_AREA

Position = Tuple[int, int]


def distance(a: Position, b: Position) -> float:
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)


def capacity_for_area(area: float) -> int:
    """One occupant per MIN_AREA of floor space, at least one."""
    return max(1, int(area // MIN_AREA))


@dataclass
class Parcel:
    """
    A plot of land on the grid.

    Attributes:
        pos: Grid position
        desirability: Location amenity added to every unit's score
        neighborhood: Neighborhood id, or None if the parcel is in none
    """
    pos: Position
    desirability: float = 0.0
    neighborhood: Optional[int] = None


@dataclass
class Unit:
    """
    A rental unit.

    Attributes:
        id: Unique identifier
        pos: Position of the parcel the unit sits on
        rent: Monthly rent, a positive integer
        area: Floor area
        capacity: Maximum number of occupants
        owner: Landlord id, or None if unowned
        condition: State of repair in [0, 1]
        lease_month: Month the current lease started
        months_vacant: Consecutive months without occupants
        tenants: Ids of current occupants
    """
    id: int
    pos: Position
    rent: int
    area: float
    capacity: int = 1
    owner: Optional[int] = None
    condition: float = 1.0
    lease_month: int = 0
    months_vacant: int = 0
    tenants: Set[int] = field(default_factory=set)

    @property
    def rent_per_area(self) -> float:
        return self.rent / self.area

    @property
    def vacancies(self) -> int:
        return self.capacity - len(self.tenants)

    @property
    def is_vacant(self) -> bool:
        return not self.tenants


class City:
    """Parcels by position, units by id, and the neighborhood unit index."""

    def __init__(self):
        self.parcels: Dict[Position, Parcel] = {}
        self.units: Dict[int, Unit] = {}
        self.units_by_neighborhood: Dict[int, List[int]] = {}

    def add_parcel(self, parcel: Parcel) -> Parcel:
        self.parcels[parcel.pos] = parcel
        if parcel.neighborhood is not None:
            self.units_by_neighborhood.setdefault(parcel.neighborhood, [])
        return parcel

    def add_unit(self, unit: Unit) -> Unit:
        if unit.pos not in self.parcels:
            raise KeyError(f"No parcel at {unit.pos} for unit {unit.id}")
        if unit.id in self.units:
            raise ValueError(f"Duplicate unit id: {unit.id}")
        self.units[unit.id] = unit
        neighborhood = self.parcels[unit.pos].neighborhood
        if neighborhood is not None:
            self.units_by_neighborhood[neighborhood].append(unit.id)
        return unit

    def unit(self, unit_id: int) -> Unit:
        return self.units[unit_id]

    def parcel_at(self, pos: Position) -> Parcel:
        return self.parcels[pos]

    def parcel_of(self, unit: Unit) -> Parcel:
        return self.parcels[unit.pos]

    def units_in(self, neighborhood: int) -> Tuple[int, ...]:
        return tuple(self.units_by_neighborhood.get(neighborhood, ()))

    @property
    def neighborhoods(self) -> List[int]:
        return sorted(self.units_by_neighborhood)
