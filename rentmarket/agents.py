"""
Tenant and landlord agents for the rental market simulation.

Both are stepped once per simulated month by the model: every tenant
first, then every landlord. Agents never create their own random
generators; the model hands each step its single seeded source.
"""

import logging
import math
import random
from collections import deque
from dataclasses import InitVar, dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from .city import City, Position, Unit
from .constants import (
    CONDITION_DECAY,
    DEFAULT_MAINTENANCE,
    LEASE_MONTHS,
    MOVING_PENALTY,
    RENT_INCREASE_RATE,
    SAMPLE_SIZE,
    TENANT_SAMPLE_SIZE,
    TREND_MONTHS,
    VACANCY_DISCOUNT_EVERY,
    VACANCY_DISCOUNT_RATE,
)
from .estimation import TrendEstimationError, project_trend
from .scoring import desirability
from .vacancy import VacancyPool

logger = logging.getLogger(__name__)


def lease_elapsed(month: int, lease_month: int) -> int:
    return month - lease_month if month > lease_month else 0


def at_lease_boundary(month: int, lease_month: int) -> bool:
    elapsed = lease_elapsed(month, lease_month)
    return elapsed > 0 and elapsed % LEASE_MONTHS == 0


@dataclass
class Tenant:
    """
    A renter looking for, or living in, a unit.

    Attributes:
        id: Unique identifier
        income: Monthly income
        work: Position of the tenant's workplace
        unit: Id of the unit the tenant lives in (None if unhoused)
        units: Ids of units the tenant has moved out of, oldest first
    """
    id: int
    income: int
    work: Position
    unit: Optional[int] = None
    units: List[int] = field(default_factory=list)

    @property
    def is_housed(self) -> bool:
        return self.unit is not None

    def step(self, city: City, month: int, vacancies: VacancyPool, rng: random.Random) -> None:
        # Unhoused tenants always look, and anything affordable beats nothing
        current_desirability = -1.0
        moving_penalty = 0.0

        if self.unit is None:
            reconsider = True
        else:
            unit = city.unit(self.unit)
            current_desirability = desirability(self, unit, city.parcel_of(unit))
            if current_desirability == 0:
                # Priced out: leave now and search like an unhoused tenant
                logger.debug("Tenant %s priced out of unit %s (rent %s, income %s)",
                             self.id, unit.id, unit.rent, self.income)
                self._leave(unit, vacancies)
                current_desirability = -1.0
                reconsider = True
            else:
                # Otherwise only look between leases
                reconsider = at_lease_boundary(month, unit.lease_month)
                moving_penalty = MOVING_PENALTY

        if not reconsider or not vacancies:
            return

        best_id, best_desirability = self.search(city, vacancies, rng)
        if best_desirability > 0 and best_desirability - moving_penalty > current_desirability:
            self._move(city, best_id, month, vacancies)

    def search(self, city: City, vacancies: VacancyPool, rng: random.Random) -> Tuple[Optional[int], float]:
        """Best unit in a random sample of the pool, keeping the first of equal scores."""
        best_id, best_desirability = None, 0.0
        for u_id in vacancies.sample(rng, TENANT_SAMPLE_SIZE):
            unit = city.unit(u_id)
            if unit.vacancies <= 0:
                continue
            score = desirability(self, unit, city.parcel_of(unit))
            if score > best_desirability:
                best_id, best_desirability = u_id, score
        return best_id, best_desirability

    def _leave(self, unit: Unit, vacancies: VacancyPool) -> None:
        vacancies.vacate(unit, self.id)
        self.units.append(unit.id)
        self.unit = None

    def _move(self, city: City, unit_id: int, month: int, vacancies: VacancyPool) -> None:
        previous = self.unit
        if previous is not None:
            self._leave(city.unit(previous), vacancies)

        unit = city.unit(unit_id)
        if unit.is_vacant:
            unit.lease_month = month
        vacancies.occupy(unit, self.id)
        self.unit = unit_id
        logger.debug("Tenant %s moved %s -> %s in month %s", self.id, previous, unit_id, month)


@dataclass
class Landlord:
    """
    An owner of rental units who tracks market rents by neighborhood.

    Attributes:
        id: Unique identifier
        neighborhood_ids: Neighborhoods to track (init only)
        units: Ids of owned units
        maintenance: Condition restored per unit per month
        history_window: Max observations kept per neighborhood (None keeps all)
        rent_obvs: Monthly max rent-per-area seen, per neighborhood
            (None for a month with no observation)
        trend_ests: Projected market rent-per-area, per neighborhood
        invest_ests: Projected change from the latest observation, per neighborhood
        failed_estimates: Trend fits that could not be computed
    """
    id: int
    neighborhood_ids: InitVar[Iterable[int]] = ()
    units: List[int] = field(default_factory=list)
    maintenance: float = DEFAULT_MAINTENANCE
    history_window: Optional[int] = None
    rent_obvs: Dict[int, Deque[Optional[float]]] = field(init=False)
    trend_ests: Dict[int, float] = field(init=False)
    invest_ests: Dict[int, float] = field(init=False)
    failed_estimates: int = field(default=0, init=False)

    def __post_init__(self, neighborhood_ids: Iterable[int]) -> None:
        if self.history_window is not None and self.history_window < TREND_MONTHS:
            raise ValueError(
                f"history_window must be at least {TREND_MONTHS}, got {self.history_window}"
            )
        ids = list(neighborhood_ids)
        self.rent_obvs = {n: deque(maxlen=self.history_window) for n in ids}
        self.trend_ests = {n: 0.0 for n in ids}
        self.invest_ests = {n: 0.0 for n in ids}

    def step(self, city: City, month: int, rng: random.Random) -> None:
        self.estimate_rents(city, rng)
        self.estimate_trends()
        self.maintain_units(city, rng)
        self.adjust_rents(city, month)

    # =========================================================================
    # Market estimates
    # =========================================================================

    def estimate_rents(self, city: City, rng: random.Random) -> None:
        """Record this month's max rent-per-area for each tracked neighborhood."""
        observed: Dict[int, List[float]] = {}
        for u_id in self.units:
            unit = city.unit(u_id)
            if unit.is_vacant:
                continue
            neighborhood = city.parcel_of(unit).neighborhood
            if neighborhood is None:
                continue
            observed.setdefault(neighborhood, []).append(unit.rent_per_area)

        for neighborhood, history in self.rent_obvs.items():
            rents = observed.get(neighborhood, [])
            candidates = city.units_in(neighborhood)
            sample = rng.sample(candidates, min(SAMPLE_SIZE, len(candidates)))
            rents.extend(city.unit(u_id).rent_per_area for u_id in sample)
            history.append(max(rents) if rents else None)

    def estimate_trends(self) -> None:
        for neighborhood, history in self.rent_obvs.items():
            if len(history) < TREND_MONTHS:
                continue
            try:
                trend, invest = project_trend(history, TREND_MONTHS)
            except TrendEstimationError as exc:
                self.failed_estimates += 1
                logger.warning("Landlord %s: no trend for neighborhood %s: %s",
                               self.id, neighborhood, exc)
                continue
            self.trend_ests[neighborhood] = trend
            self.invest_ests[neighborhood] = invest

    # =========================================================================
    # Unit management
    # =========================================================================

    def maintain_units(self, city: City, rng: random.Random) -> None:
        for u_id in self.units:
            unit = city.unit(u_id)
            decay = rng.random() * CONDITION_DECAY
            unit.condition = min(max(unit.condition - decay + self.maintenance, 0.0), 1.0)

    def adjust_rents(self, city: City, month: int) -> None:
        for u_id in self.units:
            unit = city.unit(u_id)
            old_rent = unit.rent
            if unit.is_vacant:
                unit.months_vacant += 1
                if unit.months_vacant % VACANCY_DISCOUNT_EVERY == 0:
                    unit.rent = math.floor(unit.rent * VACANCY_DISCOUNT_RATE)
            else:
                unit.months_vacant = 0
                # Year-long leases
                if at_lease_boundary(month, unit.lease_month):
                    unit.rent = math.ceil(unit.rent * RENT_INCREASE_RATE)
            if unit.rent != old_rent:
                logger.debug("Landlord %s: unit %s rent %s -> %s", self.id, u_id, old_rent, unit.rent)
