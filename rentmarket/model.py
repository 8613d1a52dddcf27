"""
Rental Market Simulation: Mesa Model

Builds a city of parcels and rental units, populates it with tenants and
landlords, and advances it one month per step.

Monthly pipeline:
1. Every tenant steps, in id order (stay, get priced out, or move)
2. Every landlord steps, in id order (estimate market, maintain, set rents)
3. DataCollector records the month (skipped during burn-in)

All randomness comes from the model's seeded generators: `self.random`
drives agent decisions, `self.rng` draws tenant incomes.
"""

import logging
import math
from typing import Any, Dict, List, Optional

import mesa

from .agents import Landlord, Tenant
from .city import City, Parcel, Unit, capacity_for_area
from .constants import DEFAULT_PARAMS
from .vacancy import VacancyPool

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = [
    "month", "mean_rent", "mean_rent_per_area", "vacancy_rate", "occupancy_rate",
    "unhoused_count", "moves", "mean_condition", "mean_trend_estimate", "failed_estimates",
]


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class RentalMarketModel(mesa.Model):
    """
    Rental market simulation.

    The grid is `grid_size` × `grid_size` parcels, grouped into square
    neighborhoods of side `neighborhood_size`. Parcel desirability rises
    from west to east. Each parcel holds 0 to `max_units_per_parcel` units,
    each owned by a random landlord. Tenants start unhoused.
    """

    def __init__(
        self,
        n_tenants: int = DEFAULT_PARAMS["n_tenants"],
        n_landlords: int = DEFAULT_PARAMS["n_landlords"],
        grid_size: int = DEFAULT_PARAMS["grid_size"],
        neighborhood_size: int = DEFAULT_PARAMS["neighborhood_size"],
        max_units_per_parcel: int = DEFAULT_PARAMS["max_units_per_parcel"],
        min_area: float = DEFAULT_PARAMS["min_area"],
        max_area: float = DEFAULT_PARAMS["max_area"],
        min_rent: int = DEFAULT_PARAMS["min_rent"],
        max_rent: int = DEFAULT_PARAMS["max_rent"],
        median_income: int = DEFAULT_PARAMS["median_income"],
        income_sigma: float = DEFAULT_PARAMS["income_sigma"],
        maintenance: float = DEFAULT_PARAMS["maintenance"],
        history_window: Optional[int] = DEFAULT_PARAMS["history_window"],
        burn_in: int = DEFAULT_PARAMS["burn_in"],
        seed: Optional[int] = None,
    ):
        # An int seeds both self.random and self.rng; None lets Mesa pick one
        super().__init__(rng=seed)

        self.n_tenants = n_tenants
        self.n_landlords = n_landlords
        self.grid_size = grid_size
        self.neighborhood_size = neighborhood_size
        self.max_units_per_parcel = max_units_per_parcel
        self.min_area = min_area
        self.max_area = max_area
        self.min_rent = min_rent
        self.max_rent = max_rent
        self.median_income = median_income
        self.income_sigma = income_sigma
        self.maintenance = maintenance
        self.history_window = history_window
        self.burn_in = burn_in

        errors = self.validate()
        if errors:
            raise ValueError("Invalid model parameters: " + "; ".join(errors))

        self.current_month = 0
        self.moves = 0

        self.city = self._build_city()
        self.landlords: List[Landlord] = [
            Landlord(
                id=i,
                neighborhood_ids=self.city.neighborhoods,
                maintenance=self.maintenance,
                history_window=self.history_window,
            )
            for i in range(self.n_landlords)
        ]
        self._assign_owners()
        self.tenants: List[Tenant] = self._create_tenants()
        self.vacancies = VacancyPool.from_city(self.city)

        logger.info(
            "Built city: %d parcels, %d units (%d slots), %d neighborhoods, %d tenants, %d landlords",
            len(self.city.parcels), len(self.city.units), self._total_capacity(),
            len(self.city.neighborhoods), len(self.tenants), len(self.landlords),
        )

        self.datacollector = mesa.DataCollector(
            model_reporters={
                "month": lambda m: m.current_month,
                "mean_rent": lambda m: _mean([u.rent for u in m.city.units.values()]),
                "mean_rent_per_area": lambda m: _mean([u.rent_per_area for u in m.city.units.values()]),
                "vacancy_rate": lambda m: m._vacancy_rate(),
                "occupancy_rate": lambda m: m._occupancy_rate(),
                "unhoused_count": lambda m: sum(1 for t in m.tenants if not t.is_housed),
                "moves": lambda m: m.moves,
                "mean_condition": lambda m: _mean([u.condition for u in m.city.units.values()]),
                "mean_trend_estimate": lambda m: m._mean_trend_estimate(),
                "failed_estimates": lambda m: sum(landlord.failed_estimates for landlord in m.landlords),
            }
        )

    def validate(self) -> List[str]:
        """Return list of parameter errors, empty if valid."""
        errors = []
        if self.n_tenants < 0:
            errors.append(f"n_tenants must be >= 0, got {self.n_tenants}")
        if self.n_landlords < 1:
            errors.append(f"n_landlords must be >= 1, got {self.n_landlords}")
        if self.grid_size < 1:
            errors.append(f"grid_size must be >= 1, got {self.grid_size}")
        if self.neighborhood_size < 1:
            errors.append(f"neighborhood_size must be >= 1, got {self.neighborhood_size}")
        if self.max_units_per_parcel < 0:
            errors.append(f"max_units_per_parcel must be >= 0, got {self.max_units_per_parcel}")
        if not 0 < self.min_area <= self.max_area:
            errors.append(f"need 0 < min_area <= max_area, got {self.min_area}, {self.max_area}")
        if not 1 <= self.min_rent <= self.max_rent:
            errors.append(f"need 1 <= min_rent <= max_rent, got {self.min_rent}, {self.max_rent}")
        if self.median_income <= 0:
            errors.append(f"median_income must be > 0, got {self.median_income}")
        if self.income_sigma < 0:
            errors.append(f"income_sigma must be >= 0, got {self.income_sigma}")
        if not 0 <= self.maintenance <= 1:
            errors.append(f"maintenance must be in [0, 1], got {self.maintenance}")
        if self.burn_in < 0:
            errors.append(f"burn_in must be >= 0, got {self.burn_in}")
        return errors

    # =========================================================================
    # Setup
    # =========================================================================

    def _neighborhood_of(self, row: int, col: int) -> int:
        blocks_per_row = math.ceil(self.grid_size / self.neighborhood_size)
        return (row // self.neighborhood_size) * blocks_per_row + col // self.neighborhood_size

    def _build_city(self) -> City:
        city = City()
        for row in range(self.grid_size):
            for col in range(self.grid_size):
                city.add_parcel(Parcel(
                    pos=(col, row),
                    desirability=(col + 1) / self.grid_size,
                    neighborhood=self._neighborhood_of(row, col),
                ))

        unit_id = 0
        for pos in list(city.parcels):
            for _ in range(self.random.randint(0, self.max_units_per_parcel)):
                area = self.random.uniform(self.min_area, self.max_area)
                city.add_unit(Unit(
                    id=unit_id,
                    pos=pos,
                    rent=self.random.randint(self.min_rent, self.max_rent),
                    area=area,
                    capacity=capacity_for_area(area),
                    condition=self.random.random(),
                ))
                unit_id += 1
        return city

    def _assign_owners(self) -> None:
        for unit in self.city.units.values():
            landlord = self.landlords[self.random.randrange(self.n_landlords)]
            unit.owner = landlord.id
            landlord.units.append(unit.id)

    def _create_tenants(self) -> List[Tenant]:
        incomes = self.rng.lognormal(math.log(self.median_income), self.income_sigma, self.n_tenants)
        return [
            Tenant(
                id=i,
                income=int(income),
                work=(self.random.randrange(self.grid_size), self.random.randrange(self.grid_size)),
            )
            for i, income in enumerate(incomes)
        ]

    # =========================================================================
    # Metrics
    # =========================================================================

    def _total_capacity(self) -> int:
        return sum(u.capacity for u in self.city.units.values())

    def _vacancy_rate(self) -> float:
        units = self.city.units.values()
        return sum(1 for u in units if u.is_vacant) / len(units) if units else 0.0

    def _occupancy_rate(self) -> float:
        capacity = self._total_capacity()
        occupants = sum(len(u.tenants) for u in self.city.units.values())
        return occupants / capacity if capacity else 0.0

    def _mean_trend_estimate(self) -> float:
        return _mean([est for landlord in self.landlords for est in landlord.trend_ests.values()])

    # =========================================================================
    # Monthly pipeline
    # =========================================================================

    def step(self) -> None:
        self.current_month += 1
        month = self.current_month

        previous = [t.unit for t in self.tenants]
        for tenant in self.tenants:
            tenant.step(self.city, month, self.vacancies, self.random)
        self.moves = sum(1 for t, before in zip(self.tenants, previous) if t.unit != before)

        for landlord in self.landlords:
            landlord.step(self.city, month, self.random)

        if month > self.burn_in:
            self.datacollector.collect(self)
        logger.debug("Month %d: %d moves, %d vacant units", month, self.moves, len(self.vacancies))

    def run(self, months: int) -> None:
        for _ in range(months):
            self.step()

    # =========================================================================
    # State export
    # =========================================================================

    def get_state(self) -> Dict[str, Any]:
        housed = sum(1 for t in self.tenants if t.is_housed)
        units = list(self.city.units.values())
        return {
            "month": self.current_month,
            "stats": {
                "units": len(units),
                "capacity": self._total_capacity(),
                "tenants": len(self.tenants),
                "housed": housed,
                "unhoused_count": len(self.tenants) - housed,
                "vacant_units": sum(1 for u in units if u.is_vacant),
                "vacancy_rate": round(self._vacancy_rate(), 3),
                "occupancy_rate": round(self._occupancy_rate(), 3),
                "mean_rent": round(_mean([u.rent for u in units]), 2),
                "min_rent": min((u.rent for u in units), default=0),
                "max_rent": max((u.rent for u in units), default=0),
                "mean_condition": round(_mean([u.condition for u in units]), 3),
                "moves": self.moves,
                "failed_estimates": sum(landlord.failed_estimates for landlord in self.landlords),
            },
            "params": {
                "n_tenants": self.n_tenants,
                "n_landlords": self.n_landlords,
                "grid_size": self.grid_size,
                "neighborhood_size": self.neighborhood_size,
                "max_units_per_parcel": self.max_units_per_parcel,
                "min_area": self.min_area,
                "max_area": self.max_area,
                "min_rent": self.min_rent,
                "max_rent": self.max_rent,
                "median_income": self.median_income,
                "income_sigma": self.income_sigma,
                "maintenance": self.maintenance,
                "history_window": self.history_window,
                "burn_in": self.burn_in,
            },
        }

    def get_history(self) -> Dict[str, Any]:
        """Export DataCollector time-series as JSON."""
        df = self.datacollector.get_model_vars_dataframe()
        if df.empty:
            return {col: [] for col in HISTORY_COLUMNS}
        records = df.reset_index(drop=True)
        return {col: records[col].tolist() for col in records.columns}
