from .agents import Landlord, Tenant
from .city import City, Parcel, Unit, distance
from .constants import DEFAULT_PARAMS, SCENARIOS
from .estimation import TrendEstimationError, linear_regression, project_trend
from .model import RentalMarketModel
from .scoring import desirability
from .vacancy import VacancyPool, VacancyPoolError

__all__ = [
    "City", "Parcel", "Unit", "distance",
    "Tenant", "Landlord", "desirability",
    "VacancyPool", "VacancyPoolError",
    "TrendEstimationError", "linear_regression", "project_trend",
    "RentalMarketModel", "DEFAULT_PARAMS", "SCENARIOS",
]
