"""
Constants and scenario presets for the rental market simulation.

Agent behaviour constants are fixed; model parameters can be overridden
per run, and each scenario is a named bundle of model parameters.
"""

from fractions import Fraction

# Tenant behaviour
MIN_AREA = 50.0              # floor area one occupant needs before space counts as a bonus
TENANT_SAMPLE_SIZE = 30      # vacant units looked at per search
MOVING_PENALTY = 10.0        # flat disincentive against moving at a lease boundary
LEASE_MONTHS = 12

# Landlord behaviour
SAMPLE_SIZE = 10             # units sampled per neighborhood for market rent
TREND_MONTHS = 12            # observations used for the trend fit
RENT_INCREASE_RATE = Fraction("1.05")
VACANCY_DISCOUNT_RATE = Fraction("0.98")
VACANCY_DISCOUNT_EVERY = 2   # months vacant between discounts
CONDITION_DECAY = 0.1        # max condition lost per month
DEFAULT_MAINTENANCE = 0.1

DEFAULT_PARAMS = {
    "n_tenants": 400,
    "n_landlords": 10,
    "grid_size": 20,
    "neighborhood_size": 5,
    "max_units_per_parcel": 3,
    "min_area": 50.0,
    "max_area": 200.0,
    "min_rent": 400,
    "max_rent": 2000,
    "median_income": 1500,
    "income_sigma": 0.5,
    "maintenance": DEFAULT_MAINTENANCE,
    "history_window": 120,
    "burn_in": 0,
}

SCENARIOS = {
    "baseline": {
        "id": "baseline",
        "title": "Baseline City",
        "description": "Moderate supply, moderate incomes. Landlords maintain units at the default rate. A starting point for watching rents and vacancies settle.",
        "params": dict(DEFAULT_PARAMS),
    },
    "housing-shortage": {
        "id": "housing-shortage",
        "title": "Housing Shortage",
        "description": "Many more tenants than slots. Vacancies fill quickly, discounts rarely trigger and lease-boundary increases compound.",
        "params": {
            **DEFAULT_PARAMS,
            "n_tenants": 900,
            "max_units_per_parcel": 2,
        },
    },
    "oversupply": {
        "id": "oversupply",
        "title": "Oversupply",
        "description": "Plenty of large units and few tenants. Vacant units sit empty and landlords cut rents every other month.",
        "params": {
            **DEFAULT_PARAMS,
            "n_tenants": 150,
            "max_units_per_parcel": 4,
            "max_area": 300.0,
        },
    },
    "neglect": {
        "id": "neglect",
        "title": "Landlord Neglect",
        "description": "Landlords invest nothing in maintenance. Unit condition decays every month and desirability falls with it.",
        "params": {
            **DEFAULT_PARAMS,
            "maintenance": 0.0,
        },
    },
    "low-income": {
        "id": "low-income",
        "title": "Low-Income City",
        "description": "Incomes are low relative to asking rents. Many tenants are priced out and stay unhoused until discounts bring rents within reach.",
        "params": {
            **DEFAULT_PARAMS,
            "median_income": 700,
            "income_sigma": 0.3,
        },
    },
    "unequal-incomes": {
        "id": "unequal-incomes",
        "title": "Unequal Incomes",
        "description": "A wide income spread. High earners outbid everyone for well-located units while the rest crowd into shared ones.",
        "params": {
            **DEFAULT_PARAMS,
            "income_sigma": 1.0,
        },
    },
}
