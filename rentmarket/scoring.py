"""Tenant desirability score for a candidate unit."""

import math
from typing import TYPE_CHECKING

from .city import Parcel, Unit, distance
from .constants import MIN_AREA

if TYPE_CHECKING:
    from .agents import Tenant


def desirability(tenant: "Tenant", unit: Unit, parcel: Parcel) -> float:
    """
    Score `unit` for `tenant`, counting the tenant as one of its occupants.

    Returns 0.0 when the tenant's income cannot cover their share of the
    rent. Otherwise the amenity bundle (space, location, condition,
    commute) is scaled by how comfortably the tenant can pay.
    """
    others = len(unit.tenants) - (1 if tenant.id in unit.tenants else 0)
    n_tenants = others + 1
    rent_per_tenant = max(1, unit.rent // n_tenants)
    if tenant.income < rent_per_tenant:
        return 0.0

    ratio = math.sqrt(tenant.income / rent_per_tenant)
    # 1/32 power flattens any surplus of space into a small, near-constant bonus
    spaciousness = max(unit.area / n_tenants - MIN_AREA, 0.0) ** (1 / 32)
    commute_distance = distance(tenant.work, unit.pos)
    commute = 1.0 if commute_distance == 0 else 1.0 / commute_distance
    return ratio * (spaciousness + parcel.desirability + unit.condition + commute)
