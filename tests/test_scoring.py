"""Tests for the tenant desirability score."""

import pytest

from rentmarket.agents import Tenant
from rentmarket.city import Parcel, Unit, distance
from rentmarket.scoring import desirability


# ── Helpers ──────────────────────────────────────────────────────────

def _unit(rent=100, area=100.0, pos=(0, 0), condition=0.5, tenants=(), capacity=4):
    return Unit(id=1, pos=pos, rent=rent, area=area, capacity=capacity,
                condition=condition, tenants=set(tenants))


def _tenant(income=400, work=(0, 0)):
    return Tenant(id=99, income=income, work=work)


def _parcel(desirability=0.25, pos=(0, 0)):
    return Parcel(pos=pos, desirability=desirability)


# ── Distance ─────────────────────────────────────────────────────────

class TestDistance:
    def test_same_point(self):
        assert distance((3, 4), (3, 4)) == 0.0

    def test_euclidean(self):
        assert distance((0, 0), (3, 4)) == pytest.approx(5.0)
        assert distance((-1, -1), (2, 3)) == pytest.approx(5.0)


# ── Affordability gate ───────────────────────────────────────────────

class TestAffordability:
    def test_income_below_rent_scores_zero(self):
        assert desirability(_tenant(income=99), _unit(rent=100), _parcel()) == 0.0

    def test_income_equal_to_rent_is_affordable(self):
        assert desirability(_tenant(income=100), _unit(rent=100), _parcel()) > 0

    def test_rent_is_split_with_floor_division(self):
        # 101 // 2 == 50: one existing occupant plus the candidate
        unit = _unit(rent=101, tenants={7})
        assert desirability(_tenant(income=50), unit, _parcel()) > 0
        assert desirability(_tenant(income=49), unit, _parcel()) == 0.0

    def test_own_unit_counts_tenant_once(self):
        tenant = _tenant(income=50)
        alone = _unit(rent=53, tenants={tenant.id})
        assert desirability(tenant, alone, _parcel()) == 0.0
        shared = _unit(rent=53, tenants={tenant.id, 7})
        assert desirability(tenant, shared, _parcel()) > 0

    def test_rent_share_never_below_one(self):
        unit = _unit(rent=0)
        assert desirability(_tenant(income=0), unit, _parcel()) == 0.0
        assert desirability(_tenant(income=1), unit, _parcel()) > 0

    @pytest.mark.parametrize("income,rent,occupants", [
        (0, 10, 0), (9, 10, 0), (4, 10, 1), (2, 10, 2), (24, 100, 3),
    ])
    def test_gate_matches_rent_share(self, income, rent, occupants):
        unit = _unit(rent=rent, tenants=range(occupants))
        assert income < max(1, rent // (occupants + 1))
        assert desirability(_tenant(income=income), unit, _parcel()) == 0.0


# ── Score formula ────────────────────────────────────────────────────

class TestFormula:
    def test_known_value(self):
        # ratio = sqrt(400 / 100) = 2, space = (150 - 50)^(1/32), commute = 1
        unit = _unit(rent=100, area=150.0, condition=0.5)
        expected = 2 * (100 ** (1 / 32) + 0.25 + 0.5 + 1.0)
        assert desirability(_tenant(income=400), unit, _parcel(0.25)) == pytest.approx(expected)

    def test_no_space_bonus_at_or_below_min_area(self):
        # area / n == 50: spaciousness contributes 0
        unit = _unit(rent=100, area=100.0, condition=0.0, tenants={5})
        score = desirability(_tenant(income=50), unit, _parcel(0.0))
        assert score == pytest.approx(1.0 * (0.0 + 0.0 + 0.0 + 1.0))

    def test_space_bonus_is_nearly_flat(self):
        small = desirability(_tenant(), _unit(area=60.0), _parcel())
        huge = desirability(_tenant(), _unit(area=6000.0), _parcel())
        assert huge > small
        assert huge - small < 2 * 0.5

    def test_higher_income_scales_whole_bundle(self):
        unit, parcel = _unit(), _parcel()
        low = desirability(_tenant(income=100), unit, parcel)
        high = desirability(_tenant(income=400), unit, parcel)
        assert high == pytest.approx(2 * low)

    def test_never_negative(self):
        unit = _unit(condition=0.0, area=10.0)
        assert desirability(_tenant(work=(50, 50)), unit, _parcel(0.0)) >= 0.0


# ── Commute ──────────────────────────────────────────────────────────

class TestCommute:
    def _score_at(self, work):
        return desirability(_tenant(work=work), _unit(), _parcel())

    def test_maximal_at_distance_zero(self):
        at_work = self._score_at((0, 0))
        for work in [(0, 2), (3, 4), (10, 0)]:
            assert at_work > self._score_at(work)

    def test_distance_one_matches_distance_zero(self):
        # commute term is 1 at both: 1/1 == 1
        assert self._score_at((1, 0)) == pytest.approx(self._score_at((0, 0)))

    def test_strictly_decreasing_with_distance(self):
        scores = [self._score_at((d, 0)) for d in [1, 2, 3, 5, 8, 13]]
        assert all(a > b for a, b in zip(scores, scores[1:]))

    def test_commute_term_is_inverse_distance(self):
        near = self._score_at((0, 0))
        far = self._score_at((3, 4))
        # ratio = 2; the bundles differ only in the commute term (1 vs 1/5)
        assert near - far == pytest.approx(2 * (1.0 - 0.2))
