"""
Market trend estimation for landlords.

A least-squares line through the most recent monthly rent observations,
projected one month ahead.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .constants import TREND_MONTHS


class TrendEstimationError(ValueError):
    """The observations cannot support a line fit."""


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Tuple[float, float]:
    """Return (slope, intercept) of the least-squares line through the points."""
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.shape != y.shape:
        raise TrendEstimationError(f"xs and ys differ in length ({x.size} vs {y.size})")
    if x.size < 2:
        raise TrendEstimationError(f"Need at least 2 points, got {x.size}")
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        raise TrendEstimationError("Non-finite value in observations")

    if np.ptp(x) == 0.0:
        raise TrendEstimationError("All x values are equal")

    slope, intercept = np.polyfit(x, y, 1)
    return float(slope), float(intercept)


def project_trend(
    history: Sequence[Optional[float]],
    months: int = TREND_MONTHS,
) -> Tuple[float, float]:
    """
    Fit the last `months` entries of `history` and project one month ahead.

    Entries of None (months with no observation) are left out of the fit
    but keep their place on the x axis.

    Returns:
        (trend, invest): projected market rent, and its difference from
        the latest actual observation.
    """
    if len(history) < months:
        raise TrendEstimationError(f"Need {months} observations, got {len(history)}")
    window = list(history)[-months:]
    points = [(x, y) for x, y in enumerate(window) if y is not None]
    if not points:
        raise TrendEstimationError(f"No observations in the last {months} months")

    xs, ys = zip(*points)
    slope, intercept = linear_regression(xs, ys)
    trend = slope * months + intercept
    return trend, trend - ys[-1]
