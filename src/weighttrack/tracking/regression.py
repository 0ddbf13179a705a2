"""Least-squares fits over day-offset/weight coordinates.

Three building blocks for the trend predictor:

- ``prepare_coordinates`` turns dated samples into integer day offsets from
  an anchor date (whole calendar days, never fractional).
- ``linear_regression`` is plain ordinary least squares.
- ``weighted_linear_regression`` is least squares with per-sample weights;
  ``recency_weights`` gives later samples exponentially more influence,
  from just above 1 for the first sample to exactly 2 for the last.

Degenerate inputs (all samples on the same day, ill-conditioned weights)
never raise: OLS reports a flat line through the mean, and the weighted fit
falls back to OLS.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

import numpy as np

from weighttrack.tracking.models import Coordinate, RegressionResult, WeightSample

logger = logging.getLogger(__name__)

# Below this |denominator| the weighted normal equations are treated as singular
WEIGHTED_DENOMINATOR_EPSILON = 0.0001


def prepare_coordinates(
    samples: Sequence[WeightSample],
    anchor: Optional[date] = None,
) -> list[Coordinate]:
    """
    Convert samples into (day offset, weight) coordinates.

    Args:
        samples: Samples in ascending date order
        anchor: Day zero. Defaults to the first (earliest) sample's date.

    Returns:
        One Coordinate per sample, in input order

    Example:
        >>> from datetime import date
        >>> prepare_coordinates([
        ...     WeightSample(date(2025, 1, 1), 90.0),
        ...     WeightSample(date(2025, 1, 4), 89.5),
        ... ])
        [Coordinate(day_offset=0, weight_kg=90.0), Coordinate(day_offset=3, weight_kg=89.5)]
    """
    if not samples:
        return []
    if anchor is None:
        anchor = samples[0].source_date
    return [
        Coordinate(
            day_offset=(sample.source_date - anchor).days,
            weight_kg=float(sample.weight_kg),
        )
        for sample in samples
    ]


def split_coordinates(coords: Sequence[Coordinate]) -> tuple[list[int], list[float]]:
    """Split coordinates into parallel x (days) and y (weights) lists."""
    return [c.day_offset for c in coords], [c.weight_kg for c in coords]


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """
    Ordinary least-squares line through (x, y).

        slope     = (nΣxy − ΣxΣy) / (nΣxx − (Σx)²)
        intercept = (Σy − slope·Σx) / n

    When every x is identical the slope is undefined; the fit is reported
    as a flat line at mean(y).

    Args:
        x: Day offsets
        y: Weights, same length as x

    Returns:
        RegressionResult with slope in kg/day
    """
    n = len(x)
    if n == 0:
        return RegressionResult(slope=0.0, intercept=0.0)

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)

    # Constant weights: exact flat line, without summation round-off
    if np.all(ys == ys[0]):
        return RegressionResult(slope=0.0, intercept=float(ys[0]))

    sum_x = float(xs.sum())
    sum_y = float(ys.sum())
    sum_xy = float((xs * ys).sum())
    sum_xx = float((xs * xs).sum())

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        logger.debug("OLS denominator is zero for %d points; using flat fit", n)
        return RegressionResult(slope=0.0, intercept=sum_y / n)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return RegressionResult(slope=slope, intercept=intercept)


def recency_weights(n: int) -> list[float]:
    """
    Exponential recency weights for n samples in chronological order.

    Sample i (1-based) gets 2^(i/n).

    Example:
        >>> recency_weights(2)
        [1.4142135623730951, 2.0]
    """
    return [2 ** ((i + 1) / n) for i in range(n)]


def weighted_linear_regression(
    x: Sequence[float],
    y: Sequence[float],
    w: Sequence[float],
) -> RegressionResult:
    """
    Weighted least-squares line through (x, y).

        slope     = (ΣwΣwxy − ΣwxΣwy) / (ΣwΣwxx − (Σwx)²)
        intercept = (Σwy − slope·Σwx) / Σw

    Falls back to ``linear_regression(x, y)`` when the inputs are empty or
    mismatched, when the weights sum to zero, or when the denominator is
    within WEIGHTED_DENOMINATOR_EPSILON of zero.

    Args:
        x: Day offsets
        y: Weights (kg)
        w: Per-sample regression weights

    Returns:
        RegressionResult with slope in kg/day
    """
    n = len(x)
    if n == 0 or len(y) != n or len(w) != n:
        return linear_regression(x, y)

    ws = np.asarray(w, dtype=float)
    sum_w = float(ws.sum())
    if sum_w == 0:
        return linear_regression(x, y)

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)

    if np.all(ys == ys[0]):
        return RegressionResult(slope=0.0, intercept=float(ys[0]))

    sum_wx = float((ws * xs).sum())
    sum_wy = float((ws * ys).sum())
    sum_wxy = float((ws * xs * ys).sum())
    sum_wxx = float((ws * xs * xs).sum())

    denominator = sum_w * sum_wxx - sum_wx * sum_wx
    if abs(denominator) < WEIGHTED_DENOMINATOR_EPSILON:
        logger.debug(
            "Weighted denominator %.3g below threshold; falling back to OLS",
            denominator,
        )
        return linear_regression(x, y)

    slope = (sum_w * sum_wxy - sum_wx * sum_wy) / denominator
    intercept = (sum_wy - slope * sum_wx) / sum_w
    return RegressionResult(slope=slope, intercept=intercept)


def r_squared(
    x: Sequence[float],
    y: Sequence[float],
    fit: RegressionResult,
) -> float:
    """
    Coefficient of determination of ``fit`` on (x, y).

    Returns 0 when the weights have no variance. Clamped to [0, 1] so that
    floating error never reports a fit better than perfect or worse than
    the mean.
    """
    if len(y) == 0:
        return 0.0

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)

    predicted = fit.predict(xs)
    ss_total = float(((ys - ys.mean()) ** 2).sum())
    ss_residual = float(((ys - predicted) ** 2).sum())

    if ss_total <= 0 or np.all(ys == ys[0]):
        return 0.0
    return min(1.0, max(0.0, 1 - ss_residual / ss_total))
