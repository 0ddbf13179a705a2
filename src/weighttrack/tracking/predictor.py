"""Weight trend prediction from a dated weight history.

The trend is a fixed blend of three least-squares slopes:

1. Overall: OLS on the full history, for stability.
2. Recent: OLS on the recent window (last 30 days or last 10 samples,
   whichever holds more), for short-term relevance.
3. Weighted: weighted least squares on the full history with exponentially
   increasing weight on later samples.

When the recent window holds at least 5 samples it carries half of the
blend, otherwise 30%. The weighted slope always carries 40%; the overall
slope takes the remainder.

Confidence is the R² of a separate OLS fit on the recent window (or the
full history when the window is small), reported as a percentage.

Everything here is a pure function of its arguments. ``today`` is only read
from the clock when the caller does not pass it.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from weighttrack.tracking.goals import (
    next_month_target,
    project_goals,
    project_legacy_goals,
    project_weight,
)
from weighttrack.tracking.models import (
    GoalPrediction,
    GoalSpec,
    PredictionReport,
    WeightSample,
)
from weighttrack.tracking.regression import (
    linear_regression,
    prepare_coordinates,
    r_squared,
    recency_weights,
    split_coordinates,
    weighted_linear_regression,
)
from weighttrack.tracking.window import select_recent_window

logger = logging.getLogger(__name__)

MIN_SAMPLES = 2

# A recent window this large is trusted for both the blend and confidence
RECENT_WINDOW_MIN_SAMPLES = 5

WEIGHTED_SLOPE_WEIGHT = 0.4
RECENT_SLOPE_WEIGHT_STRONG = 0.5
RECENT_SLOPE_WEIGHT_WEAK = 0.3


def combine_slopes(
    overall_slope: float,
    recent_slope: float,
    weighted_slope: float,
    recent_count: int,
) -> float:
    """
    Blend the three slope estimates into a single trend (kg/day).

    Args:
        overall_slope: OLS slope over the full history
        recent_slope: OLS slope over the recent window
        weighted_slope: Recency-weighted slope over the full history
        recent_count: Number of samples in the recent window

    Returns:
        Combined slope
    """
    if recent_count >= RECENT_WINDOW_MIN_SAMPLES:
        recent_weight = RECENT_SLOPE_WEIGHT_STRONG
    else:
        recent_weight = RECENT_SLOPE_WEIGHT_WEAK
    overall_weight = 1 - recent_weight - WEIGHTED_SLOPE_WEIGHT

    return (
        recent_slope * recent_weight
        + weighted_slope * WEIGHTED_SLOPE_WEIGHT
        + overall_slope * overall_weight
    )


def _window_fit(window: Sequence[WeightSample]):
    # Re-anchored at the window's own first sample
    x, y = split_coordinates(prepare_coordinates(window))
    return x, y, linear_regression(x, y)


def calculate_trend_slope(
    samples: Sequence[WeightSample],
    recent: Optional[Sequence[WeightSample]] = None,
) -> float:
    """
    Combined trend slope for a history of at least two samples.

    Args:
        samples: Samples in ascending date order
        recent: Pre-selected recent window; selected from samples if None

    Returns:
        Combined slope in kg/day (negative = losing)
    """
    if recent is None:
        recent = select_recent_window(samples)

    x, y = split_coordinates(prepare_coordinates(samples))
    overall_slope = linear_regression(x, y).slope
    weighted_slope = weighted_linear_regression(x, y, recency_weights(len(x))).slope

    recent_slope = overall_slope
    if len(recent) >= MIN_SAMPLES:
        recent_slope = _window_fit(recent)[2].slope

    combined = combine_slopes(overall_slope, recent_slope, weighted_slope, len(recent))
    logger.debug(
        "Slopes: overall=%.4f recent=%.4f (n=%d) weighted=%.4f combined=%.4f",
        overall_slope,
        recent_slope,
        len(recent),
        weighted_slope,
        combined,
    )
    return combined


def estimate_confidence(
    samples: Sequence[WeightSample],
    recent: Optional[Sequence[WeightSample]] = None,
) -> float:
    """
    Trend confidence as a percentage (0-100, one decimal).

    Uses the recent window when it holds at least
    RECENT_WINDOW_MIN_SAMPLES samples, otherwise the full history.
    """
    if recent is None:
        recent = select_recent_window(samples)
    window = recent if len(recent) >= RECENT_WINDOW_MIN_SAMPLES else samples
    if not window:
        return 0.0

    x, y, fit = _window_fit(window)
    return round(r_squared(x, y, fit) * 100, 1)


def predict_weight_trend(
    samples: Iterable[WeightSample],
    goals: Iterable[GoalSpec] = (),
    today: Optional[date] = None,
) -> PredictionReport:
    """
    Build the prediction report for a weight history.

    Args:
        samples: Weight samples in ascending date order
        goals: Active goals to project; when empty, the fixed 100 kg and
               90 kg milestones are projected instead
        today: Reference date for the next-month estimate
               (default: date.today())

    Returns:
        PredictionReport. With fewer than two samples the report has
        has_enough_data=False and no derived values.

    Example:
        >>> from datetime import date, timedelta
        >>> start = date(2025, 1, 1)
        >>> history = [
        ...     WeightSample(start + timedelta(days=10 * i), 120.0 - 2 * i)
        ...     for i in range(4)
        ... ]
        >>> report = predict_weight_trend(history, today=date(2025, 1, 31))
        >>> report.trend, report.daily_weight_loss, report.confidence
        ('losing', 0.2, 100.0)
    """
    samples = tuple(samples)
    goals = tuple(goals)
    n = len(samples)

    if n < MIN_SAMPLES:
        logger.debug("Not enough data for prediction (%d samples)", n)
        return PredictionReport(
            has_enough_data=False,
            entry_count=n,
            goal_predictions=tuple(
                GoalPrediction(
                    goal_id=goal.goal_id,
                    target_weight_kg=goal.target_weight_kg,
                    goal_type=goal.goal_type,
                    description=goal.description,
                    prediction_date=None,
                )
                for goal in goals
            ),
        )

    if today is None:
        today = date.today()

    latest = samples[-1]
    recent = select_recent_window(samples)

    slope = calculate_trend_slope(samples, recent)
    confidence = estimate_confidence(samples, recent)

    next_month_date = next_month_target(today)
    next_month_weight = project_weight(slope, latest, next_month_date)

    goal_predictions = project_goals(goals, slope, latest)
    goal_date, goal_date_90 = (None, None)
    if not goals:
        goal_date, goal_date_90 = project_legacy_goals(slope, latest)

    return PredictionReport(
        has_enough_data=True,
        entry_count=n,
        next_month_prediction=round(next_month_weight, 2),
        next_month_date=next_month_date,
        goal_date=goal_date,
        goal_date_90=goal_date_90,
        goal_predictions=goal_predictions,
        daily_weight_loss=round(abs(slope), 3),
        confidence=confidence,
        # zero slope reports as gaining
        trend="losing" if slope < 0 else "gaining",
    )
