"""Projection of goal dates from a combined weight trend.

A goal is projected by extending the trend line from the latest sample:
days = (target - current) / slope. Only positive day counts produce a date;
a goal the trend is moving away from gets no date rather than an error.
"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Iterable, Optional

from weighttrack.tracking.models import GoalPrediction, GoalSpec, GoalType, WeightSample

# Maintenance goals are only projected when within this distance of target
MAINTAIN_TOLERANCE_KG = 5.0

# Fixed thresholds evaluated when the user has no active goals
LEGACY_GOAL_KG = 100.0
LEGACY_GOAL_90_KG = 90.0


def should_predict(
    goal_type: GoalType,
    slope: float,
    current_weight: float,
    target_weight: float,
) -> bool:
    """Whether the current trend is heading toward the goal's target."""
    goal_type = GoalType(goal_type)
    if goal_type is GoalType.LOSE:
        return slope < 0 and current_weight > target_weight
    if goal_type is GoalType.GAIN:
        return slope > 0 and current_weight < target_weight
    return abs(current_weight - target_weight) <= MAINTAIN_TOLERANCE_KG


def project_goal_date(
    slope: float,
    latest: WeightSample,
    target_weight: float,
) -> Optional[date]:
    """
    Date the trend line crosses target_weight, counted from the latest sample.

    Args:
        slope: Combined trend in kg/day
        latest: Most recent sample
        target_weight: Weight to reach (kg)

    Returns:
        Projected date, or None if the slope is flat, the crossing is not
        in the future, or it lies beyond date.max

    Example:
        >>> project_goal_date(-0.2, WeightSample(date(2025, 1, 1), 102.0), 100.0)
        datetime.date(2025, 1, 11)
    """
    if slope == 0:
        return None
    days_to_goal = (target_weight - latest.weight_kg) / slope
    if days_to_goal <= 0:
        return None
    # A near-flat trend can put the crossing past the last representable date
    if days_to_goal > (date.max - latest.source_date).days:
        return None
    # half-up rounding; days_to_goal is positive here
    return latest.source_date + timedelta(days=math.floor(days_to_goal + 0.5))


def project_goals(
    goals: Iterable[GoalSpec],
    slope: float,
    latest: WeightSample,
) -> tuple[GoalPrediction, ...]:
    """Project every goal; unreachable goals are kept with no date."""
    predictions = []
    for goal in goals:
        prediction_date = None
        if should_predict(goal.goal_type, slope, latest.weight_kg, goal.target_weight_kg):
            prediction_date = project_goal_date(slope, latest, goal.target_weight_kg)
        predictions.append(
            GoalPrediction(
                goal_id=goal.goal_id,
                target_weight_kg=goal.target_weight_kg,
                goal_type=goal.goal_type,
                description=goal.description,
                prediction_date=prediction_date,
            )
        )
    return tuple(predictions)


def project_legacy_goals(
    slope: float,
    latest: WeightSample,
) -> tuple[Optional[date], Optional[date]]:
    """
    Projected dates for the fixed 100 kg and 90 kg milestones.

    Each milestone fires only on a losing trend while the latest weight is
    still above it.

    Returns:
        Tuple of (date for 100 kg, date for 90 kg)
    """
    results = []
    for threshold in (LEGACY_GOAL_KG, LEGACY_GOAL_90_KG):
        projected = None
        if slope < 0 and latest.weight_kg > threshold:
            projected = project_goal_date(slope, latest, threshold)
        results.append(projected)
    return results[0], results[1]


def next_month_target(today: date) -> date:
    """First day of the calendar month after ``today``."""
    if today.month == 12:
        return date(today.year + 1, 1, 1)
    return date(today.year, today.month + 1, 1)


def project_weight(slope: float, latest: WeightSample, on: date) -> float:
    """Trend-line weight on a given date; dates before the latest sample extrapolate backward."""
    days_offset = (on - latest.source_date).days
    return latest.weight_kg + slope * days_offset
