"""Goal progress and achievement checks."""

from __future__ import annotations

from datetime import date
from typing import Optional

from weighttrack.tracking.models import GoalType, WeightGoal

# Maintenance counts as achieved within this distance of the target
MAINTAIN_ACHIEVED_TOLERANCE_KG = 1.0


def goal_progress(goal: WeightGoal, latest_weight: Optional[float]) -> float:
    """
    Percentage of the way from the goal's starting weight to its target.

    Args:
        goal: Stored goal
        latest_weight: Most recent logged weight, or None if nothing logged

    Returns:
        Progress in [0, 100]. Zero without a latest or starting weight.
    """
    if latest_weight is None or goal.starting_weight_kg is None:
        return 0.0

    start = goal.starting_weight_kg
    total_distance = goal.target_weight_kg - start
    current_distance = latest_weight - start

    if abs(total_distance) < 0.1:
        return 100.0

    goal_type = GoalType(goal.goal_type)
    if goal_type is GoalType.LOSE:
        progress = -current_distance / -total_distance * 100
    elif goal_type is GoalType.GAIN:
        progress = current_distance / total_distance * 100
    else:
        distance_from_target = abs(latest_weight - goal.target_weight_kg)
        progress = max(0.0, (1 - distance_from_target) * 100)

    return min(100.0, max(0.0, progress))


def is_achieved(goal: WeightGoal, latest_weight: Optional[float]) -> bool:
    """Whether the latest weight satisfies the goal."""
    if latest_weight is None:
        return False

    goal_type = GoalType(goal.goal_type)
    if goal_type is GoalType.LOSE:
        return latest_weight <= goal.target_weight_kg
    if goal_type is GoalType.GAIN:
        return latest_weight >= goal.target_weight_kg
    return abs(latest_weight - goal.target_weight_kg) <= MAINTAIN_ACHIEVED_TOLERANCE_KG


def days_to_target(goal: WeightGoal, today: date) -> Optional[int]:
    """Signed days from today until the goal's target date (negative if past)."""
    if goal.target_date is None:
        return None
    return (goal.target_date - today).days
