"""Tests for goal date projection."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from weighttrack.tracking.goals import (
    next_month_target,
    project_goal_date,
    project_goals,
    project_legacy_goals,
    project_weight,
    should_predict,
)
from weighttrack.tracking.models import GoalSpec, GoalType, WeightSample

LATEST = WeightSample(date(2025, 3, 31), 114.0)


class TestShouldPredict:
    """Tests for the goal applicability rules."""

    @pytest.mark.parametrize(
        "goal_type,slope,current,target,expected",
        [
            (GoalType.LOSE, -0.1, 90.0, 85.0, True),
            (GoalType.LOSE, 0.1, 90.0, 85.0, False),  # trending the wrong way
            (GoalType.LOSE, -0.1, 84.0, 85.0, False),  # already below target
            (GoalType.LOSE, -0.1, 85.0, 85.0, False),  # exactly at target
            (GoalType.GAIN, 0.1, 60.0, 65.0, True),
            (GoalType.GAIN, -0.1, 60.0, 65.0, False),
            (GoalType.GAIN, 0.1, 66.0, 65.0, False),
            (GoalType.MAINTAIN, 0.0, 80.0, 85.0, True),  # exactly 5 kg away
            (GoalType.MAINTAIN, -0.1, 80.0, 85.1, False),
            (GoalType.MAINTAIN, 0.2, 86.0, 84.0, True),
        ],
    )
    def test_rules(self, goal_type, slope, current, target, expected) -> None:
        assert should_predict(goal_type, slope, current, target) is expected

    def test_accepts_plain_strings(self) -> None:
        assert should_predict("lose", -0.1, 90.0, 85.0) is True


class TestProjectGoalDate:
    """Tests for project_goal_date."""

    def test_projects_forward(self) -> None:
        projected = project_goal_date(-0.2, LATEST, 110.0)
        assert projected == LATEST.source_date + timedelta(days=20)
        assert projected > LATEST.source_date

    def test_rounds_half_up(self) -> None:
        """2.5 days rounds to 3."""
        latest = WeightSample(date(2025, 1, 1), 100.0)
        assert project_goal_date(-0.5, latest, 98.75) == date(2025, 1, 4)

    def test_rounds_down_below_half(self) -> None:
        latest = WeightSample(date(2025, 1, 1), 100.0)
        # 1 / 0.3 = 3.33 days
        assert project_goal_date(-0.3, latest, 99.0) == date(2025, 1, 4)

    def test_flat_slope(self) -> None:
        assert project_goal_date(0.0, LATEST, 110.0) is None

    def test_crossing_in_the_past(self) -> None:
        """Target above current weight on a losing trend was crossed already."""
        assert project_goal_date(-0.2, LATEST, 120.0) is None

    def test_already_at_target(self) -> None:
        assert project_goal_date(-0.2, LATEST, 114.0) is None

    def test_crossing_beyond_calendar(self) -> None:
        """A near-flat trend whose crossing is past date.max gets no date."""
        assert project_goal_date(-1e-7, LATEST, 110.0) is None

    def test_crossing_on_last_representable_day(self) -> None:
        latest = WeightSample(date.max - timedelta(days=10), 100.0)
        assert project_goal_date(-0.5, latest, 95.0) == date.max
        assert project_goal_date(-0.5, latest, 94.5) is None


class TestProjectGoals:
    """Tests for project_goals."""

    def test_every_goal_reported(self) -> None:
        goals = [
            GoalSpec(goal_id=1, target_weight_kg=110.0, goal_type=GoalType.LOSE, description="First"),
            GoalSpec(goal_id=2, target_weight_kg=115.0, goal_type=GoalType.LOSE),
            GoalSpec(goal_id=3, target_weight_kg=120.0, goal_type=GoalType.GAIN),
            GoalSpec(goal_id=4, target_weight_kg=112.0, goal_type=GoalType.MAINTAIN),
            GoalSpec(goal_id=5, target_weight_kg=116.0, goal_type=GoalType.MAINTAIN),
        ]
        predictions = project_goals(goals, -0.2, LATEST)

        assert [p.goal_id for p in predictions] == [1, 2, 3, 4, 5]
        by_id = {p.goal_id: p for p in predictions}

        assert by_id[1].prediction_date == date(2025, 4, 20)
        assert by_id[1].description == "First"
        # Already satisfied lose goal
        assert by_id[2].prediction_date is None
        # Gain goal on a losing trend
        assert by_id[3].prediction_date is None
        # Maintain goal the trend is heading toward
        assert by_id[4].prediction_date == date(2025, 4, 10)
        # Maintain goal the trend is moving away from
        assert by_id[5].prediction_date is None

    def test_gain_goal(self) -> None:
        latest = WeightSample(date(2025, 3, 31), 60.0)
        goals = [GoalSpec(goal_id=1, target_weight_kg=62.0, goal_type=GoalType.GAIN)]
        (prediction,) = project_goals(goals, 0.1, latest)
        assert prediction.prediction_date == date(2025, 4, 20)

    def test_empty(self) -> None:
        assert project_goals([], -0.2, LATEST) == ()


class TestLegacyGoals:
    """Tests for the fixed 100 kg / 90 kg milestones."""

    def test_both_milestones(self) -> None:
        goal_100, goal_90 = project_legacy_goals(-0.2, LATEST)
        assert goal_100 == LATEST.source_date + timedelta(days=70)
        assert goal_90 == LATEST.source_date + timedelta(days=120)

    def test_only_90_below_100(self) -> None:
        latest = WeightSample(date(2025, 3, 31), 95.0)
        goal_100, goal_90 = project_legacy_goals(-0.5, latest)
        assert goal_100 is None
        assert goal_90 == date(2025, 4, 10)

    def test_gaining_trend(self) -> None:
        assert project_legacy_goals(0.2, LATEST) == (None, None)

    def test_flat_trend(self) -> None:
        assert project_legacy_goals(0.0, LATEST) == (None, None)


class TestNextMonth:
    """Tests for next_month_target and project_weight."""

    @pytest.mark.parametrize(
        "today,expected",
        [
            (date(2025, 1, 1), date(2025, 2, 1)),
            (date(2025, 1, 31), date(2025, 2, 1)),
            (date(2025, 11, 15), date(2025, 12, 1)),
            (date(2025, 12, 31), date(2026, 1, 1)),
        ],
    )
    def test_first_of_next_month(self, today, expected) -> None:
        assert next_month_target(today) == expected

    def test_project_weight_forward(self) -> None:
        assert project_weight(-0.2, LATEST, date(2025, 4, 10)) == pytest.approx(112.0)

    def test_project_weight_backward(self) -> None:
        assert project_weight(-0.2, LATEST, date(2025, 3, 21)) == pytest.approx(116.0)
