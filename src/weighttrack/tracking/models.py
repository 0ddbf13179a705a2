"""Data models for weight trend prediction and goal tracking."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class GoalType(str, Enum):
    """Direction a weight goal is pursued in."""

    LOSE = "lose"
    GAIN = "gain"
    MAINTAIN = "maintain"


class GoalStatus(str, Enum):
    """Bookkeeping state of a stored goal."""

    ACTIVE = "active"
    ACHIEVED = "achieved"
    ABANDONED = "abandoned"


def as_calendar_date(value: Union[date, datetime]) -> date:
    """Reduce a datetime to its calendar date; dates pass through unchanged."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class WeightSample:
    """A single dated weight measurement."""

    source_date: date
    weight_kg: float

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "source_date", as_calendar_date(self.source_date))
        if isinstance(self.weight_kg, (Decimal, int)):
            object.__setattr__(self, "weight_kg", float(self.weight_kg))


@dataclass(frozen=True)
class Coordinate:
    """Day offset from an anchor date paired with a weight."""

    day_offset: int
    weight_kg: float


@dataclass(frozen=True)
class GoalSpec:
    """A goal as seen by the prediction engine."""

    goal_id: Optional[int]
    target_weight_kg: float
    goal_type: GoalType
    description: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            goal_type = GoalType(self.goal_type)
        except ValueError:
            valid = tuple(t.value for t in GoalType)
            raise ValueError(
                f"goal_type must be one of {valid}, got '{self.goal_type}'"
            ) from None
        object.__setattr__(self, "goal_type", goal_type)
        object.__setattr__(self, "target_weight_kg", float(self.target_weight_kg))


@dataclass(frozen=True)
class RegressionResult:
    """Slope (kg/day) and intercept (kg) of a fitted line."""

    slope: float
    intercept: float

    def predict(self, day_offset: float) -> float:
        return self.slope * day_offset + self.intercept


@dataclass(frozen=True)
class GoalPrediction:
    """Projected date for a single goal; prediction_date is None when unreachable."""

    goal_id: Optional[int]
    target_weight_kg: float
    goal_type: GoalType
    description: Optional[str]
    prediction_date: Optional[date]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.goal_id,
            "target_weight": self.target_weight_kg,
            "goal_type": self.goal_type.value,
            "prediction_date": _iso(self.prediction_date),
            "description": self.description,
        }


@dataclass(frozen=True)
class PredictionReport:
    """Result of a single prediction run.

    Optional fields are None when they cannot be computed; the report is
    never partially populated. ``to_dict`` produces the camelCase mapping
    consumed by the dashboard front end.
    """

    has_enough_data: bool
    entry_count: int
    next_month_prediction: Optional[float] = None
    next_month_date: Optional[date] = None
    goal_date: Optional[date] = None
    goal_date_90: Optional[date] = None
    goal_predictions: tuple[GoalPrediction, ...] = field(default_factory=tuple)
    daily_weight_loss: Optional[float] = None
    confidence: float = 0.0
    trend: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary with ISO-formatted dates."""
        return {
            "hasEnoughData": self.has_enough_data,
            "nextMonthPrediction": self.next_month_prediction,
            "nextMonthDate": _iso(self.next_month_date),
            "goalDate": _iso(self.goal_date),
            "goalDate90": _iso(self.goal_date_90),
            "goalPredictions": [p.to_dict() for p in self.goal_predictions],
            "dailyWeightLoss": self.daily_weight_loss,
            "confidence": self.confidence,
            "trend": self.trend,
            "entryCount": self.entry_count,
        }


@dataclass
class WeightEntry:
    """A stored weight log entry."""

    entry_id: Optional[int]
    entry_date: date
    weight_kg: float
    created_at: Optional[datetime] = None

    def to_sample(self) -> WeightSample:
        return WeightSample(source_date=self.entry_date, weight_kg=self.weight_kg)


@dataclass
class WeightGoal:
    """A stored weight goal with its bookkeeping fields."""

    goal_id: Optional[int]
    target_weight_kg: float
    goal_type: str = GoalType.LOSE.value
    status: str = GoalStatus.ACTIVE.value
    description: Optional[str] = None
    target_date: Optional[date] = None
    starting_weight_kg: Optional[float] = None
    created_date: Optional[date] = None

    def __post_init__(self) -> None:
        valid_types = tuple(t.value for t in GoalType)
        if self.goal_type not in valid_types:
            raise ValueError(
                f"goal_type must be one of {valid_types}, got '{self.goal_type}'"
            )
        valid_statuses = tuple(s.value for s in GoalStatus)
        if self.status not in valid_statuses:
            raise ValueError(
                f"status must be one of {valid_statuses}, got '{self.status}'"
            )

    @property
    def is_active(self) -> bool:
        return self.status == GoalStatus.ACTIVE.value

    def to_spec(self) -> GoalSpec:
        """Project onto the fields the prediction engine reads."""
        return GoalSpec(
            goal_id=self.goal_id,
            target_weight_kg=self.target_weight_kg,
            goal_type=GoalType(self.goal_type),
            description=self.description,
        )


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None
