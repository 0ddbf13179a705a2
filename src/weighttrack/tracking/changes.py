"""Weight change summaries over fixed look-back periods."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Sequence

from weighttrack.tracking.models import WeightSample

CHANGE_PERIODS_DAYS = (7, 14, 30)


@dataclass(frozen=True)
class PeriodChange:
    """Change from the latest weight to the weight ``days`` ago."""

    days: int
    change_kg: Optional[float]
    percentage: Optional[float]


@dataclass(frozen=True)
class WeightChanges:
    """Latest weight and how it moved recently."""

    current_weight: float
    current_date: date
    recent_change: Optional[float]
    periods: tuple[PeriodChange, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "current_weight": self.current_weight,
            "current_date": self.current_date.isoformat(),
            "recent_change": self.recent_change,
            "period_changes": {
                p.days: {"change": p.change_kg, "percentage": p.percentage}
                for p in self.periods
            },
        }


def round_to_nearest_five_cents(weight: float) -> float:
    """
    Round a weight to the nearest 0.05 kg, halves rounding up.

    Example:
        >>> round_to_nearest_five_cents(95.23)
        95.25
    """
    return math.floor(weight * 20 + 0.5) / 20


def _latest_on_or_before(
    samples: Sequence[WeightSample], cutoff: date
) -> Optional[WeightSample]:
    found = None
    for sample in samples:
        if sample.source_date <= cutoff:
            found = sample
        else:
            break
    return found


def calculate_weight_changes(
    samples: Sequence[WeightSample],
    periods: Sequence[int] = CHANGE_PERIODS_DAYS,
) -> Optional[WeightChanges]:
    """
    Summarize recent weight changes.

    Args:
        samples: Samples in ascending date order
        periods: Look-back periods in days

    Returns:
        WeightChanges, or None if there are no samples
    """
    if not samples:
        return None

    latest = samples[-1]
    current = latest.weight_kg

    previous = _latest_on_or_before(
        samples, latest.source_date - timedelta(days=1)
    )
    recent_change = None
    if previous is not None:
        recent_change = round(current - previous.weight_kg, 1)

    period_changes = []
    for days in periods:
        past = _latest_on_or_before(samples, latest.source_date - timedelta(days=days))
        if past is None:
            period_changes.append(PeriodChange(days=days, change_kg=None, percentage=None))
            continue
        change = round(current - past.weight_kg, 1)
        period_changes.append(
            PeriodChange(
                days=days,
                change_kg=change,
                percentage=round(change / past.weight_kg * 100, 1),
            )
        )

    return WeightChanges(
        current_weight=round_to_nearest_five_cents(current),
        current_date=latest.source_date,
        recent_change=recent_change,
        periods=tuple(period_changes),
    )
