"""Weight trend prediction and goal tracking.

This module turns a dated weight history into a forward-looking trend:
a blend of overall, recent-window and recency-weighted least-squares
slopes, an R² confidence score, and projected dates for weight goals.

Key components:
- Coordinate preparation and least-squares fits (regression)
- Recent window selection (last 30 days or last 10 samples)
- Slope blending, confidence and report assembly (predictor)
- Goal date projection and next-month estimate (goals)
- Goal progress bookkeeping and period weight changes
"""

from __future__ import annotations

from weighttrack.tracking.models import (
    GoalPrediction,
    GoalSpec,
    GoalStatus,
    GoalType,
    PredictionReport,
    WeightEntry,
    WeightGoal,
    WeightSample,
)
from weighttrack.tracking.predictor import predict_weight_trend

__all__ = [
    "GoalPrediction",
    "GoalSpec",
    "GoalStatus",
    "GoalType",
    "PredictionReport",
    "WeightEntry",
    "WeightGoal",
    "WeightSample",
    "predict_weight_trend",
]
