"""Accuracy metrics: directional correctness and error aggregation."""

from bot_state.metrics.formulas import (
    HOLD_BAND,
    directional_accuracy,
    is_directionally_correct,
    replay_metrics,
    rmse,
    squared_error,
    update_metrics,
)

__all__ = [
    "HOLD_BAND",
    "directional_accuracy",
    "is_directionally_correct",
    "replay_metrics",
    "rmse",
    "squared_error",
    "update_metrics",
]
