"""Running accuracy statistics over resolved signals."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AccuracyMetrics(BaseModel):
    """Cumulative directional-accuracy and error statistics for one bot.

    ``sum_squared_errors`` (price units squared) is the running state behind
    ``rmse``; it is kept for persistence but excluded from serialized output.
    """

    model_config = ConfigDict(frozen=True)

    total_predictions: int = 0
    correct_predictions: int = 0
    directional_accuracy: float = 0.0
    rmse: float = 0.0
    last_updated: int = 0
    sum_squared_errors: float = Field(default=0.0, exclude=True)
