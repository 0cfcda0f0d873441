"""Bot aggregate and its read-only query projection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from bot_state.models.metrics import AccuracyMetrics
from bot_state.models.signal import Signal


class BotState(BaseModel):
    """Everything stored for one bot.

    ``history`` is append-only and ordered by timestamp; its tail is always
    ``latest_signal`` (with the same resolution status).
    """

    model_config = ConfigDict(frozen=True)

    bot_id: str
    latest_signal: Signal | None = None
    history: tuple[Signal, ...] = ()
    accuracy_24h: AccuracyMetrics = Field(default_factory=AccuracyMetrics)
    follower_count: int = 0

    def previous_resolved(self, before: int) -> Signal | None:
        """Most recent resolved signal with a timestamp strictly before *before*."""
        for signal in reversed(self.history):
            if signal.timestamp < before and signal.is_resolved:
                return signal
        return None


class BotSnapshot(BaseModel):
    """Externally observable state of a bot."""

    bot_id: str
    latest_signal: Signal | None
    accuracy_24h: AccuracyMetrics
    follower_count: int

    @classmethod
    def from_state(cls, state: BotState) -> BotSnapshot:
        return cls(
            bot_id=state.bot_id,
            latest_signal=state.latest_signal,
            accuracy_24h=state.accuracy_24h,
            follower_count=state.follower_count,
        )
