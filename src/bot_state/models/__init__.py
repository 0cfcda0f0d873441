"""Pydantic domain models."""

from bot_state.models.bot import BotSnapshot, BotState
from bot_state.models.metrics import AccuracyMetrics
from bot_state.models.signal import Action, Signal, SignalStatus
from bot_state.models.units import from_bps, from_micro, to_bps, to_micro

__all__ = [
    "AccuracyMetrics",
    "Action",
    "BotSnapshot",
    "BotState",
    "Signal",
    "SignalStatus",
    "from_bps",
    "from_micro",
    "to_bps",
    "to_micro",
]
