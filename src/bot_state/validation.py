"""Signal validation — pure bounds checks plus the submit ordering rule."""

from __future__ import annotations

from bot_state.exceptions import OrderingError, SignalValidationError
from bot_state.models.signal import Signal
from bot_state.models.units import BPS_MULTIPLIER

MAX_REASONING_LENGTH = 512


def validate_signal(signal: Signal) -> None:
    """Raise SignalValidationError if *signal* is out of bounds.

    Checks confidence in [0, 10000] bps, predicted price > 0, and reasoning
    of at most 512 characters.
    """
    if not 0 <= signal.confidence_bps <= BPS_MULTIPLIER:
        raise SignalValidationError("confidence", "out_of_range")
    if signal.predicted_price_micro <= 0:
        raise SignalValidationError("predicted_price", "out_of_range")
    if len(signal.reasoning) > MAX_REASONING_LENGTH:
        raise SignalValidationError(
            "reasoning", "too_long", max_length=MAX_REASONING_LENGTH
        )


def check_ordering(candidate: Signal, latest: Signal | None) -> None:
    """Raise OrderingError unless *candidate* is newer than the stored signal."""
    if latest is not None and candidate.timestamp <= latest.timestamp:
        raise OrderingError(candidate.timestamp, latest.timestamp)
