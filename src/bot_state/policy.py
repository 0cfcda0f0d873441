"""Named policy switches for resolution behaviour."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

from bot_state.models.signal import Signal


class ReferencePricePolicy(str, Enum):
    """Which price a resolved signal's direction is judged against.

    SIGNAL_PREDICTED uses the resolved signal's own predicted price. The
    PREVIOUS_* variants use the most recent earlier resolved signal and fall
    back to SIGNAL_PREDICTED when there is none.
    """

    SIGNAL_PREDICTED = "signal_predicted"
    PREVIOUS_PREDICTED = "previous_predicted"
    PREVIOUS_ACTUAL = "previous_actual"


class MismatchPolicy(str, Enum):
    """What a resolve does when its timestamp is not the latest signal's."""

    IGNORE = "ignore"
    RAISE = "raise"


class ResolutionPolicy(BaseModel):
    reference_price: ReferencePricePolicy = ReferencePricePolicy.SIGNAL_PREDICTED
    on_mismatch: MismatchPolicy = MismatchPolicy.IGNORE


def select_reference_price(
    policy: ReferencePricePolicy,
    signal: Signal,
    previous: Signal | None,
) -> Decimal:
    """Pick the reference price for *signal* given the previous resolved signal."""
    if previous is not None:
        if policy is ReferencePricePolicy.PREVIOUS_PREDICTED:
            return previous.predicted_price
        if policy is ReferencePricePolicy.PREVIOUS_ACTUAL and previous.actual_price is not None:
            return previous.actual_price
    return signal.predicted_price
