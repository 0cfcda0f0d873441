"""Pure accuracy computations, no storage and no clock."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import numpy as np

from bot_state.models.metrics import AccuracyMetrics
from bot_state.models.signal import Action, Signal
from bot_state.policy import ReferencePricePolicy, select_reference_price

# Max relative move (inclusive) for a HOLD call to count as correct
HOLD_BAND = Decimal("0.02")


def is_directionally_correct(action: Action, actual: Decimal, reference: Decimal) -> bool:
    """Did the observed move from *reference* to *actual* match *action*?

    BUY: actual >= reference.  SELL: actual <= reference.
    HOLD: |actual - reference| / reference <= 2%.
    """
    if action == "BUY":
        return actual >= reference
    if action == "SELL":
        return actual <= reference
    # Multiplied out so a zero reference cannot divide by zero
    return abs(actual - reference) <= HOLD_BAND * reference


def directional_accuracy(correct: int, total: int) -> float:
    """Share of directionally correct predictions as a percentage 0-100."""
    if total <= 0:
        return 0.0
    return correct / total * 100


def rmse(sum_squared_errors: float, total: int) -> float:
    if total <= 0:
        return 0.0
    return float(np.sqrt(sum_squared_errors / total))


def squared_error(signal: Signal) -> float:
    """(predicted - actual)^2 in price units; *signal* must be resolved."""
    actual = signal.actual_price
    if actual is None:
        raise ValueError(f"Signal {signal.timestamp} is not resolved")
    return float((signal.predicted_price - actual) ** 2)


def update_metrics(
    metrics: AccuracyMetrics,
    signal: Signal,
    reference_price: Decimal,
    now: int,
) -> AccuracyMetrics:
    """Fold one resolved signal into *metrics* and return the new record.

    This is a plain fold: folding the same signal twice counts it twice.
    """
    actual = signal.actual_price
    if actual is None:
        raise ValueError(f"Signal {signal.timestamp} is not resolved")

    correct = is_directionally_correct(signal.action, actual, reference_price)
    total = metrics.total_predictions + 1
    correct_count = metrics.correct_predictions + (1 if correct else 0)
    sum_sq = metrics.sum_squared_errors + squared_error(signal)

    return AccuracyMetrics(
        total_predictions=total,
        correct_predictions=correct_count,
        directional_accuracy=directional_accuracy(correct_count, total),
        rmse=rmse(sum_sq, total),
        last_updated=now,
        sum_squared_errors=sum_sq,
    )


def replay_metrics(
    history: Iterable[Signal],
    policy: ReferencePricePolicy,
    now: int,
    since: int | None = None,
) -> AccuracyMetrics:
    """Rebuild metrics from a signal log instead of incrementally.

    Reference prices are chosen exactly as during live resolution. With
    *since*, only signals with ``timestamp >= since`` are counted (though
    earlier ones may still serve as reference).
    """
    previous: Signal | None = None
    flags: list[bool] = []
    errors: list[float] = []

    for signal in sorted(history, key=lambda s: s.timestamp):
        if not signal.is_resolved:
            continue
        if since is None or signal.timestamp >= since:
            reference = select_reference_price(policy, signal, previous)
            flags.append(is_directionally_correct(signal.action, signal.actual_price, reference))
            errors.append(float(signal.predicted_price - signal.actual_price))
        previous = signal

    if not flags:
        return AccuracyMetrics(last_updated=now)

    err = np.array(errors, dtype=np.float64)
    sum_sq = float(np.sum(err**2))
    correct = int(np.count_nonzero(flags))
    total = len(flags)
    return AccuracyMetrics(
        total_predictions=total,
        correct_predictions=correct,
        directional_accuracy=directional_accuracy(correct, total),
        rmse=rmse(sum_sq, total),
        last_updated=now,
        sum_squared_errors=sum_sq,
    )
