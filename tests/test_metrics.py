"""Tests for the bot_state.metrics module."""

from __future__ import annotations

import math
from decimal import Decimal

import pytest

from bot_state.metrics.formulas import (
    directional_accuracy,
    is_directionally_correct,
    replay_metrics,
    rmse,
    update_metrics,
)
from bot_state.models import AccuracyMetrics, Signal
from bot_state.policy import ReferencePricePolicy

REF = Decimal("2500.0")


def _resolved(action, predicted, actual, ts=1_000_000) -> Signal:
    return Signal.from_prices(ts, action, predicted, 0.75, reasoning="Test", actual_price=actual)


# ═══════════════════════════════════════════════════════════════
# Directional correctness
# ═══════════════════════════════════════════════════════════════


class TestDirectionalCorrectness:
    @pytest.mark.parametrize(
        "action, actual, expected",
        [
            ("BUY", "2550.0", True),
            ("BUY", "2450.0", False),
            ("SELL", "2450.0", True),
            ("SELL", "2550.0", False),
            ("HOLD", "2510.0", True),
            ("HOLD", "2600.0", False),
        ],
    )
    def test_table(self, action, actual, expected):
        assert is_directionally_correct(action, Decimal(actual), REF) is expected

    def test_buy_flat_is_correct(self):
        assert is_directionally_correct("BUY", REF, REF)

    def test_sell_flat_is_correct(self):
        assert is_directionally_correct("SELL", REF, REF)

    def test_hold_band_is_inclusive(self):
        assert is_directionally_correct("HOLD", Decimal("2550"), REF)
        assert is_directionally_correct("HOLD", Decimal("2450"), REF)

    def test_hold_just_outside_band(self):
        assert not is_directionally_correct("HOLD", Decimal("2550.000001"), REF)
        assert not is_directionally_correct("HOLD", Decimal("2449.999999"), REF)


class TestScalarFormulas:
    def test_accuracy_zero_total(self):
        assert directional_accuracy(0, 0) == 0.0

    def test_accuracy(self):
        assert directional_accuracy(1, 2) == pytest.approx(50.0)

    def test_rmse_zero_total(self):
        assert rmse(100.0, 0) == 0.0

    def test_rmse(self):
        assert rmse(2500.0, 1) == pytest.approx(50.0)


# ═══════════════════════════════════════════════════════════════
# Aggregation
# ═══════════════════════════════════════════════════════════════


class TestUpdateMetrics:
    def test_first_fold(self):
        signal = _resolved("BUY", 2600.0, 2550.0)
        m = update_metrics(AccuracyMetrics(), signal, Decimal("2500.0"), now=2_000_000)
        assert m.total_predictions == 1
        assert m.correct_predictions == 1
        assert m.directional_accuracy == pytest.approx(100.0)
        assert m.rmse == pytest.approx(50.0)
        assert m.last_updated == 2_000_000

    def test_second_fold_incorrect_sell(self):
        m = update_metrics(
            AccuracyMetrics(), _resolved("BUY", 2600.0, 2550.0), Decimal("2500.0"), now=1
        )
        m = update_metrics(
            m, _resolved("SELL", 2400.0, 2600.0, ts=2_000_000), Decimal("2550.0"), now=2
        )
        assert m.total_predictions == 2
        assert m.correct_predictions == 1
        assert m.directional_accuracy == pytest.approx(50.0)
        # (50^2 + 200^2) / 2
        assert m.rmse == pytest.approx(math.sqrt(21250.0))
        assert m.last_updated == 2

    def test_input_not_mutated(self):
        before = AccuracyMetrics()
        update_metrics(before, _resolved("BUY", 2600.0, 2550.0), REF, now=1)
        assert before.total_predictions == 0

    def test_refolding_double_counts(self):
        # Current behaviour: the fold is not idempotent; the engine prevents re-resolution
        signal = _resolved("BUY", 2600.0, 2550.0)
        once = update_metrics(AccuracyMetrics(), signal, REF, now=1)
        twice = update_metrics(once, signal, REF, now=2)
        assert twice.total_predictions == 2
        assert twice.correct_predictions == 2
        assert twice.rmse == pytest.approx(50.0)

    def test_counts_never_decrease(self):
        m = AccuracyMetrics()
        for i, (action, actual) in enumerate([("BUY", 2400.0), ("SELL", 2600.0), ("HOLD", 2500.0)]):
            prev = m
            m = update_metrics(m, _resolved(action, 2500.0, actual, ts=i + 1), REF, now=i)
            assert m.total_predictions == prev.total_predictions + 1
            assert m.correct_predictions >= prev.correct_predictions

    def test_pending_signal_rejected(self):
        pending = Signal.from_prices(1, "BUY", 2500.0, 0.5)
        with pytest.raises(ValueError):
            update_metrics(AccuracyMetrics(), pending, REF, now=1)


class TestReplayMetrics:
    def _history(self) -> list[Signal]:
        return [
            _resolved("BUY", 2600.0, 2550.0, ts=1_000),
            _resolved("SELL", 2400.0, 2450.0, ts=2_000),
            Signal.from_prices(3_000, "HOLD", 2450.0, 0.5),
        ]

    def test_empty(self):
        m = replay_metrics([], ReferencePricePolicy.SIGNAL_PREDICTED, now=9)
        assert m.total_predictions == 0
        assert m.last_updated == 9

    def test_skips_pending(self):
        m = replay_metrics(self._history(), ReferencePricePolicy.SIGNAL_PREDICTED, now=9)
        assert m.total_predictions == 2

    def test_signal_predicted_reference(self):
        # BUY: 2550 >= 2600 false; SELL: 2450 <= 2400 false
        m = replay_metrics(self._history(), ReferencePricePolicy.SIGNAL_PREDICTED, now=9)
        assert m.correct_predictions == 0
        assert m.rmse == pytest.approx(50.0)

    def test_previous_actual_reference(self):
        # BUY has no predecessor -> own predicted (wrong); SELL vs 2550 -> correct
        m = replay_metrics(self._history(), ReferencePricePolicy.PREVIOUS_ACTUAL, now=9)
        assert m.correct_predictions == 1
        assert m.directional_accuracy == pytest.approx(50.0)

    def test_since_window_keeps_earlier_reference(self):
        m = replay_metrics(
            self._history(), ReferencePricePolicy.PREVIOUS_ACTUAL, now=9, since=1_500
        )
        assert m.total_predictions == 1
        assert m.correct_predictions == 1

    def test_matches_incremental(self):
        history = self._history()
        incremental = AccuracyMetrics()
        for signal in history:
            if signal.is_resolved:
                incremental = update_metrics(incremental, signal, signal.predicted_price, now=9)
        replayed = replay_metrics(history, ReferencePricePolicy.SIGNAL_PREDICTED, now=9)
        assert replayed.total_predictions == incremental.total_predictions
        assert replayed.correct_predictions == incremental.correct_predictions
        assert replayed.rmse == pytest.approx(incremental.rmse)
