"""Tests for Pydantic domain models and fixed-point conversions."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from bot_state.exceptions import AlreadyResolvedError
from bot_state.models import (
    AccuracyMetrics,
    BotSnapshot,
    BotState,
    Signal,
    from_bps,
    from_micro,
    to_bps,
    to_micro,
)


def _signal(**overrides) -> Signal:
    fields = dict(
        timestamp=1_000_000,
        action="BUY",
        predicted_price_micro=2_500_000_000,
        confidence_bps=7500,
        reasoning="Bullish trend detected",
    )
    fields.update(overrides)
    return Signal(**fields)


class TestUnits:
    def test_to_micro(self):
        assert to_micro(3550.50) == 3_550_500_000
        assert to_micro("2500") == 2_500_000_000
        assert to_micro(Decimal("0.0000015")) == 2  # half-up

    def test_from_micro_is_exact(self):
        assert from_micro(3_550_500_000) == Decimal("3550.5")
        assert from_micro(1) == Decimal("0.000001")

    def test_bps(self):
        assert to_bps(0.87) == 8700
        assert to_bps(1) == 10_000
        assert from_bps(8700) == pytest.approx(0.87)


class TestSignal:
    def test_pending_by_default(self):
        s = _signal()
        assert s.status == "PENDING"
        assert not s.is_resolved
        assert s.actual_price is None

    def test_decimal_views(self):
        s = _signal()
        assert s.predicted_price == Decimal("2500")
        assert s.confidence == pytest.approx(0.75)

    def test_from_prices(self):
        s = Signal.from_prices(1, "SELL", 2450.25, 0.6, reasoning="Bearish")
        assert s.predicted_price_micro == 2_450_250_000
        assert s.confidence_bps == 6000
        assert s.action == "SELL"

    def test_invalid_action(self):
        with pytest.raises(ValidationError):
            _signal(action="UP")

    def test_out_of_range_values_are_constructible(self):
        # Bounds are the validator's job
        s = _signal(confidence_bps=15_000, predicted_price_micro=-1)
        assert s.confidence_bps == 15_000

    def test_frozen(self):
        s = _signal()
        with pytest.raises(ValidationError):
            s.action = "SELL"

    def test_resolve_returns_new_signal(self):
        s = _signal()
        r = s.resolve(2_550_000_000)
        assert r.status == "RESOLVED"
        assert r.actual_price == Decimal("2550")
        assert s.actual_price_micro is None
        assert (r.timestamp, r.action, r.predicted_price_micro, r.confidence_bps, r.reasoning) == (
            s.timestamp,
            s.action,
            s.predicted_price_micro,
            s.confidence_bps,
            s.reasoning,
        )

    def test_resolve_twice_raises(self):
        r = _signal().resolve(2_550_000_000)
        with pytest.raises(AlreadyResolvedError) as exc_info:
            r.resolve(2_600_000_000)
        assert exc_info.value.timestamp == 1_000_000


class TestAccuracyMetrics:
    def test_defaults_zero(self):
        m = AccuracyMetrics()
        assert m.total_predictions == 0
        assert m.correct_predictions == 0
        assert m.directional_accuracy == 0.0
        assert m.rmse == 0.0
        assert m.last_updated == 0

    def test_sum_squared_errors_not_serialized(self):
        m = AccuracyMetrics(total_predictions=1, sum_squared_errors=2500.0, rmse=50.0)
        dumped = m.model_dump()
        assert "sum_squared_errors" not in dumped
        assert dumped["rmse"] == 50.0


class TestBotState:
    def test_previous_resolved(self):
        first = _signal(timestamp=1).resolve(1)
        second = _signal(timestamp=2)
        state = BotState(bot_id="b", latest_signal=second, history=(first, second))
        assert state.previous_resolved(2) == first
        assert state.previous_resolved(1) is None

    def test_snapshot_projection(self):
        state = BotState(bot_id="bot-1", follower_count=3)
        snap = BotSnapshot.from_state(state)
        assert snap.bot_id == "bot-1"
        assert snap.latest_signal is None
        assert snap.follower_count == 3
        assert "sum_squared_errors" not in snap.model_dump()["accuracy_24h"]
