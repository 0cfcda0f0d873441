"""Submit/resolve state machine over a bot's signal slot.

Every transition takes a BotState and returns a new one; a rejected command
raises and the input state is left untouched.
"""

from __future__ import annotations

import time
from typing import Callable

from bot_state.exceptions import (
    BotStateError,
    OrderingError,
    ResolutionMismatchError,
    SignalValidationError,
)
from bot_state.logging import get_logger
from bot_state.metrics.formulas import update_metrics
from bot_state.models import BotSnapshot, BotState, Signal
from bot_state.operations import (
    AddFollower,
    Operation,
    RemoveFollower,
    ResolveSignal,
    SubmitPrediction,
)
from bot_state.policy import MismatchPolicy, ResolutionPolicy, select_reference_price
from bot_state.validation import check_ordering, validate_signal

log = get_logger("engine")


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class BotEngine:
    """Applies commands to bot state under a fixed resolution policy."""

    def __init__(
        self,
        policy: ResolutionPolicy | None = None,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self.policy = policy or ResolutionPolicy()
        self._clock = clock

    def now(self) -> int:
        return self._clock()

    def instantiate(self, bot_id: str) -> BotState:
        """Fresh state: no signal, zeroed metrics, no followers."""
        log.info("bot_instantiated", bot_id=bot_id)
        return BotState(bot_id=bot_id)

    def submit(self, state: BotState, cmd: SubmitPrediction) -> BotState:
        signal = cmd.to_signal()
        try:
            validate_signal(signal)
            check_ordering(signal, state.latest_signal)
        except SignalValidationError as exc:
            log.info(
                "signal_rejected",
                bot_id=state.bot_id,
                timestamp=signal.timestamp,
                field=exc.field,
                reason=exc.reason,
            )
            raise
        except OrderingError as exc:
            log.info(
                "signal_rejected",
                bot_id=state.bot_id,
                timestamp=signal.timestamp,
                reason="ordering",
                latest_timestamp=exc.latest_timestamp,
            )
            raise

        log.info(
            "signal_submitted",
            bot_id=state.bot_id,
            timestamp=signal.timestamp,
            action=signal.action,
            predicted_price=str(signal.predicted_price),
            confidence=signal.confidence,
        )
        return state.model_copy(
            update={
                "latest_signal": signal,
                "history": state.history + (signal,),
            }
        )

    def resolve(self, state: BotState, cmd: ResolveSignal) -> BotState:
        latest = state.latest_signal
        if latest is None or latest.timestamp != cmd.timestamp:
            pending_ts = latest.timestamp if latest is not None else None
            if self.policy.on_mismatch is MismatchPolicy.RAISE:
                raise ResolutionMismatchError(cmd.timestamp, pending_ts)
            log.warning(
                "resolve_ignored",
                bot_id=state.bot_id,
                timestamp=cmd.timestamp,
                latest_timestamp=pending_ts,
            )
            return state

        resolved = latest.resolve(cmd.actual_price_micro)
        reference = select_reference_price(
            self.policy.reference_price,
            resolved,
            state.previous_resolved(resolved.timestamp),
        )
        metrics = update_metrics(state.accuracy_24h, resolved, reference, self.now())

        log.info(
            "signal_resolved",
            bot_id=state.bot_id,
            timestamp=resolved.timestamp,
            actual_price=str(resolved.actual_price),
            reference_price=str(reference),
            total_predictions=metrics.total_predictions,
            directional_accuracy=metrics.directional_accuracy,
            rmse=metrics.rmse,
        )
        return state.model_copy(
            update={
                "latest_signal": resolved,
                "history": _replace_tail(state.history, resolved),
                "accuracy_24h": metrics,
            }
        )

    def add_follower(self, state: BotState) -> BotState:
        return state.model_copy(update={"follower_count": state.follower_count + 1})

    def remove_follower(self, state: BotState) -> BotState:
        return state.model_copy(update={"follower_count": max(state.follower_count - 1, 0)})

    def execute(self, state: BotState, operation: Operation) -> BotState:
        """Dispatch *operation* to the matching transition."""
        if isinstance(operation, SubmitPrediction):
            return self.submit(state, operation)
        if isinstance(operation, ResolveSignal):
            return self.resolve(state, operation)
        if isinstance(operation, AddFollower):
            return self.add_follower(state)
        if isinstance(operation, RemoveFollower):
            return self.remove_follower(state)
        raise BotStateError(f"Unsupported operation: {type(operation).__name__}")

    @staticmethod
    def snapshot(state: BotState) -> BotSnapshot:
        return BotSnapshot.from_state(state)


def _replace_tail(history: tuple[Signal, ...], signal: Signal) -> tuple[Signal, ...]:
    if history and history[-1].timestamp == signal.timestamp:
        return history[:-1] + (signal,)
    # Tail missing (state loaded without a log); start one from the latest signal
    return history + (signal,)
