"""Bot state storage — SQL-backed and in-memory stores with one interface."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from bot_state.db.tables import BotRow, SignalRow
from bot_state.exceptions import BotExistsError, UnknownBotError
from bot_state.models import AccuracyMetrics, BotState, Signal


class BotStore(Protocol):
    def exists(self, bot_id: str) -> bool: ...

    def create(self, state: BotState) -> None: ...

    def load(self, bot_id: str) -> BotState: ...

    def save(self, state: BotState) -> None: ...

    def bot_ids(self) -> list[str]: ...


class MemoryBotStore:
    """Dict-backed store for tests and embedded use."""

    def __init__(self) -> None:
        self._states: dict[str, BotState] = {}

    def exists(self, bot_id: str) -> bool:
        return bot_id in self._states

    def create(self, state: BotState) -> None:
        if state.bot_id in self._states:
            raise BotExistsError(state.bot_id)
        self._states[state.bot_id] = state

    def load(self, bot_id: str) -> BotState:
        try:
            return self._states[bot_id]
        except KeyError:
            raise UnknownBotError(bot_id) from None

    def save(self, state: BotState) -> None:
        if state.bot_id not in self._states:
            raise UnknownBotError(state.bot_id)
        self._states[state.bot_id] = state

    def bot_ids(self) -> list[str]:
        return sorted(self._states)


def _signal_from_row(row: SignalRow) -> Signal:
    return Signal(
        timestamp=row.ts,
        action=row.action,
        predicted_price_micro=row.predicted_price_micro,
        confidence_bps=row.confidence_bps,
        reasoning=row.reasoning,
        actual_price_micro=row.actual_price_micro,
    )


def _apply_metrics(row: BotRow, metrics: AccuracyMetrics) -> None:
    row.total_predictions = metrics.total_predictions
    row.correct_predictions = metrics.correct_predictions
    row.directional_accuracy = metrics.directional_accuracy
    row.rmse = metrics.rmse
    row.sum_squared_errors = metrics.sum_squared_errors
    row.last_updated = metrics.last_updated


class SqlBotStore:
    """Persists BotState into the bots/signals tables, one session per call.

    Signal rows are append-only; the only column ever updated is
    ``actual_price_micro`` when a signal is resolved.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def exists(self, bot_id: str) -> bool:
        with self._session_factory() as session:
            return session.get(BotRow, bot_id) is not None

    def create(self, state: BotState) -> None:
        with self._session_factory() as session:
            if session.get(BotRow, state.bot_id) is not None:
                raise BotExistsError(state.bot_id)
            row = BotRow(
                bot_id=state.bot_id,
                follower_count=state.follower_count,
                created_at=datetime.now(timezone.utc),
            )
            _apply_metrics(row, state.accuracy_24h)
            session.add(row)
            self._sync_signals(session, state)
            session.commit()

    def load(self, bot_id: str) -> BotState:
        with self._session_factory() as session:
            row = session.get(BotRow, bot_id)
            if row is None:
                raise UnknownBotError(bot_id)
            signal_rows = session.execute(
                select(SignalRow).where(SignalRow.bot_id == bot_id).order_by(SignalRow.ts)
            ).scalars().all()

            history = tuple(_signal_from_row(r) for r in signal_rows)
            return BotState(
                bot_id=row.bot_id,
                latest_signal=history[-1] if history else None,
                history=history,
                accuracy_24h=AccuracyMetrics(
                    total_predictions=row.total_predictions,
                    correct_predictions=row.correct_predictions,
                    directional_accuracy=row.directional_accuracy,
                    rmse=row.rmse,
                    last_updated=row.last_updated,
                    sum_squared_errors=row.sum_squared_errors,
                ),
                follower_count=row.follower_count,
            )

    def save(self, state: BotState) -> None:
        with self._session_factory() as session:
            row = session.get(BotRow, state.bot_id)
            if row is None:
                raise UnknownBotError(state.bot_id)
            row.follower_count = state.follower_count
            _apply_metrics(row, state.accuracy_24h)
            self._sync_signals(session, state)
            session.commit()

    def bot_ids(self) -> list[str]:
        with self._session_factory() as session:
            return list(session.execute(select(BotRow.bot_id).order_by(BotRow.bot_id)).scalars())

    @staticmethod
    def _sync_signals(session: Session, state: BotState) -> None:
        existing = {
            r.ts: r
            for r in session.execute(
                select(SignalRow).where(SignalRow.bot_id == state.bot_id)
            ).scalars()
        }
        for signal in state.history:
            row = existing.get(signal.timestamp)
            if row is None:
                session.add(
                    SignalRow(
                        bot_id=state.bot_id,
                        ts=signal.timestamp,
                        action=signal.action,
                        predicted_price_micro=signal.predicted_price_micro,
                        confidence_bps=signal.confidence_bps,
                        reasoning=signal.reasoning,
                        actual_price_micro=signal.actual_price_micro,
                    )
                )
            elif row.actual_price_micro != signal.actual_price_micro:
                row.actual_price_micro = signal.actual_price_micro
