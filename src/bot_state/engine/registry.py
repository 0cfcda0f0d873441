"""Per-bot command serialization on top of a store.

Each bot id gets its own lock; load, transition and save happen under it, so
the ordering and exactly-once resolution checks always see the prior state.
"""

from __future__ import annotations

import threading

from bot_state.db.store import BotStore
from bot_state.engine.engine import BotEngine
from bot_state.exceptions import BotExistsError, UnknownBotError
from bot_state.logging import get_logger
from bot_state.metrics.formulas import replay_metrics
from bot_state.models import AccuracyMetrics, BotSnapshot, BotState, Signal
from bot_state.operations import Operation

log = get_logger("registry")


class BotRegistry:
    def __init__(self, engine: BotEngine, store: BotStore) -> None:
        self.engine = engine
        self.store = store
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, bot_id: str, creating: bool = False) -> threading.Lock:
        """Lock for *bot_id*; only known bots (or one being created) get one."""
        with self._locks_guard:
            lock = self._locks.get(bot_id)
            if lock is None:
                if not creating and not self.store.exists(bot_id):
                    raise UnknownBotError(bot_id)
                lock = self._locks[bot_id] = threading.Lock()
            return lock

    def create(self, bot_id: str) -> BotState:
        with self._lock_for(bot_id, creating=True):
            if self.store.exists(bot_id):
                raise BotExistsError(bot_id)
            state = self.engine.instantiate(bot_id)
            self.store.create(state)
            return state

    def apply(self, bot_id: str, operation: Operation) -> BotState:
        """Apply one command atomically; on error nothing is saved."""
        with self._lock_for(bot_id):
            state = self.store.load(bot_id)
            new_state = self.engine.execute(state, operation)
            if new_state is not state:
                self.store.save(new_state)
            log.debug("operation_applied", bot_id=bot_id, op=operation.op)
            return new_state

    def snapshot(self, bot_id: str) -> BotSnapshot:
        with self._lock_for(bot_id):
            return self.engine.snapshot(self.store.load(bot_id))

    def history(self, bot_id: str) -> tuple[Signal, ...]:
        with self._lock_for(bot_id):
            return self.store.load(bot_id).history

    def window_metrics(self, bot_id: str, window_ms: int) -> AccuracyMetrics:
        """Metrics over signals from the last *window_ms*, rebuilt from the log."""
        with self._lock_for(bot_id):
            state = self.store.load(bot_id)
        now = self.engine.now()
        return replay_metrics(
            state.history,
            self.engine.policy.reference_price,
            now=now,
            since=now - window_ms,
        )
