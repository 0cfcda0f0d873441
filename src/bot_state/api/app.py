"""FastAPI application — command and query surface for bot state."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from pydantic import BaseModel

from bot_state.api.errors import register_error_handlers
from bot_state.config.schema import AppConfig
from bot_state.db.engine import create_tables, get_sessionmaker, init_engine
from bot_state.db.store import SqlBotStore
from bot_state.engine import BotEngine, BotRegistry
from bot_state.logging import bot_context, get_logger
from bot_state.models import AccuracyMetrics, BotSnapshot, Signal
from bot_state.operations import parse_operation

logger = get_logger("api")


class CreateBotRequest(BaseModel):
    bot_id: str


def _signal_dict(signal: Signal | None) -> dict[str, Any] | None:
    if signal is None:
        return None
    return {
        "timestamp": str(signal.timestamp),
        "action": signal.action,
        "predictedPriceMicro": str(signal.predicted_price_micro),
        "predictedPrice": float(signal.predicted_price),
        "confidenceBps": signal.confidence_bps,
        "confidence": signal.confidence,
        "reasoning": signal.reasoning,
        "actualPriceMicro": (
            str(signal.actual_price_micro) if signal.actual_price_micro is not None else None
        ),
        "actualPrice": float(signal.actual_price) if signal.actual_price is not None else None,
        "status": signal.status,
    }


def _metrics_dict(metrics: AccuracyMetrics) -> dict[str, Any]:
    return {
        "totalPredictions": metrics.total_predictions,
        "correctPredictions": metrics.correct_predictions,
        "directionalAccuracy": metrics.directional_accuracy,
        "rmse": metrics.rmse,
        "lastUpdated": metrics.last_updated,
    }


def _snapshot_dict(snapshot: BotSnapshot) -> dict[str, Any]:
    return {
        "botId": snapshot.bot_id,
        "latestSignal": _signal_dict(snapshot.latest_signal),
        "accuracy24h": _metrics_dict(snapshot.accuracy_24h),
        "followerCount": snapshot.follower_count,
    }


def create_app(config: AppConfig | None = None, registry: BotRegistry | None = None) -> FastAPI:
    """Build the app. Without *registry*, one backed by the configured DB is made on startup."""
    config = config or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if app.state.registry is not None:
            yield
            return
        engine = init_engine(config.database.url, echo=config.database.echo)
        create_tables(engine)
        app.state.registry = BotRegistry(BotEngine(config.policy), SqlBotStore(get_sessionmaker()))
        logger.info(
            "registry_initialised",
            reference_price=config.policy.reference_price.value,
            on_mismatch=config.policy.on_mismatch.value,
        )
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(
        title="Bot State API",
        description="Prediction signals and rolling accuracy statistics for trading bots",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.registry = registry
    register_error_handlers(app)

    def get_registry(request: Request) -> BotRegistry:
        return request.app.state.registry

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/bots")
    def list_bots(registry: BotRegistry = Depends(get_registry)):
        return {"bots": registry.store.bot_ids()}

    @app.post("/api/bots", status_code=201)
    def create_bot(req: CreateBotRequest, registry: BotRegistry = Depends(get_registry)):
        state = registry.create(req.bot_id)
        return _snapshot_dict(BotSnapshot.from_state(state))

    @app.get("/api/bots/{bot_id}")
    def get_bot(bot_id: str, registry: BotRegistry = Depends(get_registry)):
        return _snapshot_dict(registry.snapshot(bot_id))

    @app.get("/api/bots/{bot_id}/signals")
    def get_signals(bot_id: str, registry: BotRegistry = Depends(get_registry)):
        return {"botId": bot_id, "signals": [_signal_dict(s) for s in registry.history(bot_id)]}

    @app.get("/api/bots/{bot_id}/accuracy")
    def get_window_accuracy(
        bot_id: str,
        window_ms: int | None = None,
        registry: BotRegistry = Depends(get_registry),
    ):
        window = window_ms if window_ms is not None else config.metrics.window_ms
        metrics = registry.window_metrics(bot_id, window)
        return {"botId": bot_id, "windowMs": window, "accuracy": _metrics_dict(metrics)}

    @app.post("/api/bots/{bot_id}/operations")
    def execute_operation(
        bot_id: str,
        payload: dict[str, Any] = Body(...),
        registry: BotRegistry = Depends(get_registry),
    ):
        with bot_context(bot_id):
            operation = parse_operation(payload)
            state = registry.apply(bot_id, operation)
        return _snapshot_dict(BotSnapshot.from_state(state))

    return app
