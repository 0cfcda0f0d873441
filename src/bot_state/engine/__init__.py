"""Submit/resolve state machine and per-bot command serialization."""

from bot_state.engine.engine import BotEngine, wall_clock_ms
from bot_state.engine.registry import BotRegistry

__all__ = ["BotEngine", "BotRegistry", "wall_clock_ms"]
