"""HTTP command/query surface."""

from bot_state.api.app import create_app

__all__ = ["create_app"]
