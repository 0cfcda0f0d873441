"""Config loader — reads YAML, applies BOT_STATE_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from bot_state.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "BOT_STATE_DATABASE_URL": ("database", "url"),
    "BOT_STATE_LOG_LEVEL": ("logging", "level"),
    "BOT_STATE_LOG_FORMAT": ("logging", "format"),
    "BOT_STATE_REFERENCE_PRICE": ("policy", "reference_price"),
    "BOT_STATE_ON_MISMATCH": ("policy", "on_mismatch"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults. Env vars
    win over the file; see ``_ENV_OVERRIDES`` for the supported names.
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
