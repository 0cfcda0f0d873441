"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field

from bot_state.policy import ResolutionPolicy


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///bot_state.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class MetricsConfig(BaseModel):
    # Rolling window for the /accuracy endpoint, in milliseconds
    window_ms: int = 24 * 60 * 60 * 1000


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    policy: ResolutionPolicy = Field(default_factory=ResolutionPolicy)
    api: ApiConfig = Field(default_factory=ApiConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
