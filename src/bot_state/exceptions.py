"""Error hierarchy for bot state transitions.

Every error here is local and non-fatal: a rejected command leaves the
``BotState`` it was applied to unchanged.
"""

from __future__ import annotations


class BotStateError(Exception):
    """Base class for all bot_state errors."""


class CommandParseError(BotStateError):
    """A command field could not be parsed (e.g. a non-numeric timestamp string)."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


class SignalValidationError(BotStateError):
    """A candidate signal failed a bounds check.

    ``reason`` is ``"out_of_range"`` or ``"too_long"``; ``max_length`` is set
    for the latter.
    """

    def __init__(self, field: str, reason: str, max_length: int | None = None) -> None:
        self.field = field
        self.reason = reason
        self.max_length = max_length
        if reason == "too_long":
            msg = f"{field} exceeds {max_length} characters"
        else:
            msg = f"{field} out of range"
        super().__init__(msg)


class OrderingError(BotStateError):
    """Submitted timestamp is not strictly greater than the stored signal's."""

    def __init__(self, timestamp: int, latest_timestamp: int) -> None:
        self.timestamp = timestamp
        self.latest_timestamp = latest_timestamp
        super().__init__(
            f"Signal timestamp {timestamp} must be greater than previous signal {latest_timestamp}"
        )


class ResolutionMismatchError(BotStateError):
    """Resolve named a timestamp that is not the pending signal's."""

    def __init__(self, timestamp: int, pending_timestamp: int | None) -> None:
        self.timestamp = timestamp
        self.pending_timestamp = pending_timestamp
        super().__init__(
            f"No pending signal at timestamp {timestamp} (latest: {pending_timestamp})"
        )


class AlreadyResolvedError(BotStateError):
    """The signal has already been resolved; a second resolve would double count."""

    def __init__(self, timestamp: int) -> None:
        self.timestamp = timestamp
        super().__init__(f"Signal {timestamp} is already resolved")


class UnknownBotError(BotStateError):
    def __init__(self, bot_id: str) -> None:
        self.bot_id = bot_id
        super().__init__(f"Unknown bot {bot_id!r}")


class BotExistsError(BotStateError):
    def __init__(self, bot_id: str) -> None:
        self.bot_id = bot_id
        super().__init__(f"Bot {bot_id!r} already exists")
