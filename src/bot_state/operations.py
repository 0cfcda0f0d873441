"""Command protocol: the operations a bot accepts.

Large integers (timestamps, micro-unit prices) may arrive as decimal strings,
since JSON/GraphQL clients often cap integers at 32 bits.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationInfo, field_validator

from bot_state.exceptions import CommandParseError
from bot_state.models.signal import Action, Signal


# Unsigned, but capped to what a signed BIGINT column can store
MAX_U64_FIELD = 2**63 - 1


def _parse_u64(field: str, value: Any) -> int:
    if isinstance(value, bool):
        raise CommandParseError(field, value)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise CommandParseError(field, value)
    if not 0 <= parsed <= MAX_U64_FIELD:
        raise CommandParseError(field, value)
    return parsed


class SubmitPrediction(BaseModel):
    op: Literal["submit_prediction"] = "submit_prediction"
    timestamp: int
    action: Action
    predicted_price_micro: int
    confidence_bps: int
    reasoning: str = ""

    @field_validator("timestamp", "predicted_price_micro", mode="before")
    @classmethod
    def _coerce_u64(cls, value: Any, info: ValidationInfo) -> int:
        return _parse_u64(info.field_name, value)

    def to_signal(self) -> Signal:
        return Signal(
            timestamp=self.timestamp,
            action=self.action,
            predicted_price_micro=self.predicted_price_micro,
            confidence_bps=self.confidence_bps,
            reasoning=self.reasoning,
        )


class ResolveSignal(BaseModel):
    op: Literal["resolve_signal"] = "resolve_signal"
    timestamp: int
    actual_price_micro: int

    @field_validator("timestamp", "actual_price_micro", mode="before")
    @classmethod
    def _coerce_u64(cls, value: Any, info: ValidationInfo) -> int:
        return _parse_u64(info.field_name, value)


class AddFollower(BaseModel):
    op: Literal["add_follower"] = "add_follower"


class RemoveFollower(BaseModel):
    op: Literal["remove_follower"] = "remove_follower"


Operation = Annotated[
    Union[SubmitPrediction, ResolveSignal, AddFollower, RemoveFollower],
    Field(discriminator="op"),
]

_operation_adapter: TypeAdapter[Operation] = TypeAdapter(Operation)


def parse_operation(data: dict[str, Any]) -> Operation:
    """Parse a raw command payload into its typed Operation."""
    return _operation_adapter.validate_python(data)
