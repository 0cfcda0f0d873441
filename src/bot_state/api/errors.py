"""Map BotStateError subclasses onto HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from bot_state.exceptions import (
    AlreadyResolvedError,
    BotExistsError,
    BotStateError,
    CommandParseError,
    OrderingError,
    ResolutionMismatchError,
    SignalValidationError,
    UnknownBotError,
)
from bot_state.logging import get_logger

logger = get_logger("api")

_STATUS_CODES: dict[type[BotStateError], int] = {
    CommandParseError: 400,
    UnknownBotError: 404,
    BotExistsError: 409,
    OrderingError: 409,
    ResolutionMismatchError: 409,
    AlreadyResolvedError: 409,
    SignalValidationError: 422,
}


def _error_body(exc: BotStateError) -> dict:
    body: dict = {"error": type(exc).__name__, "detail": str(exc)}
    if isinstance(exc, SignalValidationError):
        body["field"] = exc.field
        body["reason"] = exc.reason
        if exc.max_length is not None:
            body["max"] = exc.max_length
    elif isinstance(exc, CommandParseError):
        body["field"] = exc.field
    return body


async def bot_state_error_handler(request: Request, exc: BotStateError) -> JSONResponse:
    status = _STATUS_CODES.get(type(exc), 400)
    logger.info("command_rejected", path=request.url.path, status=status, error=type(exc).__name__)
    return JSONResponse(status_code=status, content=_error_body(exc))


async def operation_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "InvalidOperation", "detail": exc.errors(include_url=False)},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BotStateError, bot_state_error_handler)
    app.add_exception_handler(ValidationError, operation_validation_handler)
