"""Signal model — one prediction event, pending until resolved."""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict

from bot_state.exceptions import AlreadyResolvedError
from bot_state.models.units import from_bps, from_micro, to_bps, to_micro

Action = Literal["BUY", "SELL", "HOLD"]
SignalStatus = Literal["PENDING", "RESOLVED"]


class Signal(BaseModel):
    """A price prediction emitted by a bot.

    Prices are integer micro-units and confidence is in basis points so the
    values survive persistence without float drift. Bounds are checked by
    :func:`bot_state.validation.validate_signal`, not here.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int
    action: Action
    predicted_price_micro: int
    confidence_bps: int
    reasoning: str = ""
    actual_price_micro: int | None = None

    @classmethod
    def from_prices(
        cls,
        timestamp: int,
        action: Action,
        predicted_price: Decimal | float | str,
        confidence: float,
        reasoning: str = "",
        actual_price: Decimal | float | str | None = None,
    ) -> Signal:
        """Build a signal from decimal prices and a 0-1 confidence."""
        return cls(
            timestamp=timestamp,
            action=action,
            predicted_price_micro=to_micro(predicted_price),
            confidence_bps=to_bps(confidence),
            reasoning=reasoning,
            actual_price_micro=None if actual_price is None else to_micro(actual_price),
        )

    @property
    def predicted_price(self) -> Decimal:
        return from_micro(self.predicted_price_micro)

    @property
    def actual_price(self) -> Decimal | None:
        if self.actual_price_micro is None:
            return None
        return from_micro(self.actual_price_micro)

    @property
    def confidence(self) -> float:
        return from_bps(self.confidence_bps)

    @property
    def is_resolved(self) -> bool:
        return self.actual_price_micro is not None

    @property
    def status(self) -> SignalStatus:
        return "RESOLVED" if self.is_resolved else "PENDING"

    def resolve(self, actual_price_micro: int) -> Signal:
        """Return a resolved copy carrying the observed price.

        Resolution is terminal: resolving twice raises AlreadyResolvedError.
        """
        if self.is_resolved:
            raise AlreadyResolvedError(self.timestamp)
        return self.model_copy(update={"actual_price_micro": actual_price_micro})
