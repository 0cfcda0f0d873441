"""Fixed-point conversions — micro-units for prices, basis points for confidence."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

MICRO_MULTIPLIER = 1_000_000
BPS_MULTIPLIER = 10_000


def to_micro(price: Decimal | float | int | str) -> int:
    """Convert a price (e.g. ``3550.50``) to integer micro-units (``3550500000``)."""
    value = Decimal(str(price)) * MICRO_MULTIPLIER
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_micro(micro: int) -> Decimal:
    """Convert integer micro-units back to an exact Decimal price."""
    return Decimal(micro) / MICRO_MULTIPLIER


def to_bps(confidence: float | Decimal | str) -> int:
    """Convert a probability (e.g. ``0.87``) to basis points (``8700``)."""
    value = Decimal(str(confidence)) * BPS_MULTIPLIER
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_bps(bps: int) -> float:
    return bps / BPS_MULTIPLIER
