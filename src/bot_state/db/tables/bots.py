"""SQLAlchemy ORM models for the bot_state schema."""

from sqlalchemy import BigInteger, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from bot_state.db.base import Base

SCHEMA = "bot_state"

# SQLite only autoincrements INTEGER PRIMARY KEY
_RowId = BigInteger().with_variant(Integer, "sqlite")


class BotRow(Base):
    __tablename__ = "bots"
    __table_args__ = {"schema": SCHEMA}

    bot_id: Mapped[str] = mapped_column(Text, primary_key=True)
    follower_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    directional_accuracy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    rmse: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    sum_squared_errors: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_updated: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class SignalRow(Base):
    __tablename__ = "signals"
    __table_args__ = (
        UniqueConstraint("bot_id", "ts"),
        {"schema": SCHEMA},
    )

    id: Mapped[int] = mapped_column(_RowId, primary_key=True, autoincrement=True)
    bot_id: Mapped[str] = mapped_column(
        Text,
        ForeignKey(f"{SCHEMA}.bots.bot_id"),
        nullable=False,
    )
    ts: Mapped[int] = mapped_column(BigInteger, nullable=False)
    action: Mapped[str] = mapped_column(Text, nullable=False)
    predicted_price_micro: Mapped[int] = mapped_column(BigInteger, nullable=False)
    confidence_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    reasoning: Mapped[str] = mapped_column(Text, nullable=False, default="")
    actual_price_micro: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
