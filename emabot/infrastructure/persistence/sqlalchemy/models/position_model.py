"""Position ORM Model - SQLAlchemy mapping for the Position aggregate."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Index, Integer, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

PRICE = Numeric(precision=20, scale=8)


class PositionModel(Base):
    """ORM model for the Position aggregate.

    Persistence only, no business logic.
    Business logic lives in domain.trading.entities.Position.
    """

    __tablename__ = "positions"

    # SQLite only autoincrements INTEGER PRIMARY KEY
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    position_type: Mapped[str] = mapped_column(String(10), nullable=False)  # "LONG" / "SHORT"
    status: Mapped[str] = mapped_column(String(10), nullable=False)  # "OPEN" / "CLOSED"
    qty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Entry snapshot
    entry_price: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    entry_ema_fast: Mapped[Decimal] = mapped_column(PRICE, nullable=False)
    entry_ema_slow: Mapped[Decimal] = mapped_column(PRICE, nullable=False)

    # Exit snapshot (filled exactly once, on close)
    exit_price: Mapped[Decimal | None] = mapped_column(PRICE, nullable=True)
    exit_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    exit_ema_fast: Mapped[Decimal | None] = mapped_column(PRICE, nullable=True)
    exit_ema_slow: Mapped[Decimal | None] = mapped_column(PRICE, nullable=True)
    profit_loss: Mapped[Decimal | None] = mapped_column(PRICE, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        # Query: restore / open positions / realized PnL
        Index("ix_positions_symbol_status_created", "symbol", "status", "created_at"),
        # Query: positions of one direction
        Index("ix_positions_symbol_type_created", "symbol", "position_type", "created_at"),
        # At most one OPEN position per symbol
        Index(
            "uq_positions_one_open_per_symbol",
            "symbol",
            unique=True,
            postgresql_where=text("status = 'OPEN'"),
            sqlite_where=text("status = 'OPEN'"),
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<PositionModel(id={self.id}, symbol={self.symbol}, "
            f"type={self.position_type}, status={self.status})>"
        )
