"""
Transaction model — the append-only ledger history.

Every ledger-affecting event creates exactly one row:

  - income:   an incoming amount, split across the categories
  - spend:    a withdrawal from the spend category
  - transfer: funds moved between two categories (from/to set)

The kinds "save" and "invest" are part of the wire vocabulary (dashboards
key icons off them) but no operation produces them today.

Key fields:
  - id: Integer assigned by the TransactionLog, starting at 0 and strictly
    increasing with no gaps. NOT autoincrement: the log computes max(id) + 1
    under its lock, which is also how the counter survives restarts.
  - owner_identity: Non-owning back-reference to the account. There is no
    foreign key; accounts and transactions are related only by this value.
  - amount: Always positive. The direction is implied by the kind.
  - timestamp: Event time, set by the ledger's clock.

Rows are never updated or deleted, so there is no updated_at column.
"""

import enum
from datetime import datetime

from sqlalchemy import String, Integer, BigInteger, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from bitsplit.database import Base, UTCDateTime


class TransactionKind(str, enum.Enum):
    """Kind of ledger event. Stored as its plain string value."""
    INCOME = "income"
    SPEND = "spend"
    SAVE = "save"
    INVEST = "invest"
    TRANSFER = "transfer"


class Transaction(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_positive_amount"),
        CheckConstraint("id >= 0", name="ck_transactions_non_negative_id"),
        # Listing is always "one owner, newest first"
        Index("ix_transactions_owner_timestamp", "owner_identity", "timestamp"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )

    owner_identity: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    amount: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    # One of TransactionKind's values
    kind: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )

    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )

    # Only set for transfers
    from_category: Mapped[str | None] = mapped_column(String(10), nullable=True)
    to_category: Mapped[str | None] = mapped_column(String(10), nullable=True)

    timestamp: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )
