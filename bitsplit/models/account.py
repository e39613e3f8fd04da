"""
Account model — one ledger account per identity.

Each account holds:
  - The identity it belongs to (opaque token from the identity provider,
    used directly as the primary key)
  - The split policy: three percentage columns
  - The three category balances plus the total, in integer minor units
  - created_at / last_active_at timestamps

Database-level constraints mirror the in-memory invariants:
  - every balance column is non-negative
  - total_balance == spend_balance + save_balance + invest_balance
  - the policy percentages sum to 100
The application never writes a row that violates them (SplitPolicy and
Balance are validated value objects); the CHECK constraints are the final
safety net against bugs.

Code outside the registry reads and writes the policy and balance through
the `policy` and `balance` properties, which convert to and from the value
objects in services/split.py.
"""

from datetime import datetime

from sqlalchemy import String, Integer, BigInteger, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from bitsplit.database import Base, UTCDateTime
from bitsplit.services.split import Balance, SplitPolicy


class Account(Base):
    __tablename__ = "accounts"

    __table_args__ = (
        CheckConstraint(
            "spend_balance >= 0 AND save_balance >= 0 AND invest_balance >= 0",
            name="ck_accounts_non_negative_balances",
        ),
        CheckConstraint(
            "total_balance = spend_balance + save_balance + invest_balance",
            name="ck_accounts_total_matches_categories",
        ),
        CheckConstraint(
            "spend_percent + save_percent + invest_percent = 100",
            name="ck_accounts_policy_sums_to_100",
        ),
    )

    identity: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
    )

    # --- Split policy ---
    spend_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    save_percent: Mapped[int] = mapped_column(Integer, nullable=False)
    invest_percent: Mapped[int] = mapped_column(Integer, nullable=False)

    # --- Balances (integer minor units, at most MAX_AMOUNT in total) ---
    spend_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    save_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    invest_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    # Stored so the CHECK constraint and aggregate queries can see it
    total_balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )
    last_active_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
    )

    @property
    def policy(self) -> SplitPolicy:
        return SplitPolicy(
            spend_percent=self.spend_percent,
            save_percent=self.save_percent,
            invest_percent=self.invest_percent,
        )

    @policy.setter
    def policy(self, policy: SplitPolicy) -> None:
        self.spend_percent = policy.spend_percent
        self.save_percent = policy.save_percent
        self.invest_percent = policy.invest_percent

    @property
    def balance(self) -> Balance:
        return Balance(
            spend=self.spend_balance,
            save=self.save_balance,
            invest=self.invest_balance,
        )

    @balance.setter
    def balance(self, balance: Balance) -> None:
        self.spend_balance = balance.spend
        self.save_balance = balance.save
        self.invest_balance = balance.invest
        self.total_balance = balance.total
