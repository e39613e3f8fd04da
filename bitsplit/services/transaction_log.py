"""
Transaction log — the append-only history of ledger events.

Ids:
  The next id is always max(id) + 1, or 0 for an empty log, read from the
  database at append time. Because append() and the commit that follows it
  run under the shared log lock, two appends can never read the same max.
  Reading the counter from the table itself means a restarted process
  continues exactly where the previous one stopped, with nothing extra to
  persist.

Ordering:
  Listings are newest first by timestamp. Equal timestamps (possible with a
  coarse clock or a fixed test clock) fall back to id descending, so the
  order is always deterministic and agrees with creation order.
"""

from datetime import datetime
from typing import Callable

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from bitsplit.models.transaction import Transaction, TransactionKind
from bitsplit.services.account_registry import utcnow
from bitsplit.services.split import Category


class TransactionLog:
    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    async def next_id(self) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Transaction.id), -1))
        )
        return result.scalar_one() + 1

    async def append(
        self,
        owner_identity: str,
        kind: TransactionKind,
        amount: int,
        description: str = "",
        from_category: Category | None = None,
        to_category: Category | None = None,
    ) -> Transaction:
        """
        Record one event. Must be called while holding the log lock, and the
        session must be committed before the lock is released.
        """
        txn = Transaction(
            id=await self.next_id(),
            owner_identity=owner_identity,
            kind=kind.value,
            amount=amount,
            description=description,
            from_category=from_category.value if from_category else None,
            to_category=to_category.value if to_category else None,
            timestamp=self.clock(),
        )
        self.db.add(txn)
        await self.db.flush()
        return txn

    async def list_for_owner(
        self,
        owner_identity: str,
        kind: TransactionKind | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        query = (
            select(Transaction)
            .where(Transaction.owner_identity == owner_identity)
            .order_by(Transaction.timestamp.desc(), Transaction.id.desc())
            .offset(offset)
        )
        if kind is not None:
            query = query.where(Transaction.kind == kind.value)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def net_total(self, owner_identity: str) -> int:
        """
        Sum of income minus sum of spend for one owner.

        Transfers move money between categories and never change the total,
        so this must always equal the account's stored total.
        """
        signed_amount = case(
            (Transaction.kind == TransactionKind.INCOME.value, Transaction.amount),
            (Transaction.kind == TransactionKind.SPEND.value, -Transaction.amount),
            else_=0,
        )
        result = await self.db.execute(
            select(func.coalesce(func.sum(signed_amount), 0))
            .where(Transaction.owner_identity == owner_identity)
        )
        return result.scalar_one()

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Transaction))
        return result.scalar_one()
