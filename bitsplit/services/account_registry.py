"""
Account registry — owns every Account row, keyed by identity.

Lifecycle:
  Accounts are created lazily by get_or_create() and never deleted.

Mutation:
  apply_mutation() is the single path through which a policy or balance
  changes. It takes a pure function from one AccountSnapshot to the next;
  if that function raises, nothing has been written. Callers must hold the
  identity's lock (see locks.py); the registry itself does not lock.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from bitsplit.exceptions import AccountNotFoundError
from bitsplit.models.account import Account
from bitsplit.services.split import Balance, SplitPolicy, DEFAULT_SPLIT_POLICY

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AccountSnapshot:
    """The mutable part of an account, as an immutable value."""
    policy: SplitPolicy
    balance: Balance


class AccountRegistry:
    def __init__(
        self,
        db: AsyncSession,
        default_policy: SplitPolicy = DEFAULT_SPLIT_POLICY,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.default_policy = default_policy
        self.clock = clock

    async def _find(self, identity: str) -> Account | None:
        result = await self.db.execute(
            select(Account).where(Account.identity == identity)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, identity: str) -> tuple[Account, bool]:
        """
        Return the identity's account, creating it on first contact.

        An existing account is returned untouched (not even last_active_at
        moves), which is what makes account initialization idempotent.

        Returns:
            Tuple of (account, created).
        """
        account = await self._find(identity)
        if account is not None:
            return account, False

        now = self.clock()
        account = Account(identity=identity, created_at=now, last_active_at=now)
        account.policy = self.default_policy
        account.balance = Balance()
        self.db.add(account)
        await self.db.flush()

        logger.info("Created account for identity %s", identity)
        return account, True

    async def get(self, identity: str) -> Account:
        """
        Raises:
            AccountNotFoundError: If the identity has never been initialized.
        """
        account = await self._find(identity)
        if account is None:
            raise AccountNotFoundError(identity)
        return account

    async def apply_mutation(
        self,
        identity: str,
        mutate: Callable[[AccountSnapshot], AccountSnapshot],
    ) -> Account:
        """
        Apply a pure snapshot transformation and store the result.

        Raises:
            AccountNotFoundError: If the identity has no account.
            Whatever `mutate` raises, before anything is written.
        """
        account = await self.get(identity)
        updated = mutate(AccountSnapshot(policy=account.policy, balance=account.balance))

        account.policy = updated.policy
        account.balance = updated.balance
        account.last_active_at = self.clock()
        await self.db.flush()
        return account

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(Account))
        return result.scalar_one()
