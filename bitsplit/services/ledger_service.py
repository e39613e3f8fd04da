"""
Ledger service — the only entry point for ledger operations.

THIS IS THE CORE OF THE PROJECT. Every read and write of an identity's
account goes through LedgerService, which:

  - takes the identity's lock for the whole operation (locks.py)
  - validates first, then applies the change through
    AccountRegistry.apply_mutation (validate-then-apply)
  - appends the matching Transaction and commits under the log lock, so the
    balance change and its log entry land in ONE database transaction
  - returns the new Balance, or raises a LedgerError subclass with nothing
    applied

Identity:
  `identity` is always the already-verified subject handed over by the
  caller (the HTTP layer takes it from the bearer token). The service never
  reads an identity out of a request payload and performs no
  authentication of its own.

Authorization:
  get_system_stats() performs NO access check. Gating it is the interface
  layer's job (see routers/admin.py).
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from bitsplit.exceptions import InvalidArgumentError, LedgerError
from bitsplit.models.account import Account
from bitsplit.models.transaction import Transaction, TransactionKind
from bitsplit.services.account_registry import AccountRegistry, AccountSnapshot, utcnow
from bitsplit.services.locks import LedgerLocks
from bitsplit.services.split import Balance, Category, SplitPolicy, DEFAULT_SPLIT_POLICY, MAX_AMOUNT
from bitsplit.services.transaction_log import TransactionLog

logger = logging.getLogger(__name__)


def _require_valid_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidArgumentError(f"Amount must be a positive integer, got {amount}")
    if amount > MAX_AMOUNT:
        raise InvalidArgumentError(f"Amount must not exceed {MAX_AMOUNT}, got {amount}")


class LedgerService:
    def __init__(
        self,
        db: AsyncSession,
        locks: LedgerLocks,
        default_policy: SplitPolicy = DEFAULT_SPLIT_POLICY,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.locks = locks
        self.accounts = AccountRegistry(db, default_policy=default_policy, clock=clock)
        self.log = TransactionLog(db, clock=clock)

    # -----------------------------------------------------------------------
    # Unit of work
    # -----------------------------------------------------------------------

    @asynccontextmanager
    async def _exclusive(self, identity: str):
        """
        Run the body as one indivisible unit for `identity`.

        Commits on success while still holding the lock. Domain errors are
        raised before anything is written, so they propagate as-is; any
        other failure rolls the session back.
        """
        async with self.locks.for_identity(identity):
            try:
                yield
            except LedgerError:
                raise
            except Exception:
                await self.db.rollback()
                raise
            await self.db.commit()

    async def _record(self, identity: str, kind: TransactionKind, amount: int, **fields) -> Transaction:
        """Append to the log and commit, under the log lock."""
        async with self.locks.log_lock:
            txn = await self.log.append(identity, kind, amount, **fields)
            await self.db.commit()
        return txn

    # -----------------------------------------------------------------------
    # Account lifecycle
    # -----------------------------------------------------------------------

    async def initialize_account(self, identity: str) -> tuple[Account, bool]:
        """
        Create the identity's account on first call; return it unchanged on
        every later call.

        Returns:
            Tuple of (account, created).
        """
        async with self._exclusive(identity):
            account, created = await self.accounts.get_or_create(identity)
        return account, created

    async def get_account(self, identity: str) -> Account:
        """
        Raises:
            AccountNotFoundError: If the identity has no account.
        """
        async with self._exclusive(identity):
            account = await self.accounts.get(identity)
        return account

    async def set_split_policy(self, identity: str, policy: SplitPolicy) -> Account:
        """
        Replace the split policy. Balances are left exactly as they are.

        `policy` is already validated by SplitPolicy's constructor; building
        one from untrusted input raises InvalidPolicyError before this is
        ever called.

        Raises:
            AccountNotFoundError: If the identity has no account.
        """
        async with self._exclusive(identity):
            account = await self.accounts.apply_mutation(
                identity, lambda snapshot: replace(snapshot, policy=policy)
            )

        logger.info(
            "Split policy for %s set to %d/%d/%d",
            identity, policy.spend_percent, policy.save_percent, policy.invest_percent,
        )
        return account

    # -----------------------------------------------------------------------
    # Balance-changing operations
    # -----------------------------------------------------------------------

    async def record_income(self, identity: str, amount: int) -> Balance:
        """
        Split an income across the categories using the current policy.

        The rounding remainder goes to the last non-zero category (see
        split.py), so the total always grows by exactly `amount`.

        Raises:
            InvalidArgumentError: If amount is not positive or exceeds MAX_AMOUNT.
            AccountNotFoundError: If the identity has no account.
        """
        _require_valid_amount(amount)
        allocation = Balance()

        def split_income(snapshot: AccountSnapshot) -> AccountSnapshot:
            nonlocal allocation
            allocation = snapshot.policy.allocate(amount)
            return replace(snapshot, balance=snapshot.balance.deposit(allocation))

        async with self._exclusive(identity):
            try:
                account = await self.accounts.apply_mutation(identity, split_income)
            except InvalidArgumentError as exc:
                logger.warning("Income of %d rejected for %s: %s", amount, identity, exc.detail)
                raise
            await self._record(
                identity,
                TransactionKind.INCOME,
                amount,
                description=(
                    f"Income split: spend {allocation.spend}, "
                    f"save {allocation.save}, invest {allocation.invest}"
                ),
            )
            balance = account.balance

        logger.info("Income of %d recorded for %s", amount, identity)
        return balance

    async def spend(self, identity: str, amount: int, description: str) -> Balance:
        """
        Withdraw from the spend category.

        Raises:
            InvalidArgumentError: If amount is not positive or exceeds MAX_AMOUNT.
            AccountNotFoundError: If the identity has no account.
            InsufficientFundsError: If amount exceeds the spend balance.
        """
        _require_valid_amount(amount)

        async with self._exclusive(identity):
            try:
                account = await self.accounts.apply_mutation(
                    identity,
                    lambda snapshot: replace(
                        snapshot, balance=snapshot.balance.withdraw(Category.SPEND, amount)
                    ),
                )
            except LedgerError as exc:
                logger.warning("Spend of %d rejected for %s: %s", amount, identity, exc.detail)
                raise
            await self._record(identity, TransactionKind.SPEND, amount, description=description)
            balance = account.balance

        logger.info("Spend of %d recorded for %s", amount, identity)
        return balance

    async def transfer_between_categories(
        self,
        identity: str,
        source: Category,
        destination: Category,
        amount: int,
    ) -> Balance:
        """
        Move funds from one category to another. The total is unchanged.

        Transfers are logged with kind "transfer" so the history shows every
        balance change, not just money entering and leaving.

        Raises:
            InvalidArgumentError: If source == destination, or amount is not positive or exceeds MAX_AMOUNT.
            AccountNotFoundError: If the identity has no account.
            InsufficientFundsError: If amount exceeds the source balance.
        """
        if source == destination:
            raise InvalidArgumentError("Cannot transfer to the same category")
        _require_valid_amount(amount)

        async with self._exclusive(identity):
            try:
                account = await self.accounts.apply_mutation(
                    identity,
                    lambda snapshot: replace(
                        snapshot, balance=snapshot.balance.move(source, destination, amount)
                    ),
                )
            except LedgerError as exc:
                logger.warning(
                    "Transfer of %d %s->%s rejected for %s: %s",
                    amount, source.value, destination.value, identity, exc.detail,
                )
                raise
            await self._record(
                identity,
                TransactionKind.TRANSFER,
                amount,
                description=f"Transfer from {source.value} to {destination.value}",
                from_category=source,
                to_category=destination,
            )
            balance = account.balance

        logger.info(
            "Transfer of %d %s->%s recorded for %s",
            amount, source.value, destination.value, identity,
        )
        return balance

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    async def list_transactions(
        self,
        identity: str,
        kind: TransactionKind | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Transaction]:
        """
        Every transaction owned by the identity, newest first (ties broken
        by id, newest first). Unknown identities simply have no history.
        """
        return await self.log.list_for_owner(identity, kind=kind, limit=limit, offset=offset)

    async def check_balance(self, identity: str) -> dict:
        """
        Compare the stored total against the total recomputed from the log.

        A mismatch would mean a balance changed without a matching log entry.

        Returns:
            Dict with spend, save, invest, total, computed_total, match.
        """
        async with self._exclusive(identity):
            account = await self.accounts.get(identity)
            computed_total = await self.log.net_total(identity)

        balance = account.balance
        if computed_total != balance.total:
            logger.error(
                "Balance mismatch for %s: stored %d, computed %d",
                identity, balance.total, computed_total,
            )
        return {
            "spend": balance.spend,
            "save": balance.save,
            "invest": balance.invest,
            "total": balance.total,
            "computed_total": computed_total,
            "match": computed_total == balance.total,
        }

    async def get_system_stats(self) -> dict:
        """Aggregate counts across the whole ledger. No access check here."""
        return {
            "account_count": await self.accounts.count(),
            "transaction_count": await self.log.count(),
        }
