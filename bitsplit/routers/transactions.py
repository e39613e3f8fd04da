"""
Transactions router — money in, money out, and the history.

Endpoints:
  POST /account/income        — Record income, split by the current policy
  POST /account/spend         — Spend from the spend category
  GET  /account/transactions  — History, newest first

Category transfers live in routers/transfers.py.
"""

from fastapi import APIRouter, Depends, Query, status

from bitsplit.dependencies import get_current_identity, get_ledger_service
from bitsplit.models.transaction import TransactionKind
from bitsplit.schemas.account import BalanceResponse
from bitsplit.schemas.transaction import (
    IncomeRequest,
    SpendRequest,
    TransactionResponse,
)
from bitsplit.services.ledger_service import LedgerService

router = APIRouter()


@router.post(
    "/income",
    response_model=BalanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record income",
)
async def record_income(
    request: IncomeRequest,
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Split an incoming amount across spend, save and invest according to
    the account's policy, and return the new balance.

    Each category gets its floored percentage; the few units lost to
    rounding go to the last category with a non-zero percentage, so the
    total always rises by exactly `amount`.
    """
    balance = await ledger.record_income(identity, request.amount)
    return BalanceResponse.from_balance(balance)


@router.post(
    "/spend",
    response_model=BalanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Spend funds",
)
async def spend(
    request: SpendRequest,
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Withdraw from the spend category.

    Rejected with 422 "insufficient_funds" if the spend balance is too low;
    nothing is recorded in that case.
    """
    balance = await ledger.spend(identity, request.amount, request.description)
    return BalanceResponse.from_balance(balance)


@router.get(
    "/transactions",
    response_model=list[TransactionResponse],
    summary="List your transactions",
)
async def list_transactions(
    kind: TransactionKind | None = Query(None, description="Filter by kind"),
    limit: int | None = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Transaction history, newest first. Entries with the same timestamp are
    ordered by id, newest first. Returns every entry unless `limit` is set.
    """
    return await ledger.list_transactions(
        identity,
        kind=kind,
        limit=limit,
        offset=offset,
    )
