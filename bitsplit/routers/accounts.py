"""
Account router — the caller's own account, split policy and balance.

Endpoints (all require a bearer token; the identity comes from it):
  POST /account               — Initialize the account (idempotent)
  GET  /account               — Account details: policy, balance, timestamps
  GET  /account/balance       — Balance with a log-recomputed integrity check
  PUT  /account/split-policy  — Replace the split policy

There is no account id in any path: each identity has exactly one account,
and callers can only ever reach their own.
"""

from fastapi import APIRouter, Depends, Response, status

from bitsplit.dependencies import get_current_identity, get_ledger_service
from bitsplit.schemas.account import (
    AccountResponse,
    BalanceCheckResponse,
    SplitPolicyRequest,
)
from bitsplit.services.ledger_service import LedgerService
from bitsplit.services.split import SplitPolicy

router = APIRouter()


@router.post(
    "",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Initialize your account",
    responses={200: {"description": "Account already existed and is returned unchanged"}},
)
async def initialize_account(
    response: Response,
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Create the caller's account with the default split policy and zero
    balances. Calling it again returns the existing account untouched,
    with 200 instead of 201.
    """
    account, created = await ledger.initialize_account(identity)
    if not created:
        response.status_code = status.HTTP_200_OK
    return AccountResponse.from_account(account)


@router.get(
    "",
    response_model=AccountResponse,
    summary="Get your account",
)
async def get_account(
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Returns 404 if the account has not been initialized yet."""
    return AccountResponse.from_account(await ledger.get_account(identity))


@router.get(
    "/balance",
    response_model=BalanceCheckResponse,
    summary="Check your balance",
)
async def check_balance(
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Current category balances, plus the total recomputed from the
    transaction history. `match` should always be true.
    """
    return await ledger.check_balance(identity)


@router.put(
    "/split-policy",
    response_model=AccountResponse,
    summary="Update your split policy",
)
async def set_split_policy(
    request: SplitPolicyRequest,
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Replace the percentages applied to future income. Existing balances
    are not redistributed.

    - Percentages must sum to exactly 100 (422 "invalid_policy" otherwise)
    """
    policy = SplitPolicy(
        spend_percent=request.spend_percent,
        save_percent=request.save_percent,
        invest_percent=request.invest_percent,
    )
    return AccountResponse.from_account(await ledger.set_split_policy(identity, policy))
