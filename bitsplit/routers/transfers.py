"""
Transfers router — moving funds between the caller's own categories.

Endpoints:
  POST /account/transfers — Move an amount from one category to another

A category transfer never changes the total; it only rebalances spend,
save and invest. Transfers between different identities are not supported.
"""

from fastapi import APIRouter, Depends, status

from bitsplit.dependencies import get_current_identity, get_ledger_service
from bitsplit.schemas.account import BalanceResponse
from bitsplit.schemas.transaction import CategoryTransferRequest
from bitsplit.services.ledger_service import LedgerService

router = APIRouter()


@router.post(
    "/transfers",
    response_model=BalanceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Transfer between categories",
)
async def transfer_between_categories(
    request: CategoryTransferRequest,
    identity: str = Depends(get_current_identity),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Move funds between two categories and return the new balance.

    - **from_category** / **to_category**: "spend", "save" or "invest"; must differ
    - **amount**: Positive integer, at most the source category's balance
    """
    balance = await ledger.transfer_between_categories(
        identity,
        source=request.from_category,
        destination=request.to_category,
        amount=request.amount,
    )
    return BalanceResponse.from_balance(balance)
