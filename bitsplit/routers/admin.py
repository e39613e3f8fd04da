"""
Admin router — read-only, ledger-wide visibility.

Endpoints:
  GET /admin/stats — Number of accounts and transactions

The ledger service exposes these counts without any access check; this
router is where the administrative capability is enforced (require_admin).
"""

from fastapi import APIRouter, Depends

from bitsplit.dependencies import get_ledger_service, require_admin
from bitsplit.schemas.stats import SystemStatsResponse
from bitsplit.services.ledger_service import LedgerService

router = APIRouter()


@router.get(
    "/stats",
    response_model=SystemStatsResponse,
    summary="[Admin] System statistics",
)
async def get_system_stats(
    admin: str = Depends(require_admin),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Total accounts and transactions across all identities."""
    return await ledger.get_system_stats()
