"""
FastAPI dependencies for identity, authorization and the ledger service.

Dependency chain:

  get_current_identity (bearer JWT -> identity string)
      └── require_admin (identity -> identity)   [ADMIN_IDENTITIES only]

  get_ledger_service (db session + process locks -> LedgerService)

The identity handed to the ledger ALWAYS comes from a verified token. No
endpoint accepts an identity in its path or body.

Tests override get_db and get_ledger_locks through app.dependency_overrides
to run against an in-memory database with fresh locks.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from bitsplit.config import settings
from bitsplit.database import get_db
from bitsplit.security import decode_access_token
from bitsplit.services.ledger_service import LedgerService
from bitsplit.services.locks import LedgerLocks, ledger_locks
from bitsplit.services.split import SplitPolicy

logger = logging.getLogger(__name__)

# auto_error=False so a missing header gets the same 401 as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """
    Verify the bearer token and return its subject as the caller's identity.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired, or has
                           no subject.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    identity = payload.get("sub")
    if not isinstance(identity, str) or not identity:
        raise credentials_exception

    return identity


async def require_admin(
    identity: str = Depends(get_current_identity),
) -> str:
    """
    Require the caller to hold the administrative capability.

    Administrators are provisioned by the operator through ADMIN_IDENTITIES.

    Raises:
        HTTPException 403: If the identity is not an administrator.
    """
    if identity not in settings.ADMIN_IDENTITIES:
        logger.warning("Non-admin identity %s denied admin access", identity)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return identity


def get_ledger_locks() -> LedgerLocks:
    return ledger_locks


async def get_ledger_service(
    db: AsyncSession = Depends(get_db),
    locks: LedgerLocks = Depends(get_ledger_locks),
) -> LedgerService:
    return LedgerService(
        db,
        locks,
        default_policy=SplitPolicy(
            spend_percent=settings.DEFAULT_SPEND_PERCENT,
            save_percent=settings.DEFAULT_SAVE_PERCENT,
            invest_percent=settings.DEFAULT_INVEST_PERCENT,
        ),
    )
