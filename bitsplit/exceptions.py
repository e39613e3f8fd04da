"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain-specific errors (like InsufficientFundsError)
without importing HTTP concepts. The handlers registered here translate them
into consistent JSON responses: {"detail": "...", "error_type": "..."}.

Every domain error is raised BEFORE any ledger state is touched, so a caller
that sees one of these knows nothing was applied.

Exception hierarchy:
    LedgerError (base)
    ├── AccountNotFoundError    — identity has no account yet
    ├── InvalidPolicyError      — split percentages do not sum to 100
    ├── InsufficientFundsError  — withdrawal/transfer exceeds a category balance
    └── InvalidArgumentError    — non-positive amount, same-category transfer
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class LedgerError(Exception):
    """Base exception for all ledger domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class AccountNotFoundError(LedgerError):
    """Raised when an operation references an identity with no account."""

    def __init__(self, identity: str):
        self.identity = identity
        super().__init__(f"No account exists for identity {identity}")


class InvalidPolicyError(LedgerError):
    """
    Raised when split percentages are out of range or do not sum to 100.

    Attributes:
        spend_percent / save_percent / invest_percent: The rejected triple.
    """

    def __init__(self, spend_percent: int, save_percent: int, invest_percent: int):
        self.spend_percent = spend_percent
        self.save_percent = save_percent
        self.invest_percent = invest_percent
        total = spend_percent + save_percent + invest_percent
        super().__init__(
            f"Split percentages must each be 0-100 and sum to 100, got "
            f"{spend_percent}/{save_percent}/{invest_percent} (total {total})"
        )


class InsufficientFundsError(LedgerError):
    """
    Raised when a withdrawal or transfer exceeds the source category balance.

    Attributes:
        category: The category that lacks funds ("spend", "save" or "invest").
        requested: The amount the caller tried to move.
        available: The current balance of that category.
    """

    def __init__(self, category: str, requested: int, available: int):
        self.category = category
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds in {category}: requested {requested}, "
            f"available {available}"
        )


class InvalidArgumentError(LedgerError):
    """Raised for arguments that are well-formed but not meaningful."""

    def __init__(self, detail: str = "Invalid argument"):
        super().__init__(detail)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Called once during app construction in main.py.
    """

    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(
        request: Request, exc: AccountNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": exc.detail, "error_type": "account_not_found"},
        )

    @app.exception_handler(InvalidPolicyError)
    async def invalid_policy_handler(
        request: Request, exc: InvalidPolicyError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": exc.detail, "error_type": "invalid_policy"},
        )

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,  # Unprocessable Entity — valid request, rejected by business rules
            content={
                "detail": exc.detail,
                "error_type": "insufficient_funds",
                "category": exc.category,
                "requested": exc.requested,
                "available": exc.available,
            },
        )

    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument_handler(
        request: Request, exc: InvalidArgumentError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": exc.detail, "error_type": "invalid_argument"},
        )
