"""
Pydantic schemas for income, spend, transfer and history endpoints.

All monetary amounts are integers in the smallest currency unit.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from bitsplit.models.transaction import TransactionKind
from bitsplit.services.split import Category, MAX_AMOUNT


class IncomeRequest(BaseModel):
    """Request body for POST /account/income."""
    amount: int = Field(gt=0, le=MAX_AMOUNT, description="Incoming amount (must be positive)")


class SpendRequest(BaseModel):
    """Request body for POST /account/spend."""
    amount: int = Field(gt=0, le=MAX_AMOUNT, description="Amount to withdraw from the spend category")
    description: str = Field(min_length=1, max_length=255)


class CategoryTransferRequest(BaseModel):
    """
    Request body for POST /account/transfers.

    Same-category transfers pass schema validation and are rejected by the
    ledger with a 400 "invalid_argument" error.
    """
    from_category: Category
    to_category: Category
    amount: int = Field(gt=0, le=MAX_AMOUNT, description="Amount to move (must be positive)")


class TransactionResponse(BaseModel):
    """Public representation of a ledger transaction."""
    id: int
    owner_identity: str
    amount: int
    kind: TransactionKind
    description: str
    from_category: Category | None
    to_category: Category | None
    timestamp: datetime

    model_config = {"from_attributes": True}
