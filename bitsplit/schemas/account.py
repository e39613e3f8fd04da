"""
Pydantic schemas for account, split policy and balance endpoints.

All monetary amounts are integers in the smallest currency unit.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from bitsplit.models.account import Account
from bitsplit.services.split import Balance


class SplitPolicyRequest(BaseModel):
    """
    Request body for PUT /account/split-policy.

    Each percentage is range-checked here; whether the three sum to 100 is
    a business rule checked by SplitPolicy, which answers with a
    422 "invalid_policy" error rather than a schema error.
    """
    spend_percent: int = Field(ge=0, le=100)
    save_percent: int = Field(ge=0, le=100)
    invest_percent: int = Field(ge=0, le=100)


class SplitPolicyResponse(BaseModel):
    spend_percent: int
    save_percent: int
    invest_percent: int


class BalanceResponse(BaseModel):
    """The three category balances and their total."""
    spend: int
    save: int
    invest: int
    total: int

    @classmethod
    def from_balance(cls, balance: Balance) -> "BalanceResponse":
        # Built field by field: `total` is a property, which asdict() would drop
        return cls(
            spend=balance.spend,
            save=balance.save,
            invest=balance.invest,
            total=balance.total,
        )


class AccountResponse(BaseModel):
    """Public representation of an identity's account."""
    identity: str
    policy: SplitPolicyResponse
    balance: BalanceResponse
    created_at: datetime
    last_active_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        policy = account.policy
        return cls(
            identity=account.identity,
            policy=SplitPolicyResponse(
                spend_percent=policy.spend_percent,
                save_percent=policy.save_percent,
                invest_percent=policy.invest_percent,
            ),
            balance=BalanceResponse.from_balance(account.balance),
            created_at=account.created_at,
            last_active_at=account.last_active_at,
        )


class BalanceCheckResponse(BaseModel):
    """
    Balance plus an integrity check against the transaction log.

    `computed_total` is income minus spend summed over the log; `match`
    is False only if a balance changed without a matching log entry.
    """
    spend: int
    save: int
    invest: int
    total: int
    computed_total: int
    match: bool
