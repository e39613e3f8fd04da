"""Pydantic schemas for the admin statistics endpoint."""

from pydantic import BaseModel


class SystemStatsResponse(BaseModel):
    account_count: int
    transaction_count: int
