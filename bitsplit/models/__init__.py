"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows every table
before create_all() runs, and so other modules can import from
bitsplit.models directly.
"""

from bitsplit.models.account import Account  # noqa: F401
from bitsplit.models.transaction import Transaction, TransactionKind  # noqa: F401
