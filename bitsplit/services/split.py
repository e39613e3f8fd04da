"""
Split policy and balance arithmetic — pure value objects, no I/O.

SplitPolicy:
  A validated (spend, save, invest) percentage triple. Construction fails
  with InvalidPolicyError unless each value is within 0-100 and the three
  sum to exactly 100, so every SplitPolicy in memory is a storable one.

Balance:
  The three category balances. `total` is derived from them, never tracked
  separately, so `total == spend + save + invest` holds by construction.
  Every operation returns a new Balance; nothing is mutated in place.

Income splitting and the rounding remainder:
  Each category receives floor(amount * percent / 100). Flooring can leave
  up to two units unassigned (999 at 50/30/20 floors to 499 + 299 + 199 = 997).
  The remainder goes to the LAST category in declaration order whose
  percentage is non-zero, so an income of N always raises the total by
  exactly N and a 0% category never receives anything.

All amounts are integers in the smallest currency unit (e.g. satoshis). No
amount or balance total may exceed MAX_AMOUNT, the largest value a signed
64-bit database column holds.
"""

import enum
from dataclasses import dataclass, replace

from bitsplit.exceptions import InsufficientFundsError, InvalidArgumentError, InvalidPolicyError


PERCENT_TOTAL = 100

MAX_AMOUNT = 2**63 - 1


class Category(str, enum.Enum):
    """
    A sub-balance bucket. Declaration order matters: it is the order used
    when assigning the income rounding remainder.
    """
    SPEND = "spend"
    SAVE = "save"
    INVEST = "invest"


@dataclass(frozen=True)
class SplitPolicy:
    spend_percent: int
    save_percent: int
    invest_percent: int

    def __post_init__(self):
        percents = (self.spend_percent, self.save_percent, self.invest_percent)
        if any(p < 0 or p > PERCENT_TOTAL for p in percents) or sum(percents) != PERCENT_TOTAL:
            raise InvalidPolicyError(*percents)

    def percent_for(self, category: Category) -> int:
        return getattr(self, f"{category.value}_percent")

    def allocate(self, amount: int) -> "Balance":
        """
        Split an income amount across the three categories.

        Returns the per-category amounts as a Balance whose total equals
        `amount` exactly.
        """
        shares = {
            category: amount * self.percent_for(category) // PERCENT_TOTAL
            for category in Category
        }
        remainder = amount - sum(shares.values())
        if remainder:
            # A valid policy always has at least one non-zero category
            last_funded = [c for c in Category if self.percent_for(c) > 0][-1]
            shares[last_funded] += remainder
        return Balance(
            spend=shares[Category.SPEND],
            save=shares[Category.SAVE],
            invest=shares[Category.INVEST],
        )


DEFAULT_SPLIT_POLICY = SplitPolicy(spend_percent=50, save_percent=30, invest_percent=20)


@dataclass(frozen=True)
class Balance:
    spend: int = 0
    save: int = 0
    invest: int = 0

    @property
    def total(self) -> int:
        return self.spend + self.save + self.invest

    def amount_in(self, category: Category) -> int:
        return getattr(self, category.value)

    def deposit(self, allocation: "Balance") -> "Balance":
        """
        Add per-category amounts (typically from SplitPolicy.allocate).

        Raises:
            InvalidArgumentError: If the new total would exceed MAX_AMOUNT.
        """
        if self.total + allocation.total > MAX_AMOUNT:
            raise InvalidArgumentError(
                f"Deposit of {allocation.total} would take the balance past {MAX_AMOUNT}"
            )
        return Balance(
            spend=self.spend + allocation.spend,
            save=self.save + allocation.save,
            invest=self.invest + allocation.invest,
        )

    def withdraw(self, category: Category, amount: int) -> "Balance":
        """
        Remove `amount` from one category.

        Raises:
            InsufficientFundsError: If the category holds less than `amount`.
        """
        available = self.amount_in(category)
        if amount > available:
            raise InsufficientFundsError(category.value, amount, available)
        return replace(self, **{category.value: available - amount})

    def move(self, source: Category, destination: Category, amount: int) -> "Balance":
        """Move funds between two categories; the total is unchanged."""
        drained = self.withdraw(source, amount)
        return replace(
            drained,
            **{destination.value: drained.amount_in(destination) + amount},
        )
