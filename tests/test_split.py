"""
Tests for the split policy and balance arithmetic (no database, no HTTP).

These tests verify:
  - Policies must be 0-100 per category and sum to exactly 100
  - Income allocation is exact: the category amounts always sum to the income
  - The rounding remainder lands on the last category with a non-zero percentage
  - Withdrawals and category moves respect balances and preserve the total
"""

import pytest

from bitsplit.exceptions import InsufficientFundsError, InvalidArgumentError, InvalidPolicyError
from bitsplit.services.split import Balance, Category, SplitPolicy, DEFAULT_SPLIT_POLICY, MAX_AMOUNT


class TestSplitPolicyValidation:

    def test_default_policy_is_50_30_20(self):
        assert DEFAULT_SPLIT_POLICY == SplitPolicy(50, 30, 20)

    def test_valid_policy(self):
        policy = SplitPolicy(spend_percent=40, save_percent=40, invest_percent=20)
        assert policy.percent_for(Category.SAVE) == 40

    def test_all_in_one_category(self):
        SplitPolicy(0, 0, 100)

    def test_sum_below_100_rejected(self):
        with pytest.raises(InvalidPolicyError) as exc_info:
            SplitPolicy(40, 40, 19)
        assert "total 99" in exc_info.value.detail

    def test_sum_above_100_rejected(self):
        with pytest.raises(InvalidPolicyError):
            SplitPolicy(50, 50, 1)

    def test_negative_component_rejected_even_when_sum_is_100(self):
        """-10 + 60 + 50 = 100, but a negative share is meaningless."""
        with pytest.raises(InvalidPolicyError):
            SplitPolicy(-10, 60, 50)

    def test_component_above_100_rejected(self):
        with pytest.raises(InvalidPolicyError):
            SplitPolicy(150, -25, -25)


class TestIncomeAllocation:

    def test_even_split(self):
        """1000 at 50/30/20."""
        allocation = DEFAULT_SPLIT_POLICY.allocate(1000)
        assert allocation == Balance(spend=500, save=300, invest=200)
        assert allocation.total == 1000

    def test_remainder_goes_to_invest(self):
        """999 floors to 499 + 299 + 199 = 997; the missing 2 go to invest."""
        allocation = DEFAULT_SPLIT_POLICY.allocate(999)
        assert allocation == Balance(spend=499, save=299, invest=201)
        assert allocation.total == 999

    def test_remainder_skips_zero_percent_category(self):
        """With invest at 0%, the remainder goes to save instead."""
        allocation = SplitPolicy(50, 50, 0).allocate(7)
        assert allocation == Balance(spend=3, save=4, invest=0)

    def test_remainder_with_only_spend_funded(self):
        allocation = SplitPolicy(100, 0, 0).allocate(13)
        assert allocation == Balance(spend=13, save=0, invest=0)

    def test_one_unit_income(self):
        allocation = DEFAULT_SPLIT_POLICY.allocate(1)
        assert allocation == Balance(spend=0, save=0, invest=1)

    @pytest.mark.parametrize("amount", [1, 2, 3, 7, 99, 101, 333, 999, 1001, 123_456_789])
    @pytest.mark.parametrize(
        "policy",
        [SplitPolicy(50, 30, 20), SplitPolicy(33, 33, 34), SplitPolicy(1, 1, 98), SplitPolicy(70, 0, 30)],
    )
    def test_allocation_always_sums_to_amount(self, policy, amount):
        allocation = policy.allocate(amount)
        assert allocation.total == amount
        assert min(allocation.spend, allocation.save, allocation.invest) >= 0

    def test_zero_percent_category_never_receives_funds(self):
        allocation = SplitPolicy(70, 0, 30).allocate(999)
        assert allocation.save == 0


class TestBalanceOperations:

    def test_total_is_derived(self):
        assert Balance(spend=1, save=2, invest=3).total == 6

    def test_deposit_adds_per_category(self):
        balance = Balance(10, 20, 30).deposit(Balance(1, 2, 3))
        assert balance == Balance(11, 22, 33)

    def test_deposit_up_to_max_amount(self):
        balance = Balance(MAX_AMOUNT - 1, 0, 0).deposit(Balance(0, 0, 1))
        assert balance.total == MAX_AMOUNT

    def test_deposit_past_max_amount(self):
        with pytest.raises(InvalidArgumentError):
            Balance(2**62, 0, 0).deposit(Balance(0, 2**62, 0))

    def test_withdraw(self):
        balance = Balance(500, 300, 200).withdraw(Category.SPEND, 100)
        assert balance == Balance(400, 300, 200)
        assert balance.total == 900

    def test_withdraw_exact_balance(self):
        assert Balance(100, 0, 0).withdraw(Category.SPEND, 100).spend == 0

    def test_withdraw_too_much(self):
        with pytest.raises(InsufficientFundsError) as exc_info:
            Balance(50, 300, 200).withdraw(Category.SPEND, 51)
        assert exc_info.value.category == "spend"
        assert exc_info.value.requested == 51
        assert exc_info.value.available == 50

    def test_move_preserves_total(self):
        """save -> spend 50."""
        balance = Balance(400, 300, 200).move(Category.SAVE, Category.SPEND, 50)
        assert balance == Balance(450, 250, 200)
        assert balance.total == 900

    def test_move_more_than_source(self):
        with pytest.raises(InsufficientFundsError) as exc_info:
            Balance(0, 10, 0).move(Category.SAVE, Category.INVEST, 11)
        assert exc_info.value.category == "save"

    def test_operations_do_not_mutate(self):
        original = Balance(10, 10, 10)
        original.withdraw(Category.SPEND, 5)
        original.move(Category.SAVE, Category.INVEST, 5)
        assert original == Balance(10, 10, 10)
