"""
Tests for exact integer arithmetic. No floating point anywhere.

Amounts are whole minor units (e.g. cents). Splitting an income by
percentage is the only place a fraction could appear, and the remainder
rule keeps it out.

These tests verify:
  - All amounts are integers in responses
  - Large values split and sum exactly
  - Many small incomes never drift from their exact sum
  - The stored total always equals the log-recomputed total
"""

import pytest


class TestIntegerPrecision:
    """Every monetary operation is exact."""

    async def test_all_amounts_are_integers(self, authenticated_client):
        """Every monetary field in a response is an int, never a float."""
        balance = (await authenticated_client.post("/account/income", json={"amount": 1050})).json()
        assert all(isinstance(value, int) for value in balance.values())

        history = (await authenticated_client.get("/account/transactions")).json()
        assert isinstance(history[0]["amount"], int)

        check = (await authenticated_client.get("/account/balance")).json()
        assert isinstance(check["total"], int)
        assert isinstance(check["computed_total"], int)

    async def test_large_values(self, authenticated_client):
        """10 billion units split at 50/30/20 without loss."""
        large_amount = 10_000_000_000
        response = await authenticated_client.post("/account/income", json={"amount": large_amount})
        assert response.json() == {
            "spend": 5_000_000_000,
            "save": 3_000_000_000,
            "invest": 2_000_000_000,
            "total": large_amount,
        }

        response = await authenticated_client.post(
            "/account/spend", json={"amount": 4_999_999_999, "description": "house"}
        )
        assert response.json()["spend"] == 1  # Exactly one unit left

    async def test_repeated_one_unit_incomes(self, authenticated_client):
        """
        A single unit always lands on invest (the remainder category), so 100
        of them end up as 0/0/100 rather than vanishing to rounding.
        """
        for _ in range(100):
            await authenticated_client.post("/account/income", json={"amount": 1})

        data = (await authenticated_client.get("/account/balance")).json()
        assert data["spend"] == 0
        assert data["save"] == 0
        assert data["invest"] == 100
        assert data["total"] == 100
        assert data["match"] is True

    @pytest.mark.parametrize("amount", [1, 3, 7, 33, 101, 997])
    async def test_awkward_amounts_sum_exactly(self, authenticated_client, amount):
        await authenticated_client.put(
            "/account/split-policy",
            json={"spend_percent": 33, "save_percent": 33, "invest_percent": 34},
        )
        balance = (await authenticated_client.post("/account/income", json={"amount": amount})).json()
        assert balance["spend"] + balance["save"] + balance["invest"] == amount
        assert balance["total"] == amount

    async def test_sum_verification_after_mixed_operations(self, authenticated_client):
        """Total is the exact sum of incomes minus spends; transfers net to zero."""
        await authenticated_client.post("/account/income", json={"amount": 3333})
        await authenticated_client.post("/account/income", json={"amount": 6667})
        await authenticated_client.post(
            "/account/spend", json={"amount": 1666, "description": "a"}
        )
        await authenticated_client.post(
            "/account/transfers",
            json={"from_category": "save", "to_category": "spend", "amount": 834},
        )
        await authenticated_client.post(
            "/account/spend", json={"amount": 834, "description": "b"}
        )

        # 3333 + 6667 - 1666 - 834 = 7500
        data = (await authenticated_client.get("/account/balance")).json()
        assert data["total"] == 7500
        assert data["computed_total"] == 7500
        assert data["match"] is True
