"""
Tests for the admin statistics endpoint.

These tests verify:
  - Identities listed in ADMIN_IDENTITIES can read system-wide counts
  - Counts cover every identity and every logged transaction
  - Everyone else gets 403, and unauthenticated callers 401
"""

from conftest import ALICE, BOB


class TestSystemStats:
    """Tests for GET /admin/stats."""

    async def test_empty_ledger(self, admin_client):
        response = await admin_client.get("/admin/stats")
        assert response.status_code == 200
        assert response.json() == {"account_count": 0, "transaction_count": 0}

    async def test_counts_all_identities(self, admin_client, make_headers):
        alice, bob = make_headers(ALICE), make_headers(BOB)
        await admin_client.post("/account", headers=alice)
        await admin_client.post("/account", headers=bob)
        await admin_client.post("/account/income", json={"amount": 1000}, headers=alice)
        await admin_client.post("/account/income", json={"amount": 10}, headers=bob)
        await admin_client.post(
            "/account/transfers",
            json={"from_category": "save", "to_category": "spend", "amount": 5},
            headers=alice,
        )
        # Rejected, so not counted
        await admin_client.post(
            "/account/spend", json={"amount": 9999, "description": "yacht"}, headers=bob
        )

        response = await admin_client.get("/admin/stats")
        assert response.json() == {"account_count": 2, "transaction_count": 3}

    async def test_admin_needs_no_account(self, admin_client):
        """The admin capability is independent of having a ledger account."""
        response = await admin_client.get("/account")
        assert response.status_code == 404
        assert (await admin_client.get("/admin/stats")).status_code == 200


class TestAdminAccessControl:

    async def test_regular_identity_forbidden(self, authenticated_client):
        response = await authenticated_client.get("/admin/stats")
        assert response.status_code == 403

    async def test_unauthenticated(self, client):
        response = await client.get("/admin/stats")
        assert response.status_code == 401
