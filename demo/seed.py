#!/usr/bin/env python3
"""
Demo seed script — populates a running ledger with sample data for demos.

!! NOT FOR PRODUCTION !!
This script mints identity tokens itself, using the server's SECRET_KEY, in
place of the real identity provider. It is intended ONLY for local demos and
dashboard development.

Usage:
    # After pip install -e ".[demo]", with the API server running on
    # localhost:8000 and the same SECRET_KEY in the environment:
    python demo/seed.py

    # Reset the database and re-seed:
    python demo/seed.py --reset

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

Admin access:
    The stats endpoint is only open to identities in ADMIN_IDENTITIES. Start
    the server with ADMIN_IDENTITIES='["demo-operator"]' to use the admin
    token printed at the end.
"""

import argparse
import asyncio
import os
import random
import sys

import httpx

from bitsplit.config import settings
from bitsplit.security import create_access_token

BASE_URL = "http://localhost:8000"

ADMIN_IDENTITY = "demo-operator"

# ---------------------------------------------------------------------------
# Demo identities
# ---------------------------------------------------------------------------

MEMBERS = [
    {
        "identity": "demo-alice-chen",
        "name": "Alice Chen",
        "policy": None,  # keeps the 50/30/20 default
        "monthly_income": 3_200_00,
    },
    {
        "identity": "demo-bob-martinez",
        "name": "Bob Martinez",
        "policy": {"spend_percent": 70, "save_percent": 20, "invest_percent": 10},
        "monthly_income": 2_400_00,
    },
    {
        "identity": "demo-carol-nguyen",
        "name": "Carol Nguyen",
        "policy": {"spend_percent": 40, "save_percent": 20, "invest_percent": 40},
        "monthly_income": 5_750_00,
    },
    {
        "identity": "demo-dave-johnson",
        "name": "Dave Johnson",
        "policy": {"spend_percent": 100, "save_percent": 0, "invest_percent": 0},
        "monthly_income": 1_900_00,
    },
]

SPEND_DESCRIPTIONS = [
    "Coffee shop", "Grocery store", "Gas station", "Online subscription",
    "Restaurant", "Utility bill", "Phone bill", "Parking", "Bookstore",
    "Pharmacy", "Hardware store", "Clothing store", "Movie tickets",
    "Gym membership", "Insurance premium", "Internet bill",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def cents_to_dollars(cents: int) -> str:
    return f"${cents / 100:,.2f}"


def auth_header(identity: str) -> dict:
    token = create_access_token(data={"sub": identity})
    return {"Authorization": f"Bearer {token}"}


async def initialize(client: httpx.AsyncClient, identity: str) -> bool:
    """Initialize the identity's account. Returns True if it was new."""
    resp = await client.post(f"{BASE_URL}/account", headers=auth_header(identity))
    resp.raise_for_status()
    return resp.status_code == 201


async def set_policy(client: httpx.AsyncClient, identity: str, policy: dict) -> None:
    resp = await client.put(
        f"{BASE_URL}/account/split-policy",
        json=policy,
        headers=auth_header(identity),
    )
    resp.raise_for_status()


async def income(client: httpx.AsyncClient, identity: str, amount: int) -> dict:
    resp = await client.post(
        f"{BASE_URL}/account/income",
        json={"amount": amount},
        headers=auth_header(identity),
    )
    resp.raise_for_status()
    return resp.json()


async def spend(client: httpx.AsyncClient, identity: str, amount: int, description: str) -> dict:
    """Returns the new balance, or the error body if the spend was rejected."""
    resp = await client.post(
        f"{BASE_URL}/account/spend",
        json={"amount": amount, "description": description},
        headers=auth_header(identity),
    )
    return resp.json()


async def move(client: httpx.AsyncClient, identity: str,
               source: str, destination: str, amount: int) -> dict:
    resp = await client.post(
        f"{BASE_URL}/account/transfers",
        json={"from_category": source, "to_category": destination, "amount": amount},
        headers=auth_header(identity),
    )
    return resp.json()


async def get_balance(client: httpx.AsyncClient, identity: str) -> dict:
    resp = await client.get(f"{BASE_URL}/account/balance", headers=auth_header(identity))
    resp.raise_for_status()
    return resp.json()


# ---------------------------------------------------------------------------
# Seed logic
# ---------------------------------------------------------------------------

async def seed_history(client: httpx.AsyncClient, member: dict, months: int) -> int:
    """Generate a few months of paychecks and purchases.

    Returns the number of rejected spends (the spend category ran dry).
    """
    identity = member["identity"]
    rejected = 0

    for _ in range(months):
        # 2 paychecks per month
        for _ in range(2):
            await income(client, identity, member["monthly_income"] // 2)

        # 8-15 purchases per month
        for _ in range(random.randint(8, 15)):
            result = await spend(
                client, identity,
                random.randint(3_00, 120_00),
                random.choice(SPEND_DESCRIPTIONS),
            )
            if result.get("error_type") == "insufficient_funds":
                rejected += 1
                # Top up spending from savings, like a user would
                if result["requested"] <= (await get_balance(client, identity))["save"]:
                    await move(client, identity, "save", "spend", result["requested"])

    return rejected


async def seed(base_url: str) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  DEMO SEED — NOT FOR PRODUCTION")
    print("========================================\n")

    async with httpx.AsyncClient(timeout=30.0) as client:
        # Health check
        try:
            health = await client.get(f"{BASE_URL}/health")
            health.raise_for_status()
        except (httpx.ConnectError, httpx.HTTPStatusError):
            print(f"  ERROR: Cannot connect to {BASE_URL}")
            print(f"  Start the server first: uvicorn bitsplit.main:app --reload\n")
            sys.exit(1)

        for member in MEMBERS:
            print(f"\nSeeding {member['name']}...")
            created = await initialize(client, member["identity"])
            if not created:
                log("Account already existed, adding to it")
            if member["policy"]:
                await set_policy(client, member["identity"], member["policy"])
                p = member["policy"]
                log(f"Policy: {p['spend_percent']}/{p['save_percent']}/{p['invest_percent']}")

            rejected = await seed_history(client, member, months=2)
            balance = await get_balance(client, member["identity"])
            log(
                f"Spend {cents_to_dollars(balance['spend'])}, "
                f"save {cents_to_dollars(balance['save'])}, "
                f"invest {cents_to_dollars(balance['invest'])}"
            )
            if rejected:
                log(f"{rejected} purchase(s) declined for insufficient spend funds")
            if not balance["match"]:
                log("WARNING: stored total does not match history")

        # --- Admin ---
        resp = await client.get(f"{BASE_URL}/admin/stats", headers=auth_header(ADMIN_IDENTITY))
        if resp.status_code == 200:
            stats = resp.json()
            print(f"\nLedger: {stats['account_count']} accounts, "
                  f"{stats['transaction_count']} transactions")
        else:
            print(f"\n  {ADMIN_IDENTITY} is not in ADMIN_IDENTITIES; skipping stats")

    # --- Summary ---
    print("\n========================================")
    print("  SEED COMPLETE — Bearer tokens (30 min)")
    print("========================================\n")
    for m in MEMBERS:
        print(f"  {m['name']:<16s} {auth_header(m['identity'])['Authorization']}")
    print(f"  {'Admin':<16s} {auth_header(ADMIN_IDENTITY)['Authorization']}")
    print()


def reset_database() -> None:
    """Delete the SQLite database file so the server recreates it on restart."""
    prefix = "sqlite+aiosqlite:///"
    if not settings.DATABASE_URL.startswith(prefix):
        print(f"\n  Not a SQLite file database: {settings.DATABASE_URL}\n")
        return

    db_path = os.path.normpath(settings.DATABASE_URL[len(prefix):])
    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"\n  Deleted {db_path}")
        print("  Restart the server to recreate empty tables.\n")
    else:
        print(f"\n  No database found at {db_path}\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script — NOT FOR PRODUCTION",
        epilog="Creates sample identities, incomes, purchases and transfers for demos.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the database file and exit (restart server to recreate)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_database()
        return

    await seed(args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
