"""
Pre-Deploy and Smoke Test Script.

Runs the application in-process against the configured database (which
must hold the demo data from contaedu/seed_data.py) and executes a full
smoke test:
1. Health Check
2. Chart of accounts is seeded
3. Journal entry -> Ledger -> Trial balance closes
4. Cleanup of the smoke entry
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient
from sqlalchemy import select

from contaedu.app.core.jwt import create_access_token
from contaedu.app.db.session import AsyncSessionLocal, engine
from contaedu.app.main import app
from contaedu.app.models.user import User

SMOKE_STUDENT = "jperez"


def print_step(step, msg):
    print(f"[{step}] {msg}")


def fail(msg):
    print(f"❌ FAILURE: {msg}")
    sys.exit(1)


def success(msg):
    print(f"✅ {msg}")


async def load_student():
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.username == SMOKE_STUDENT))
        user = result.scalar_one_or_none()
    await engine.dispose()
    return user


def main():
    print("🚀 Starting Deployment Validation...")

    student = asyncio.run(load_student())
    if not student:
        fail(f"Seed user {SMOKE_STUDENT!r} not found; run contaedu/seed_data.py first")

    token = create_access_token({"sub": student.username, "user_id": student.id, "role": student.role.value})
    headers = {"Authorization": f"Bearer {token}"}

    with TestClient(app) as client:
        # 1. Health Check
        print_step("PRE-DEPLOY", "Checking /health...")
        response = client.get("/health")
        if response.status_code != 200:
            fail(f"Health check failed: {response.status_code} {response.text}")
        success(f"Health: {response.json()}")

        # 2. Chart of accounts
        print_step("VERIFY", "Checking chart of accounts...")
        response = client.get("/v1/accounts", headers=headers)
        if response.status_code != 200 or not response.json():
            fail(f"Chart of accounts unavailable: {response.status_code} {response.text}")
        success(f"Found {len(response.json())} accounts")

        # 3. Entry -> Ledger -> Trial balance
        print_step("SMOKE", "Running Journal -> Ledger -> Trial Balance flow...")
        response = client.post(
            "/v1/journal/entries",
            json={
                "date": "2025-01-15",
                "description": "Smoke test: aportación de capital",
                "lines": [
                    {"account_code": "572", "account_name": "Bancos", "debit": "100.00"},
                    {"account_code": "100", "account_name": "Capital social", "credit": "100.00"},
                ],
            },
            headers=headers,
        )
        if response.status_code != 201:
            fail(f"Entry creation failed: {response.status_code} {response.text}")
        entry_id = response.json()["id"]
        success(f"Created entry #{response.json()['entry_number']}")

        response = client.get("/v1/journal/ledger", headers=headers)
        if response.status_code != 200 or not any(a["account_code"] == "572" for a in response.json()):
            fail(f"Ledger does not show the smoke entry: {response.text}")
        success("Ledger reflects the entry")

        response = client.get("/v1/journal/trial-balance", headers=headers)
        totals = response.json()["totals"]
        if totals["debit_sum"] != totals["credit_sum"]:
            fail(f"Trial balance does not close: {totals}")
        success(f"Trial balance closes: {totals}")

        # 4. Cleanup
        response = client.delete(f"/v1/journal/entries/{entry_id}", headers=headers)
        if response.status_code != 204:
            fail(f"Cleanup failed: {response.status_code}")
        success("Smoke entry removed")

    success("Deployment Validation Passed!")


if __name__ == "__main__":
    main()
