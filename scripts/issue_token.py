"""
Development token issuer.

Tokens are normally issued by the school's identity provider. For local
development this script signs one with the configured secret for a user
that already exists in the database (see contaedu/seed_data.py).

Usage:
    python scripts/issue_token.py jperez [--minutes 120]
"""

import argparse
import asyncio
import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from contaedu.app.core.jwt import create_access_token
from contaedu.app.db.session import AsyncSessionLocal, engine
from contaedu.app.models.user import User


async def issue_token(username: str, minutes: int) -> int:
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
    await engine.dispose()

    if not user:
        print(f"❌ No user named {username!r}", file=sys.stderr)
        return 1

    token = create_access_token(
        {"sub": user.username, "user_id": user.id, "role": user.role.value},
        expires_delta=timedelta(minutes=minutes),
    )
    print(f"# {user.full_name} ({user.role.value}), valid for {minutes} minutes", file=sys.stderr)
    print(token)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Issue a development JWT for a seeded user")
    parser.add_argument("username")
    parser.add_argument("--minutes", type=int, default=120)
    args = parser.parse_args()
    sys.exit(asyncio.run(issue_token(args.username, args.minutes)))


if __name__ == "__main__":
    main()
