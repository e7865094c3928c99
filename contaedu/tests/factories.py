"""
Test data helpers shared by the unit and API tests.
"""

from datetime import date
from decimal import Decimal

from contaedu.app.core.jwt import create_access_token
from contaedu.app.domain.ledger.snapshot import EntrySnapshot, LineSnapshot
from contaedu.app.models.enums import UserRole
from contaedu.app.models.user import User

PURCHASE_LINES = [
    ("600", "Compras de mercaderías", "1000.00", "0"),
    ("472", "H.P. IVA soportado", "210.00", "0"),
    ("572", "Bancos", "0", "1210.00"),
]


def auth_headers(user: User) -> dict:
    token = create_access_token({"sub": user.username, "user_id": user.id, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


async def create_user(db, username, role=UserRole.STUDENT, course_id=None, created_by=None, full_name=None):
    user = User(
        username=username,
        full_name=full_name or username.title(),
        role=role,
        course_id=course_id,
        created_by=created_by,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def line(code, name, debit="0", credit="0"):
    return LineSnapshot(account_code=code, account_name=name, debit=Decimal(debit), credit=Decimal(credit))


def entry(entry_id, lines, exercise_id=None, entry_number=None, day=1, description=None):
    return EntrySnapshot(
        id=entry_id,
        entry_number=entry_number or entry_id,
        date=date(2025, 1, day),
        description=description or f"Entry {entry_id}",
        exercise_id=exercise_id,
        lines=tuple(lines),
    )


def entry_payload(lines, exercise_id=None, description="Compra de mercaderías", entry_date="2025-01-15"):
    """JSON body for POST /v1/journal/entries; lines are (code, name, debit, credit)."""
    return {
        "date": entry_date,
        "description": description,
        "exercise_id": exercise_id,
        "lines": [
            {"account_code": code, "account_name": name, "debit": debit, "credit": credit}
            for code, name, debit, credit in lines
        ],
    }
