"""
Tests for entry number allocation and its database backing.
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from contaedu.app.core.exceptions import UnsupportedDatabaseError
from contaedu.app.domain.journal.sequence_allocator import allocate_entry_number, sequence_scope
from contaedu.app.models.journal import JournalEntry
from contaedu.tests.factories import create_user


class FakeDialect:
    name = "mysql"


class FakeBind:
    dialect = FakeDialect()


class FakeSession:
    def get_bind(self):
        return FakeBind()


def test_scope_keys():
    assert sequence_scope(None) == "general"
    assert sequence_scope(7) == "exercise:7"


async def test_allocation_counts_per_scope(db_session):
    student = await create_user(db_session, "jperez")

    numbers = [
        await allocate_entry_number(db_session, student.id, None),
        await allocate_entry_number(db_session, student.id, None),
        await allocate_entry_number(db_session, student.id, 3),
    ]

    assert numbers == [1, 2, 1]


async def test_unsupported_dialect_is_an_application_error():
    with pytest.raises(UnsupportedDatabaseError) as exc_info:
        await allocate_entry_number(FakeSession(), owner_id=1, exercise_id=None)

    assert exc_info.value.error_code == "ERR_DB_001"
    assert exc_info.value.details == {"dialect": "mysql"}


async def test_general_scope_numbers_are_unique(db_session):
    student = await create_user(db_session, "jperez")
    db_session.add_all([
        JournalEntry(entry_number=1, date=date(2025, 1, 1), description="Apertura", user_id=student.id),
        JournalEntry(entry_number=1, date=date(2025, 1, 2), description="Duplicado", user_id=student.id),
    ])

    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()
