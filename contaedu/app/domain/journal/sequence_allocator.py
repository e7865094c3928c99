"""
Entry number allocation.

Numbers are sequential per owner and exercise scope, starting at 1. Each
allocation is a single upsert on ``journal_sequences`` so concurrent
requests from the same student can never obtain the same number.
"""

from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from contaedu.app.core.exceptions import UnsupportedDatabaseError
from contaedu.app.models.journal import JournalSequence

GENERAL_SCOPE = "general"

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def sequence_scope(exercise_id: Optional[int]) -> str:
    """Scope key for an exercise context (entries without exercise share one)."""
    if exercise_id is None:
        return GENERAL_SCOPE
    return f"exercise:{exercise_id}"


async def allocate_entry_number(db: AsyncSession, owner_id: int, exercise_id: Optional[int]) -> int:
    """
    Reserve the next entry number for the owner and scope.

    Runs inside the caller's transaction: if the entry insert is rolled
    back, so is the allocation.
    """
    dialect = db.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise UnsupportedDatabaseError(dialect)

    stmt = insert(JournalSequence).values(
        owner_id=owner_id,
        scope=sequence_scope(exercise_id),
        last_number=1,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[JournalSequence.owner_id, JournalSequence.scope],
        set_={"last_number": JournalSequence.last_number + 1},
    ).returning(JournalSequence.last_number)

    result = await db.execute(stmt)
    return result.scalar_one()
