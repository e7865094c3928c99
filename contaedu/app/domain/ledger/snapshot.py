"""
Immutable snapshots of journal entries consumed by the ledger core.

The snapshots decouple the pure aggregation functions from the ORM:
persisted rows are converted once, at the input boundary, and amount
conversion fails fast there.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from contaedu.app.domain.ledger.money import ZERO, to_amount


@dataclass(frozen=True)
class LineSnapshot:
    account_code: str
    account_name: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    @property
    def is_inert(self) -> bool:
        """True when the line carries no amount on either side."""
        return self.debit == ZERO and self.credit == ZERO


@dataclass(frozen=True)
class EntrySnapshot:
    id: Optional[int]
    entry_number: int
    date: date
    description: str
    exercise_id: Optional[int] = None
    lines: Tuple[LineSnapshot, ...] = field(default_factory=tuple)


def snapshot_from_orm(entry) -> EntrySnapshot:
    """Build an ``EntrySnapshot`` from a ``JournalEntry`` row with loaded lines."""
    return EntrySnapshot(
        id=entry.id,
        entry_number=entry.entry_number,
        date=entry.date,
        description=entry.description,
        exercise_id=entry.exercise_id,
        lines=tuple(
            LineSnapshot(
                account_code=line.account_code,
                account_name=line.account_name,
                debit=to_amount(line.debit, "debit"),
                credit=to_amount(line.credit, "credit"),
            )
            for line in entry.lines
        ),
    )
