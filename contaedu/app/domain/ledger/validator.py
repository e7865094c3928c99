"""
Balance validator for journal entries.

This is the gate every write path goes through before an entry (or a
teacher's model solution) is persisted.
"""

from decimal import Decimal
from typing import Iterable, List, Optional

from contaedu.app.core.config import settings
from contaedu.app.core.exceptions import InsufficientLinesError, UnbalancedEntryError
from contaedu.app.domain.ledger.money import ZERO

MIN_LINES = 2


def active_lines(lines: Iterable) -> List:
    """Drop lines where both debit and credit are zero."""
    return [line for line in lines if not (line.debit == ZERO and line.credit == ZERO)]


def validate_entry_lines(lines: Iterable, tolerance: Optional[Decimal] = None) -> None:
    """
    Validate the proposed lines of one journal entry.

    Each line needs ``debit`` and ``credit`` attributes holding Decimals.
    Inert lines are discarded before counting.

    The tolerance is inclusive: with the default 0.01 an entry that is off
    by exactly one cent is accepted. Such an entry makes the trial balance
    totals differ by that cent, so exact closure only holds for entries
    that balance to the cent; JournalService.get_trial_balance logs a
    warning when it sees one.

    Raises:
        InsufficientLinesError: fewer than 2 lines with an amount remain
        UnbalancedEntryError: |sum(debit) - sum(credit)| exceeds the tolerance
    """
    if tolerance is None:
        tolerance = settings.balance_tolerance

    remaining = active_lines(lines)
    if len(remaining) < MIN_LINES:
        raise InsufficientLinesError(len(remaining))

    total_debit = sum((line.debit for line in remaining), ZERO)
    total_credit = sum((line.credit for line in remaining), ZERO)
    if abs(total_debit - total_credit) > tolerance:
        raise UnbalancedEntryError(total_debit, total_credit)
