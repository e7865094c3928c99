"""
Ledger aggregator (libro mayor).

Groups the lines of a student's entries by account code. Totals do not
depend on the order of the input entries; each account's posting list
keeps the order in which entries were supplied.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from contaedu.app.domain.ledger.money import ZERO
from contaedu.app.domain.ledger.snapshot import EntrySnapshot


@dataclass
class Posting:
    date: date
    description: str
    debit: Decimal
    credit: Decimal
    entry_number: Optional[int] = None


@dataclass
class LedgerAccountView:
    account_code: str
    account_name: str
    postings: List[Posting] = field(default_factory=list)
    total_debit: Decimal = ZERO
    total_credit: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        """Signed balance: positive is a debit balance."""
        return self.total_debit - self.total_credit


def aggregate_ledger(
    entries: Iterable[EntrySnapshot],
    exercise_id: Optional[int] = None,
) -> Dict[str, LedgerAccountView]:
    """
    Build per-account ledger views from entry snapshots.

    Args:
        entries: Snapshots for one owner, ideally ordered by entry number
        exercise_id: When given, only entries of that exercise are used

    Returns:
        Dict keyed by account code, in ascending code order. The account
        name shown is the one on the last line seen for that code.
    """
    accounts: Dict[str, LedgerAccountView] = {}

    for entry in entries:
        if exercise_id is not None and entry.exercise_id != exercise_id:
            continue
        for line in entry.lines:
            view = accounts.get(line.account_code)
            if view is None:
                view = LedgerAccountView(account_code=line.account_code, account_name=line.account_name)
                accounts[line.account_code] = view
            else:
                view.account_name = line.account_name

            view.postings.append(
                Posting(
                    date=entry.date,
                    description=entry.description,
                    debit=line.debit,
                    credit=line.credit,
                    entry_number=entry.entry_number,
                )
            )
            view.total_debit += line.debit
            view.total_credit += line.credit

    return {code: accounts[code] for code in sorted(accounts)}
