"""
Trial balance reducer (balance de sumas y saldos).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from contaedu.app.domain.ledger.aggregator import LedgerAccountView
from contaedu.app.domain.ledger.money import ZERO


@dataclass(frozen=True)
class TrialBalanceRow:
    account_code: str
    account_name: str
    debit_sum: Decimal
    credit_sum: Decimal
    debit_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalanceTotals:
    debit_sum: Decimal = ZERO
    credit_sum: Decimal = ZERO
    debit_balance: Decimal = ZERO
    credit_balance: Decimal = ZERO

    @property
    def is_balanced(self) -> bool:
        return self.debit_sum == self.credit_sum and self.debit_balance == self.credit_balance


@dataclass(frozen=True)
class TrialBalance:
    rows: List[TrialBalanceRow] = field(default_factory=list)
    totals: TrialBalanceTotals = field(default_factory=TrialBalanceTotals)


def reduce_trial_balance(ledger: Dict[str, LedgerAccountView]) -> TrialBalance:
    """
    Reduce a ledger to one row per account plus a totals row.

    Sums are raw totals; the net balance goes to the debit or credit
    balance column depending on its sign.
    """
    rows = []
    for code in sorted(ledger):
        account = ledger[code]
        balance = account.balance
        rows.append(
            TrialBalanceRow(
                account_code=account.account_code,
                account_name=account.account_name,
                debit_sum=account.total_debit,
                credit_sum=account.total_credit,
                debit_balance=balance if balance > ZERO else ZERO,
                credit_balance=-balance if balance < ZERO else ZERO,
            )
        )

    totals = TrialBalanceTotals(
        debit_sum=sum((row.debit_sum for row in rows), ZERO),
        credit_sum=sum((row.credit_sum for row in rows), ZERO),
        debit_balance=sum((row.debit_balance for row in rows), ZERO),
        credit_balance=sum((row.credit_balance for row in rows), ZERO),
    )
    return TrialBalance(rows=rows, totals=totals)
