"""
Journal, ledger and trial balance schemas.

Monetary fields are serialized as strings with two fraction digits so no
precision is lost across the API boundary.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, PlainSerializer, field_validator, model_validator

from contaedu.app.domain.ledger.aggregator import LedgerAccountView
from contaedu.app.domain.ledger.money import format_amount
from contaedu.app.domain.ledger.trial_balance import TrialBalance

Amount = Annotated[Decimal, PlainSerializer(format_amount, return_type=str, when_used="json")]


class JournalLineCreate(BaseModel):
    """
    One posting of a proposed entry. Missing amounts count as zero.

    A row with no amount is inert and may be left blank; it is dropped
    before validation and never stored.
    """
    account_code: str = Field(default="", max_length=20)
    account_name: str = Field(default="", max_length=255)
    debit: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    credit: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)

    @field_validator("debit", "credit", mode="before")
    @classmethod
    def blank_as_zero(cls, value):
        if value is None or value == "":
            return Decimal("0")
        return value

    @model_validator(mode="after")
    def account_required_with_amount(self) -> "JournalLineCreate":
        if (self.debit or self.credit) and not (self.account_code.strip() and self.account_name.strip()):
            raise ValueError("A line with an amount needs an account code and name")
        return self


class JournalEntryCreate(BaseModel):
    """Write boundary for a new journal entry."""
    date: date
    description: str = Field(..., min_length=1, max_length=2000)
    exercise_id: Optional[int] = Field(default=None, description="Exercise context of the entry")
    lines: List[JournalLineCreate] = Field(..., description="Entry lines (at least two with an amount)")


class JournalLineResponse(BaseModel):
    account_code: str
    account_name: str
    debit: Amount
    credit: Amount

    class Config:
        from_attributes = True


class JournalEntryResponse(BaseModel):
    id: int
    entry_number: int
    date: date
    description: str
    exercise_id: Optional[int] = None
    lines: List[JournalLineResponse]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LedgerPostingResponse(BaseModel):
    entry_number: Optional[int] = None
    date: date
    description: str
    debit: Amount
    credit: Amount


class LedgerAccountResponse(BaseModel):
    """One account of the ledger (libro mayor)."""
    account_code: str
    account_name: str
    entries: List[LedgerPostingResponse]
    total_debit: Amount
    total_credit: Amount
    balance: Amount

    @classmethod
    def from_view(cls, view: LedgerAccountView) -> "LedgerAccountResponse":
        return cls(
            account_code=view.account_code,
            account_name=view.account_name,
            entries=[
                LedgerPostingResponse(
                    entry_number=posting.entry_number,
                    date=posting.date,
                    description=posting.description,
                    debit=posting.debit,
                    credit=posting.credit,
                )
                for posting in view.postings
            ],
            total_debit=view.total_debit,
            total_credit=view.total_credit,
            balance=view.balance,
        )


class TrialBalanceRowResponse(BaseModel):
    account_code: str
    account_name: str
    debit_sum: Amount
    credit_sum: Amount
    debit_balance: Amount
    credit_balance: Amount

    class Config:
        from_attributes = True


class TrialBalanceTotalsResponse(BaseModel):
    debit_sum: Amount
    credit_sum: Amount
    debit_balance: Amount
    credit_balance: Amount

    class Config:
        from_attributes = True


class TrialBalanceResponse(BaseModel):
    """Trial balance (balance de sumas y saldos)."""
    rows: List[TrialBalanceRowResponse]
    totals: TrialBalanceTotalsResponse

    @classmethod
    def from_domain(cls, trial_balance: TrialBalance) -> "TrialBalanceResponse":
        return cls(
            rows=[TrialBalanceRowResponse.model_validate(row) for row in trial_balance.rows],
            totals=TrialBalanceTotalsResponse.model_validate(trial_balance.totals),
        )
