"""
Journal API Endpoints.

Students record journal entries (libro diario); the ledger and the
trial balance are derived from them on every request.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.enums import UserRole
from contaedu.app.schemas.journal import (
    JournalEntryCreate, JournalEntryResponse, LedgerAccountResponse, TrialBalanceResponse
)
from contaedu.app.core.dependencies import get_current_user, get_current_user_record
from contaedu.app.core.guards import require_role
from contaedu.app.domain.journal.journal_service import JournalService
from contaedu.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/journal", tags=["Journal"])

exercise_filter = Query(None, description="Limit to one exercise context")


@router.get("/entries", response_model=List[JournalEntryResponse])
async def list_entries(
    exercise_id: Optional[int] = exercise_filter,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await JournalService.list_entries(db, current_user["user_id"], exercise_id)


@router.post("/entries", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_data: JournalEntryCreate,
    current_user: dict = Depends(require_role([UserRole.STUDENT])),
    owner: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a journal entry.

    Rejected with 400 when fewer than two lines carry an amount or when
    debits and credits differ; nothing is stored in that case.
    """
    entry = await JournalService.create_entry(db, owner, entry_data)
    response = JournalEntryResponse.model_validate(entry)

    await log_user_action(
        db, current_user, AuditAction.JOURNAL_ENTRY_CREATED,
        metadata={"entry_id": response.id, "entry_number": response.entry_number, "exercise_id": response.exercise_id},
    )
    return response


@router.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: int,
    current_user: dict = Depends(require_role([UserRole.STUDENT])),
    db: AsyncSession = Depends(get_db)
):
    entry = await JournalService.delete_entry(db, current_user["user_id"], entry_id)

    await log_user_action(
        db, current_user, AuditAction.JOURNAL_ENTRY_DELETED,
        metadata={"entry_id": entry_id, "entry_number": entry.entry_number, "exercise_id": entry.exercise_id},
    )


@router.get("/ledger", response_model=List[LedgerAccountResponse])
async def get_ledger(
    exercise_id: Optional[int] = exercise_filter,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """General ledger (libro mayor), one item per account in code order."""
    ledger = await JournalService.get_ledger(db, current_user["user_id"], exercise_id)
    return [LedgerAccountResponse.from_view(view) for view in ledger.values()]


@router.get("/trial-balance", response_model=TrialBalanceResponse)
async def get_trial_balance(
    exercise_id: Optional[int] = exercise_filter,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Trial balance (balance de sumas y saldos)."""
    trial_balance = await JournalService.get_trial_balance(db, current_user["user_id"], exercise_id)
    return TrialBalanceResponse.from_domain(trial_balance)
