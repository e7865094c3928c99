"""
Teacher Audit API Endpoints.

Read-only views of a student's journal, ledger and trial balance for
the student's teacher (or an admin).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from contaedu.app.db.session import get_db
from contaedu.app.schemas.journal import JournalEntryResponse, LedgerAccountResponse, TrialBalanceResponse
from contaedu.app.core.guards import require_teacher
from contaedu.app.domain.coursework.access import ensure_student_audit_access
from contaedu.app.domain.journal.journal_service import JournalService

router = APIRouter(prefix="/audit/students", tags=["Teacher Audit"])

exercise_filter = Query(None, description="Limit to one exercise context")


@router.get("/{student_id}/journal", response_model=List[JournalEntryResponse])
async def audit_journal(
    student_id: int,
    exercise_id: Optional[int] = exercise_filter,
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    await ensure_student_audit_access(db, student_id, current_user)
    return await JournalService.list_entries(db, student_id, exercise_id)


@router.get("/{student_id}/ledger", response_model=List[LedgerAccountResponse])
async def audit_ledger(
    student_id: int,
    exercise_id: Optional[int] = exercise_filter,
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    await ensure_student_audit_access(db, student_id, current_user)
    ledger = await JournalService.get_ledger(db, student_id, exercise_id)
    return [LedgerAccountResponse.from_view(view) for view in ledger.values()]


@router.get("/{student_id}/trial-balance", response_model=TrialBalanceResponse)
async def audit_trial_balance(
    student_id: int,
    exercise_id: Optional[int] = exercise_filter,
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    await ensure_student_audit_access(db, student_id, current_user)
    trial_balance = await JournalService.get_trial_balance(db, student_id, exercise_id)
    return TrialBalanceResponse.from_domain(trial_balance)
