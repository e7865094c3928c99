"""
Journal Service (Domain Logic).

Persists journal entries behind the balance validator and derives the
ledger and trial balance views from the stored entries on every read.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from contaedu.app.core.exceptions import (
    EntryLockedError,
    InsufficientLinesError,
    ResourceNotFoundError,
    UnbalancedEntryError,
)
from contaedu.app.domain.coursework.access import ensure_student_exercise_access
from contaedu.app.domain.coursework.exam_service import ExamService, is_time_up
from contaedu.app.domain.journal.sequence_allocator import allocate_entry_number
from contaedu.app.domain.ledger.aggregator import LedgerAccountView, aggregate_ledger
from contaedu.app.domain.ledger.snapshot import EntrySnapshot, snapshot_from_orm
from contaedu.app.domain.ledger.trial_balance import TrialBalance, reduce_trial_balance
from contaedu.app.domain.ledger.validator import active_lines, validate_entry_lines
from contaedu.app.models.enums import ExamAttemptStatus, SubmissionStatus
from contaedu.app.models.exam import Exam, ExamAttempt
from contaedu.app.models.journal import JournalEntry, JournalLine
from contaedu.app.models.submission import ExerciseSubmission
from contaedu.app.models.user import User
from contaedu.app.schemas.journal import JournalEntryCreate

logger = logging.getLogger("contaedu.journal")

CLOSED_SUBMISSION_STATUSES = (SubmissionStatus.SUBMITTED, SubmissionStatus.REVIEWED)
CLOSED_ATTEMPT_STATUSES = (ExamAttemptStatus.SUBMITTED, ExamAttemptStatus.EXPIRED)


class JournalService:

    @staticmethod
    async def list_entries(
        db: AsyncSession,
        owner_id: int,
        exercise_id: Optional[int] = None
    ) -> List[JournalEntry]:
        """Entries of one owner ordered by entry number (optionally one exercise)."""
        query = select(JournalEntry).where(JournalEntry.user_id == owner_id)
        if exercise_id is not None:
            query = query.where(JournalEntry.exercise_id == exercise_id)
        query = query.order_by(JournalEntry.entry_number, JournalEntry.id)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def load_snapshots(
        db: AsyncSession,
        owner_id: int,
        exercise_id: Optional[int] = None
    ) -> List[EntrySnapshot]:
        entries = await JournalService.list_entries(db, owner_id, exercise_id)
        return [snapshot_from_orm(entry) for entry in entries]

    @staticmethod
    async def get_ledger(
        db: AsyncSession,
        owner_id: int,
        exercise_id: Optional[int] = None
    ) -> Dict[str, LedgerAccountView]:
        snapshots = await JournalService.load_snapshots(db, owner_id, exercise_id)
        return aggregate_ledger(snapshots, exercise_id=exercise_id)

    @staticmethod
    async def get_trial_balance(
        db: AsyncSession,
        owner_id: int,
        exercise_id: Optional[int] = None
    ) -> TrialBalance:
        ledger = await JournalService.get_ledger(db, owner_id, exercise_id)
        trial_balance = reduce_trial_balance(ledger)
        if not trial_balance.totals.is_balanced:
            # Only reachable through entries that bypassed the validator
            # or were accepted within the rounding tolerance.
            logger.warning(
                "Trial balance for user %s (exercise %s) does not close: %s",
                owner_id, exercise_id, trial_balance.totals,
            )
        return trial_balance

    @staticmethod
    async def ensure_exercise_open(
        db: AsyncSession,
        owner_id: int,
        exercise_id: int,
        now: Optional[datetime] = None
    ) -> None:
        """
        Refuse changes to an exercise's entries once it has been handed in.

        Raises:
            EntryLockedError: submission is submitted/reviewed, or the exam
                attempt covering this exercise is submitted/expired
                (an attempt that ran out of time is expired here first)
        """
        submission = await db.execute(
            select(ExerciseSubmission.status).where(
                ExerciseSubmission.exercise_id == exercise_id,
                ExerciseSubmission.student_id == owner_id,
            )
        )
        status = submission.scalar_one_or_none()
        if status in CLOSED_SUBMISSION_STATUSES:
            raise EntryLockedError(exercise_id, f"exercise already {status.value.lower()}")

        now = now or datetime.now(timezone.utc)
        attempts = await db.execute(
            select(ExamAttempt, Exam)
            .join(Exam, Exam.id == ExamAttempt.exam_id)
            .where(Exam.exercise_id == exercise_id, ExamAttempt.student_id == owner_id)
        )
        for attempt, exam in attempts.all():
            if attempt.status == ExamAttemptStatus.IN_PROGRESS and is_time_up(attempt, exam, now):
                attempt = await ExamService.expire(db, attempt, now)
            if attempt.status in CLOSED_ATTEMPT_STATUSES:
                raise EntryLockedError(exercise_id, f"exam attempt {attempt.status.value.lower()}")

    @staticmethod
    async def create_entry(db: AsyncSession, owner: User, payload: JournalEntryCreate) -> JournalEntry:
        """
        Validate and persist a new journal entry.

        Flow:
        1. Balance validation (nothing is written if it fails)
        2. Exercise access and lock checks
        3. Entry number allocation
        4. Insert entry and its non-inert lines in one transaction

        Raises:
            InsufficientLinesError, UnbalancedEntryError: invalid lines
            ResourceNotFoundError, InsufficientPermissionsError: bad exercise
            EntryLockedError: the exercise was already handed in
        """
        try:
            validate_entry_lines(payload.lines)
        except (InsufficientLinesError, UnbalancedEntryError) as exc:
            logger.info("Rejected journal entry for user %s: %s", owner.id, exc.message)
            raise

        if payload.exercise_id is not None:
            await ensure_student_exercise_access(db, owner, payload.exercise_id)
            await JournalService.ensure_exercise_open(db, owner.id, payload.exercise_id)

        entry_number = await allocate_entry_number(db, owner.id, payload.exercise_id)

        entry = JournalEntry(
            entry_number=entry_number,
            date=payload.date,
            description=payload.description,
            user_id=owner.id,
            exercise_id=payload.exercise_id,
        )
        entry.lines = [
            JournalLine(
                position=position,
                account_code=line.account_code,
                account_name=line.account_name,
                debit=line.debit,
                credit=line.credit,
            )
            for position, line in enumerate(active_lines(payload.lines))
        ]
        db.add(entry)
        await db.commit()
        await db.refresh(entry)

        logger.info(
            "Journal entry %s (#%s) created for user %s, exercise %s",
            entry.id, entry.entry_number, owner.id, entry.exercise_id,
        )
        return entry

    @staticmethod
    async def delete_entry(db: AsyncSession, owner_id: int, entry_id: int) -> JournalEntry:
        """Delete one of the owner's entries together with its lines."""
        result = await db.execute(
            select(JournalEntry).where(JournalEntry.id == entry_id, JournalEntry.user_id == owner_id)
        )
        entry = result.scalar_one_or_none()
        if not entry:
            raise ResourceNotFoundError("Journal entry", entry_id)

        if entry.exercise_id is not None:
            await JournalService.ensure_exercise_open(db, owner_id, entry.exercise_id)

        await db.delete(entry)
        await db.commit()

        logger.info("Journal entry %s deleted by user %s", entry_id, owner_id)
        return entry
