"""
Exam Service (Domain Logic).

Handles exam attempts and their timer. An attempt expires once the
elapsed time exceeds the exam duration; expiry is applied lazily,
whenever the attempt is read or acted upon.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from contaedu.app.core.exceptions import (
    InsufficientPermissionsError,
    InvalidStateTransitionError,
    ResourceNotFoundError,
)
from contaedu.app.models.enums import ExamAttemptStatus
from contaedu.app.models.exam import Exam, ExamAttempt
from contaedu.app.models.user import User

logger = logging.getLogger("contaedu.coursework")

CLOSED_STATUSES = (ExamAttemptStatus.SUBMITTED, ExamAttemptStatus.EXPIRED)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def is_time_up(attempt: ExamAttempt, exam: Exam, now: datetime) -> bool:
    deadline = as_utc(attempt.started_at) + timedelta(minutes=exam.duration_minutes)
    return now > deadline


def remaining_seconds(attempt: ExamAttempt, exam: Exam, now: datetime) -> int:
    if attempt.status != ExamAttemptStatus.IN_PROGRESS:
        return 0
    deadline = as_utc(attempt.started_at) + timedelta(minutes=exam.duration_minutes)
    return max(int((deadline - now).total_seconds()), 0)


class ExamService:

    @staticmethod
    def ensure_course_member(exam: Exam, student: User) -> None:
        if exam.course_id != student.course_id:
            raise InsufficientPermissionsError("You do not have access to this exam")

    @staticmethod
    async def get_exam_or_404(db: AsyncSession, exam_id: int) -> Exam:
        exam = await db.get(Exam, exam_id)
        if not exam:
            raise ResourceNotFoundError("Exam", exam_id)
        return exam

    @staticmethod
    async def _find_attempt(db: AsyncSession, exam_id: int, student_id: int) -> Optional[ExamAttempt]:
        result = await db.execute(
            select(ExamAttempt).where(ExamAttempt.exam_id == exam_id, ExamAttempt.student_id == student_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def expire(db: AsyncSession, attempt: ExamAttempt, now: datetime) -> ExamAttempt:
        attempt.status = ExamAttemptStatus.EXPIRED
        attempt.submitted_at = now
        await db.commit()
        await db.refresh(attempt)
        logger.info("Exam attempt %s expired", attempt.id)
        return attempt

    @staticmethod
    async def get_attempt(
        db: AsyncSession,
        exam: Exam,
        student: User,
        now: Optional[datetime] = None
    ) -> Optional[ExamAttempt]:
        """Current attempt of the student, expiring it if time ran out."""
        ExamService.ensure_course_member(exam, student)
        now = now or datetime.now(timezone.utc)

        attempt = await ExamService._find_attempt(db, exam.id, student.id)
        if attempt and attempt.status == ExamAttemptStatus.IN_PROGRESS and is_time_up(attempt, exam, now):
            attempt = await ExamService.expire(db, attempt, now)
        return attempt

    @staticmethod
    async def start(
        db: AsyncSession,
        exam: Exam,
        student: User,
        now: Optional[datetime] = None
    ) -> ExamAttempt:
        """
        Start (or resume) the student's attempt.

        Raises:
            InsufficientPermissionsError: exam belongs to another course
            InvalidStateTransitionError: exam inactive or outside its
                availability window, attempt already closed or timed out
        """
        ExamService.ensure_course_member(exam, student)
        now = now or datetime.now(timezone.utc)

        if not exam.is_active:
            raise InvalidStateTransitionError("The exam is not active")
        if exam.available_from and now < as_utc(exam.available_from):
            raise InvalidStateTransitionError("The exam is not available yet")
        if exam.available_to and now > as_utc(exam.available_to):
            raise InvalidStateTransitionError("The exam is no longer available")

        existing = await ExamService._find_attempt(db, exam.id, student.id)
        if existing:
            if existing.status in CLOSED_STATUSES:
                raise InvalidStateTransitionError(
                    "You have already handed in this exam",
                    current_status=existing.status.value,
                )
            if is_time_up(existing, exam, now):
                await ExamService.expire(db, existing, now)
                raise InvalidStateTransitionError(
                    "The exam time has expired",
                    current_status=ExamAttemptStatus.EXPIRED.value,
                )
            return existing

        attempt = ExamAttempt(
            exam_id=exam.id,
            student_id=student.id,
            started_at=now,
            status=ExamAttemptStatus.IN_PROGRESS,
        )
        db.add(attempt)
        await db.commit()
        await db.refresh(attempt)

        logger.info("Exam %s started by student %s", exam.id, student.id)
        return attempt

    @staticmethod
    async def submit(
        db: AsyncSession,
        exam: Exam,
        student: User,
        now: Optional[datetime] = None
    ) -> ExamAttempt:
        """
        Hand in the attempt. A late hand-in is recorded as EXPIRED.

        Raises:
            ResourceNotFoundError: no attempt was started
            InvalidStateTransitionError: attempt already closed
        """
        ExamService.ensure_course_member(exam, student)
        now = now or datetime.now(timezone.utc)

        attempt = await ExamService._find_attempt(db, exam.id, student.id)
        if not attempt:
            raise ResourceNotFoundError("Exam attempt")
        if attempt.status in CLOSED_STATUSES:
            raise InvalidStateTransitionError(
                "This exam has already been handed in",
                current_status=attempt.status.value,
            )

        if is_time_up(attempt, exam, now):
            return await ExamService.expire(db, attempt, now)

        attempt.status = ExamAttemptStatus.SUBMITTED
        attempt.submitted_at = now
        await db.commit()
        await db.refresh(attempt)

        logger.info("Exam %s submitted by student %s", exam.id, student.id)
        return attempt
