"""
Exercise Submission Service (Domain Logic).

Student hands in an exercise, teacher reviews it:
IN_PROGRESS -> SUBMITTED -> REVIEWED. A submitted exercise locks the
student's journal entries for that exercise.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from contaedu.app.core.exceptions import InvalidStateTransitionError, ResourceNotFoundError
from contaedu.app.domain.coursework.access import ensure_student_exercise_access
from contaedu.app.models.course import Course
from contaedu.app.models.enums import SubmissionStatus
from contaedu.app.models.submission import ExerciseSubmission
from contaedu.app.models.user import User

logger = logging.getLogger("contaedu.coursework")

REVIEWABLE_STATUSES = (SubmissionStatus.SUBMITTED, SubmissionStatus.REVIEWED)


class SubmissionService:

    @staticmethod
    async def get(db: AsyncSession, exercise_id: int, student_id: int) -> Optional[ExerciseSubmission]:
        result = await db.execute(
            select(ExerciseSubmission).where(
                ExerciseSubmission.exercise_id == exercise_id,
                ExerciseSubmission.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_student(db: AsyncSession, student_id: int) -> List[ExerciseSubmission]:
        result = await db.execute(
            select(ExerciseSubmission)
            .where(ExerciseSubmission.student_id == student_id)
            .order_by(ExerciseSubmission.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_for_exercise(db: AsyncSession, exercise_id: int) -> List[Tuple[ExerciseSubmission, User]]:
        """Submissions of one exercise with their students, for the teacher's review list."""
        result = await db.execute(
            select(ExerciseSubmission, User)
            .join(User, User.id == ExerciseSubmission.student_id)
            .where(ExerciseSubmission.exercise_id == exercise_id)
            .order_by(User.full_name)
        )
        return [(submission, student) for submission, student in result.all()]

    @staticmethod
    async def pending_counts(db: AsyncSession, teacher_id: int) -> Dict[int, int]:
        """Number of submissions awaiting review per exercise, for the teacher's students."""
        result = await db.execute(
            select(ExerciseSubmission.exercise_id, func.count(ExerciseSubmission.id))
            .join(User, User.id == ExerciseSubmission.student_id)
            .join(Course, Course.id == User.course_id)
            .where(
                Course.teacher_id == teacher_id,
                ExerciseSubmission.status == SubmissionStatus.SUBMITTED,
            )
            .group_by(ExerciseSubmission.exercise_id)
        )
        return {exercise_id: count for exercise_id, count in result.all()}

    @staticmethod
    async def submit(
        db: AsyncSession,
        student: User,
        exercise_id: int,
        now: Optional[datetime] = None
    ) -> ExerciseSubmission:
        """
        Hand in an exercise.

        Raises:
            InvalidStateTransitionError: already submitted or reviewed
        """
        await ensure_student_exercise_access(db, student, exercise_id)
        now = now or datetime.now(timezone.utc)

        submission = await SubmissionService.get(db, exercise_id, student.id)
        if submission and submission.status in REVIEWABLE_STATUSES:
            raise InvalidStateTransitionError(
                "This exercise has already been submitted",
                current_status=submission.status.value,
            )

        if submission is None:
            submission = ExerciseSubmission(exercise_id=exercise_id, student_id=student.id)
            db.add(submission)

        submission.status = SubmissionStatus.SUBMITTED
        submission.submitted_at = now
        await db.commit()
        await db.refresh(submission)

        logger.info("Exercise %s submitted by student %s", exercise_id, student.id)
        return submission

    @staticmethod
    async def review(
        db: AsyncSession,
        submission_id: int,
        reviewer_id: int,
        feedback: str,
        grade: Optional[Decimal] = None,
        now: Optional[datetime] = None
    ) -> ExerciseSubmission:
        """
        Record the teacher's feedback (and optional grade).

        Re-reviewing an already reviewed submission replaces the feedback.

        Raises:
            ResourceNotFoundError: unknown submission
            InvalidStateTransitionError: submission not handed in yet
        """
        submission = await db.get(ExerciseSubmission, submission_id)
        if not submission:
            raise ResourceNotFoundError("Submission", submission_id)

        if submission.status not in REVIEWABLE_STATUSES:
            raise InvalidStateTransitionError(
                "Only submitted exercises can be reviewed",
                current_status=submission.status.value,
            )

        submission.status = SubmissionStatus.REVIEWED
        submission.feedback = feedback
        submission.grade = grade
        submission.reviewed_by = reviewer_id
        submission.reviewed_at = now or datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(submission)

        logger.info("Submission %s reviewed by %s", submission_id, reviewer_id)
        return submission
