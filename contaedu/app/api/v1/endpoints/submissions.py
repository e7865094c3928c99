"""
Exercise Submission API Endpoints.

Students hand in exercises; teachers review them with feedback and an
optional grade.
"""

from typing import Dict, List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.enums import UserRole
from contaedu.app.schemas.submission import SubmissionResponse, SubmissionWithStudentResponse, SubmissionReview
from contaedu.app.core.dependencies import get_current_user_record
from contaedu.app.core.guards import require_role
from contaedu.app.domain.coursework.access import get_exercise_or_404
from contaedu.app.domain.coursework.submission_service import SubmissionService
from contaedu.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/submissions", tags=["Submissions"])

teacher_only = require_role([UserRole.TEACHER])


@router.get("", response_model=List[SubmissionResponse])
async def list_my_submissions(
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    if user.role != UserRole.STUDENT:
        return []
    return await SubmissionService.list_for_student(db, user.id)


@router.get("/pending-counts", response_model=Dict[int, int])
async def pending_counts(
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    """Submissions awaiting review per exercise, for the teacher's students."""
    return await SubmissionService.pending_counts(db, current_user["user_id"])


@router.get("/exercise/{exercise_id}", response_model=List[SubmissionWithStudentResponse])
async def list_exercise_submissions(
    exercise_id: int,
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """Teachers get every submission of the exercise; students only their own."""
    await get_exercise_or_404(db, exercise_id)

    if user.role == UserRole.STUDENT:
        submission = await SubmissionService.get(db, exercise_id, user.id)
        if submission is None:
            return []
        pairs = [(submission, user)]
    else:
        pairs = await SubmissionService.list_for_exercise(db, exercise_id)

    return [
        SubmissionWithStudentResponse(
            **SubmissionResponse.model_validate(submission).model_dump(),
            student_name=student.full_name,
            student_username=student.username,
        )
        for submission, student in pairs
    ]


@router.post("/{exercise_id}/submit", response_model=SubmissionResponse)
async def submit_exercise(
    exercise_id: int,
    current_user: dict = Depends(require_role([UserRole.STUDENT])),
    student: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """Hand in an exercise; its journal entries become read-only."""
    submission = await SubmissionService.submit(db, student, exercise_id)

    await log_user_action(db, current_user, AuditAction.EXERCISE_SUBMITTED, metadata={"exercise_id": exercise_id})
    return submission


@router.post("/{submission_id}/review", response_model=SubmissionResponse)
async def review_submission(
    submission_id: int,
    review: SubmissionReview,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    submission = await SubmissionService.review(
        db, submission_id, current_user["user_id"], review.feedback, review.grade
    )

    await log_user_action(
        db, current_user, AuditAction.EXERCISE_REVIEWED,
        target_user_id=submission.student_id,
        metadata={"submission_id": submission_id, "grade": str(review.grade) if review.grade is not None else None},
    )
    return submission
