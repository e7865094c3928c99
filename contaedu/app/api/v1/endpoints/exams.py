"""
Exam API Endpoints.

Teachers schedule timed exams on an exercise for one of their courses;
students start and hand in one attempt each.
"""

from datetime import datetime, timezone
from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.exam import Exam, ExamAttempt
from contaedu.app.models.enums import UserRole, ExamAttemptStatus
from contaedu.app.schemas.exam import (
    ExamCreate, ExamUpdate, ExamResponse, ExamAttemptResponse, ExamAttemptWithStudentResponse
)
from contaedu.app.core.dependencies import get_current_user_record
from contaedu.app.core.exceptions import InsufficientPermissionsError
from contaedu.app.core.guards import require_role
from contaedu.app.domain.coursework.access import get_exercise_or_404, get_course_or_404, ensure_course_owner
from contaedu.app.domain.coursework.exam_service import ExamService, remaining_seconds
from contaedu.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/exams", tags=["Exams"])

teacher_only = require_role([UserRole.TEACHER])
student_only = require_role([UserRole.STUDENT])


def ensure_exam_owner(exam: Exam, current_user: dict) -> None:
    if exam.teacher_id != current_user["user_id"]:
        raise InsufficientPermissionsError("You are not the author of this exam")


def attempt_response(attempt: ExamAttempt, exam: Exam) -> ExamAttemptResponse:
    response = ExamAttemptResponse.model_validate(attempt)
    response.remaining_seconds = remaining_seconds(attempt, exam, datetime.now(timezone.utc))
    return response


@router.get("", response_model=List[ExamResponse])
async def list_exams(
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """Teachers see the exams they wrote; students the active exams of their course."""
    if user.role == UserRole.TEACHER:
        query = select(Exam).where(Exam.teacher_id == user.id)
    elif user.role == UserRole.STUDENT and user.course_id is not None:
        query = select(Exam).where(Exam.course_id == user.course_id, Exam.is_active.is_(True))
    elif user.role == UserRole.ADMIN:
        query = select(Exam)
    else:
        return []

    result = await db.execute(query.order_by(Exam.created_at.desc(), Exam.id.desc()))
    return result.scalars().all()


@router.get("/{exam_id}", response_model=ExamResponse)
async def get_exam(
    exam_id: int,
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    exam = await ExamService.get_exam_or_404(db, exam_id)
    if user.role == UserRole.STUDENT:
        ExamService.ensure_course_member(exam, user)
    return exam


@router.post("", response_model=ExamResponse, status_code=status.HTTP_201_CREATED)
async def create_exam(
    exam_data: ExamCreate,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    """Create an exam (inactive until the teacher enables it)."""
    await get_exercise_or_404(db, exam_data.exercise_id)
    course = await get_course_or_404(db, exam_data.course_id)
    ensure_course_owner(course, current_user)

    exam = Exam(
        **exam_data.model_dump(),
        teacher_id=current_user["user_id"],
        is_active=False,
    )
    db.add(exam)
    await db.commit()
    await db.refresh(exam)

    await log_user_action(
        db, current_user, AuditAction.EXAM_CREATED,
        metadata={"exam_id": exam.id, "exercise_id": exam.exercise_id, "course_id": exam.course_id},
    )
    await db.refresh(exam)
    return exam


@router.patch("/{exam_id}", response_model=ExamResponse)
async def update_exam(
    exam_id: int,
    exam_data: ExamUpdate,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    exam = await ExamService.get_exam_or_404(db, exam_id)
    ensure_exam_owner(exam, current_user)

    for field, value in exam_data.model_dump(exclude_unset=True).items():
        setattr(exam, field, value)
    await db.commit()
    await db.refresh(exam)
    return exam


@router.delete("/{exam_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exam(
    exam_id: int,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    exam = await ExamService.get_exam_or_404(db, exam_id)
    ensure_exam_owner(exam, current_user)

    await db.delete(exam)
    await db.commit()


# Attempts

@router.get("/{exam_id}/attempt", response_model=Optional[ExamAttemptResponse])
async def get_my_attempt(
    exam_id: int,
    current_user: dict = Depends(student_only),
    student: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """The caller's attempt (null before starting). Timed-out attempts come back EXPIRED."""
    exam = await ExamService.get_exam_or_404(db, exam_id)
    attempt = await ExamService.get_attempt(db, exam, student)
    if attempt is None:
        return None
    return attempt_response(attempt, exam)


@router.get("/{exam_id}/attempts", response_model=List[ExamAttemptWithStudentResponse])
async def list_attempts(
    exam_id: int,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    exam = await ExamService.get_exam_or_404(db, exam_id)
    ensure_exam_owner(exam, current_user)

    result = await db.execute(
        select(ExamAttempt, User)
        .join(User, User.id == ExamAttempt.student_id)
        .where(ExamAttempt.exam_id == exam_id)
        .order_by(User.full_name)
    )
    now = datetime.now(timezone.utc)
    return [
        ExamAttemptWithStudentResponse(
            **ExamAttemptResponse.model_validate(attempt).model_dump(exclude={"remaining_seconds"}),
            remaining_seconds=remaining_seconds(attempt, exam, now),
            student_name=student.full_name,
        )
        for attempt, student in result.all()
    ]


@router.post("/{exam_id}/start", response_model=ExamAttemptResponse)
async def start_exam(
    exam_id: int,
    current_user: dict = Depends(student_only),
    student: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    exam = await ExamService.get_exam_or_404(db, exam_id)
    attempt = await ExamService.start(db, exam, student)

    await log_user_action(db, current_user, AuditAction.EXAM_STARTED, metadata={"exam_id": exam_id, "attempt_id": attempt.id})
    return attempt_response(attempt, exam)


@router.post("/{exam_id}/submit", response_model=ExamAttemptResponse)
async def submit_exam(
    exam_id: int,
    current_user: dict = Depends(student_only),
    student: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """Hand in the attempt; after the time limit it is recorded as EXPIRED instead."""
    exam = await ExamService.get_exam_or_404(db, exam_id)
    attempt = await ExamService.submit(db, exam, student)

    action = AuditAction.EXAM_SUBMITTED if attempt.status == ExamAttemptStatus.SUBMITTED else AuditAction.EXAM_EXPIRED
    await log_user_action(db, current_user, action, metadata={"exam_id": exam_id, "attempt_id": attempt.id})
    return attempt_response(attempt, exam)
