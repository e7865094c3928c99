"""
Exercise API Endpoints.

Exercises are a repository shared by all teachers. Each one may carry a
model solution, a list of balanced journal entries, which students can
read once their hand-in has been reviewed.
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.exam import Exam
from contaedu.app.models.exercise import Exercise, CourseExercise
from contaedu.app.models.enums import UserRole, SubmissionStatus
from contaedu.app.schemas.exercise import (
    ExerciseCreate, ExerciseResponse, CourseAssignment,
    SolutionUpdate, SolutionResponse, ExerciseTask, TaskListResponse
)
from contaedu.app.core.dependencies import get_current_user_record
from contaedu.app.core.exceptions import InsufficientPermissionsError
from contaedu.app.core.guards import require_role, require_teacher, is_admin
from contaedu.app.domain.coursework.access import (
    get_exercise_or_404, get_course_or_404, ensure_course_owner, ensure_student_exercise_access
)
from contaedu.app.domain.coursework.submission_service import SubmissionService
from contaedu.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/exercises", tags=["Exercises"])

teacher_only = require_role([UserRole.TEACHER])


@router.get("", response_model=List[ExerciseResponse])
async def list_exercises(
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """
    Teachers and admins see the whole repository. Students see the
    exercises assigned to their course, minus those used as exams.
    """
    if user.role != UserRole.STUDENT:
        result = await db.execute(select(Exercise).order_by(Exercise.created_at.desc(), Exercise.id.desc()))
        return result.scalars().all()

    if user.course_id is None:
        return []

    exam_exercises = select(Exam.exercise_id).where(Exam.course_id == user.course_id)
    result = await db.execute(
        select(Exercise)
        .join(CourseExercise, CourseExercise.exercise_id == Exercise.id)
        .where(CourseExercise.course_id == user.course_id, Exercise.id.not_in(exam_exercises))
        .order_by(CourseExercise.assigned_at, Exercise.id)
    )
    return result.scalars().all()


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    exercise_data: ExerciseCreate,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    exercise = Exercise(
        title=exercise_data.title,
        description=exercise_data.description,
        exercise_type=exercise_data.exercise_type,
        teacher_id=current_user["user_id"],
    )
    db.add(exercise)
    await db.commit()
    await db.refresh(exercise)

    await log_user_action(db, current_user, AuditAction.EXERCISE_CREATED, metadata={"exercise_id": exercise.id})
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exercise(
    exercise_id: int,
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete an exercise (author or admin).

    Assignments, exams, submissions and the journal entries recorded
    against it are removed with it.
    """
    exercise = await get_exercise_or_404(db, exercise_id)
    if not is_admin(current_user) and exercise.teacher_id != current_user["user_id"]:
        raise InsufficientPermissionsError("Only the author can delete this exercise")

    await db.delete(exercise)
    await db.commit()

    await log_user_action(db, current_user, AuditAction.EXERCISE_DELETED, metadata={"exercise_id": exercise_id})


# Course assignment

@router.get("/{exercise_id}/courses", response_model=List[int])
async def get_assigned_courses(
    exercise_id: int,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    await get_exercise_or_404(db, exercise_id)
    result = await db.execute(
        select(CourseExercise.course_id)
        .where(CourseExercise.exercise_id == exercise_id)
        .order_by(CourseExercise.course_id)
    )
    return result.scalars().all()


@router.post("/{exercise_id}/assign", response_model=List[int])
async def assign_exercise(
    exercise_id: int,
    assignment: CourseAssignment,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    """Assign the exercise to one of the teacher's courses (idempotent)."""
    await get_exercise_or_404(db, exercise_id)
    course = await get_course_or_404(db, assignment.course_id)
    ensure_course_owner(course, current_user)

    existing = await db.execute(
        select(CourseExercise.id).where(
            CourseExercise.exercise_id == exercise_id,
            CourseExercise.course_id == course.id,
        )
    )
    if existing.first() is None:
        db.add(CourseExercise(course_id=course.id, exercise_id=exercise_id))
        await db.commit()
        await log_user_action(
            db, current_user, AuditAction.EXERCISE_ASSIGNED,
            metadata={"exercise_id": exercise_id, "course_id": course.id},
        )

    return await get_assigned_courses(exercise_id, current_user, db)


@router.post("/{exercise_id}/unassign", response_model=List[int])
async def unassign_exercise(
    exercise_id: int,
    assignment: CourseAssignment,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    course = await get_course_or_404(db, assignment.course_id)
    ensure_course_owner(course, current_user)

    result = await db.execute(
        select(CourseExercise).where(
            CourseExercise.exercise_id == exercise_id,
            CourseExercise.course_id == course.id,
        )
    )
    link = result.scalar_one_or_none()
    if link is not None:
        await db.delete(link)
        await db.commit()
        await log_user_action(
            db, current_user, AuditAction.EXERCISE_UNASSIGNED,
            metadata={"exercise_id": exercise_id, "course_id": course.id},
        )

    return await get_assigned_courses(exercise_id, current_user, db)


# Model solution

@router.get("/{exercise_id}/solution", response_model=SolutionResponse)
async def get_solution(
    exercise_id: int,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    exercise = await get_exercise_or_404(db, exercise_id)
    return SolutionResponse(solution=exercise.solution)


@router.put("/{exercise_id}/solution", response_model=SolutionResponse)
async def set_solution(
    exercise_id: int,
    solution: SolutionUpdate,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    """
    Store the model solution.

    Every entry goes through the balance validator; an unbalanced model
    entry is rejected with the same error a student would get.
    """
    exercise = await get_exercise_or_404(db, exercise_id)
    solution.validate_balances()

    exercise.solution = solution.model_dump(mode="json")["entries"]
    await db.commit()

    await log_user_action(
        db, current_user, AuditAction.SOLUTION_UPDATED,
        metadata={"exercise_id": exercise_id, "entries": len(solution.entries)},
    )
    await db.refresh(exercise)
    return SolutionResponse(solution=exercise.solution)


@router.delete("/{exercise_id}/solution", status_code=status.HTTP_204_NO_CONTENT)
async def delete_solution(
    exercise_id: int,
    current_user: dict = Depends(teacher_only),
    db: AsyncSession = Depends(get_db)
):
    exercise = await get_exercise_or_404(db, exercise_id)
    exercise.solution = None
    await db.commit()

    await log_user_action(db, current_user, AuditAction.SOLUTION_UPDATED, metadata={"exercise_id": exercise_id, "entries": 0})


@router.get("/{exercise_id}/student-solution", response_model=SolutionResponse)
async def get_student_solution(
    exercise_id: int,
    student: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """The model solution, readable by a student once their hand-in was reviewed."""
    if student.role != UserRole.STUDENT:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Required role: STUDENT"
        )

    exercise = await ensure_student_exercise_access(db, student, exercise_id)
    submission = await SubmissionService.get(db, exercise_id, student.id)
    if not submission or submission.status != SubmissionStatus.REVIEWED:
        raise InsufficientPermissionsError("The solution is available once your exercise has been reviewed")

    return SolutionResponse(solution=exercise.solution)


@router.get("/{exercise_id}/tasks", response_model=TaskListResponse)
async def get_tasks(
    exercise_id: int,
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """Task list derived from the model solution (statements without the answers)."""
    if user.role == UserRole.STUDENT:
        exercise = await ensure_student_exercise_access(db, user, exercise_id)
    else:
        exercise = await get_exercise_or_404(db, exercise_id)

    tasks = [
        ExerciseTask(
            entry_number=entry.get("entry_number") or position,
            description=entry.get("description") or "",
            statement=entry.get("statement") or "",
            points=entry.get("points"),
        )
        for position, entry in enumerate(exercise.solution or [], start=1)
    ]
    return TaskListResponse(tasks=tasks)
