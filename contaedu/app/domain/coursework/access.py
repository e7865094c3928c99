"""
Lookups shared by the coursework and journal services.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from contaedu.app.core.exceptions import InsufficientPermissionsError, ResourceNotFoundError
from contaedu.app.models.course import Course
from contaedu.app.models.enums import UserRole
from contaedu.app.models.exam import Exam
from contaedu.app.models.exercise import CourseExercise, Exercise
from contaedu.app.models.user import User


async def get_user_or_404(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user


async def get_exercise_or_404(db: AsyncSession, exercise_id: int) -> Exercise:
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise ResourceNotFoundError("Exercise", exercise_id)
    return exercise


async def get_course_or_404(db: AsyncSession, course_id: int) -> Course:
    course = await db.get(Course, course_id)
    if not course:
        raise ResourceNotFoundError("Course", course_id)
    return course


async def is_exercise_assigned(db: AsyncSession, exercise_id: int, course_id: Optional[int]) -> bool:
    """True when the exercise is assigned to the course, directly or through an exam."""
    if course_id is None:
        return False
    assigned = await db.execute(
        select(CourseExercise.id).where(
            CourseExercise.exercise_id == exercise_id,
            CourseExercise.course_id == course_id,
        )
    )
    if assigned.first() is not None:
        return True
    exam = await db.execute(
        select(Exam.id).where(Exam.exercise_id == exercise_id, Exam.course_id == course_id)
    )
    return exam.first() is not None


async def ensure_student_exercise_access(db: AsyncSession, student: User, exercise_id: int) -> Exercise:
    """Load an exercise and check it is visible to the student's course."""
    exercise = await get_exercise_or_404(db, exercise_id)
    if not await is_exercise_assigned(db, exercise_id, student.course_id):
        raise InsufficientPermissionsError(
            "This exercise is not assigned to your course",
            details={"exercise_id": exercise_id}
        )
    return exercise


async def ensure_student_audit_access(db: AsyncSession, student_id: int, current_user: dict) -> User:
    """
    Load a student whose work the caller wants to audit.

    Admins may audit anyone; teachers only students they created or that
    belong to one of their courses.
    """
    student = await db.get(User, student_id)
    if not student or student.role != UserRole.STUDENT:
        raise ResourceNotFoundError("Student", student_id)

    if current_user.get("role") == UserRole.ADMIN.value:
        return student

    teacher_id = current_user.get("user_id")
    if student.created_by == teacher_id:
        return student
    if student.course_id is not None:
        course = await db.get(Course, student.course_id)
        if course and course.teacher_id == teacher_id:
            return student

    raise InsufficientPermissionsError("You do not have access to this student")


def ensure_course_owner(course: Course, current_user: dict) -> None:
    """Only the course's teacher (or an admin) may manage it."""
    if current_user.get("role") == UserRole.ADMIN.value:
        return
    if course.teacher_id != current_user.get("user_id"):
        raise InsufficientPermissionsError("You are not the teacher of this course")
