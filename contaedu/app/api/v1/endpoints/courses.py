"""
Course API Endpoints.

Teachers manage their courses and students; students join a course
with its enrollment code.
"""

import secrets
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.course import Course
from contaedu.app.models.school_year import SchoolYear
from contaedu.app.models.enums import UserRole
from contaedu.app.schemas.auth import UserResponse
from contaedu.app.schemas.course import CourseCreate, CourseResponse, StudentCreate, EnrollRequest
from contaedu.app.core.dependencies import get_current_user, get_current_user_record
from contaedu.app.core.guards import require_role, require_teacher, is_admin
from contaedu.app.domain.coursework.access import get_course_or_404, ensure_course_owner
from contaedu.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/courses", tags=["Courses"])


def generate_enrollment_code() -> str:
    return secrets.token_hex(4).upper()


@router.get("", response_model=List[CourseResponse])
async def list_courses(
    user: User = Depends(get_current_user_record),
    db: AsyncSession = Depends(get_db)
):
    """
    Courses visible to the caller.

    Admins see all courses, teachers their own, students the one they
    are enrolled in.
    """
    query = select(Course).order_by(Course.name)
    if user.role == UserRole.TEACHER:
        query = query.where(Course.teacher_id == user.id)
    elif user.role == UserRole.STUDENT:
        if user.course_id is None:
            return []
        query = query.where(Course.id == user.course_id)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    course_data: CourseCreate,
    current_user: dict = Depends(require_role([UserRole.TEACHER])),
    db: AsyncSession = Depends(get_db)
):
    """Create a course owned by the calling teacher."""
    if not await db.get(SchoolYear, course_data.school_year_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="School year not found"
        )

    course = Course(
        name=course_data.name,
        description=course_data.description,
        teacher_id=current_user["user_id"],
        school_year_id=course_data.school_year_id,
        enrollment_code=generate_enrollment_code(),
    )
    db.add(course)
    await db.commit()
    await db.refresh(course)

    await log_user_action(db, current_user, AuditAction.COURSE_CREATED, metadata={"course_id": course.id, "name": course.name})
    await db.refresh(course)
    return course


@router.delete("/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(
    course_id: int,
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    """Delete a course (owner teacher or admin)."""
    course = await get_course_or_404(db, course_id)
    ensure_course_owner(course, current_user)

    await db.delete(course)
    await db.commit()

    await log_user_action(db, current_user, AuditAction.COURSE_DELETED, metadata={"course_id": course_id})


@router.get("/students", response_model=List[UserResponse])
async def list_students(
    course_id: Optional[int] = Query(None, description="Only students of this course"),
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    """
    Students visible to the caller.

    Admins see every student. Teachers see the students of their own
    courses and the students they created.
    """
    query = select(User).where(User.role == UserRole.STUDENT).order_by(User.full_name)

    if course_id is not None:
        course = await get_course_or_404(db, course_id)
        ensure_course_owner(course, current_user)
        query = query.where(User.course_id == course_id)
    elif not is_admin(current_user):
        teacher_id = current_user["user_id"]
        own_courses = select(Course.id).where(Course.teacher_id == teacher_id)
        query = query.where((User.created_by == teacher_id) | (User.course_id.in_(own_courses)))

    result = await db.execute(query)
    return result.scalars().all()


@router.post("/students", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    current_user: dict = Depends(require_role([UserRole.TEACHER])),
    db: AsyncSession = Depends(get_db)
):
    """Register a student in one of the teacher's courses."""
    course = await get_course_or_404(db, student_data.course_id)
    ensure_course_owner(course, current_user)

    existing = await db.execute(select(User.id).where(User.username == student_data.username))
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered"
        )

    student = User(
        username=student_data.username,
        full_name=student_data.full_name,
        role=UserRole.STUDENT,
        course_id=course.id,
        created_by=current_user["user_id"],
        is_active=True,
    )
    db.add(student)
    await db.commit()
    await db.refresh(student)

    await log_user_action(
        db, current_user, AuditAction.USER_CREATED,
        target_user_id=student.id,
        target_username=student.username,
        metadata={"role": UserRole.STUDENT.value, "course_id": course.id},
    )
    await db.refresh(student)
    return student


@router.post("/enroll", response_model=CourseResponse)
async def enroll(
    request: EnrollRequest,
    current_user: dict = Depends(require_role([UserRole.STUDENT])),
    db: AsyncSession = Depends(get_db)
):
    """Join a course with its enrollment code (replaces any previous course)."""
    result = await db.execute(
        select(Course).where(Course.enrollment_code == request.enrollment_code.strip().upper())
    )
    course = result.scalar_one_or_none()
    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid enrollment code"
        )

    student = await db.get(User, current_user["user_id"])
    student.course_id = course.id
    await db.commit()

    await log_user_action(
        db, current_user, AuditAction.STUDENT_ENROLLED,
        target_user_id=student.id,
        target_username=student.username,
        metadata={"course_id": course.id},
    )
    await db.refresh(course)
    return course
