"""
Admin API Endpoints.

Teacher accounts, school years, system configuration, user removal and
the audit trail.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from contaedu.app.db.session import get_db
from contaedu.app.models.user import User
from contaedu.app.models.course import Course
from contaedu.app.models.school_year import SchoolYear, SystemConfig
from contaedu.app.models.enums import UserRole
from contaedu.app.schemas.auth import UserResponse
from contaedu.app.schemas.admin import (
    TeacherCreate, SchoolYearCreate, SchoolYearResponse,
    SystemConfigResponse, SystemConfigUpdate,
    AuditTrailResponse, AuditLogResponse
)
from contaedu.app.core.dependencies import get_current_user
from contaedu.app.core.guards import require_admin, require_teacher, is_admin
from contaedu.app.core.token_revocation import revoke_all_user_tokens
from contaedu.app.domain.coursework.access import ensure_student_audit_access
from contaedu.app.services.audit import log_user_action, AuditAction, get_audit_trail

router = APIRouter(prefix="/admin", tags=["Admin"])


async def get_or_create_config(db: AsyncSession) -> SystemConfig:
    """The configuration row is created on first access."""
    result = await db.execute(select(SystemConfig).order_by(SystemConfig.id).limit(1))
    config = result.scalar_one_or_none()
    if config is None:
        config = SystemConfig()
        db.add(config)
        await db.commit()
        await db.refresh(config)
    return config


# Teachers

@router.get("/teachers", response_model=List[UserResponse])
async def list_teachers(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(User).where(User.role == UserRole.TEACHER).order_by(User.full_name))
    return result.scalars().all()


@router.post("/teachers", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    teacher_data: TeacherCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Register a teacher (admin-only)."""
    existing = await db.execute(select(User.id).where(User.username == teacher_data.username))
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered"
        )

    teacher = User(
        username=teacher_data.username,
        full_name=teacher_data.full_name,
        email=teacher_data.email,
        role=UserRole.TEACHER,
        created_by=admin["user_id"],
        is_active=True,
    )
    db.add(teacher)
    await db.commit()
    await db.refresh(teacher)

    await log_user_action(
        db, admin, AuditAction.USER_CREATED,
        target_user_id=teacher.id,
        target_username=teacher.username,
        metadata={"role": UserRole.TEACHER.value},
    )
    await db.refresh(teacher)
    return teacher


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    current_user: dict = Depends(require_teacher),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a user and everything they own; their tokens are revoked.

    Teachers may only delete their own students.
    """
    if user_id == current_user["user_id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete yourself"
        )

    if is_admin(current_user):
        target = await db.get(User, user_id)
        if not target:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )
    else:
        target = await ensure_student_audit_access(db, user_id, current_user)

    username, role = target.username, target.role.value
    await db.delete(target)
    await db.commit()

    await revoke_all_user_tokens(user_id)
    await log_user_action(
        db, current_user, AuditAction.USER_DELETED,
        target_user_id=user_id,
        target_username=username,
        metadata={"role": role},
    )


# School years

@router.get("/school-years", response_model=List[SchoolYearResponse])
async def list_school_years(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(SchoolYear).order_by(SchoolYear.name))
    return result.scalars().all()


@router.post("/school-years", response_model=SchoolYearResponse, status_code=status.HTTP_201_CREATED)
async def create_school_year(
    year_data: SchoolYearCreate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create a school year (inactive until toggled)."""
    existing = await db.execute(select(SchoolYear.id).where(SchoolYear.name == year_data.name))
    if existing.first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="School year already exists"
        )

    year = SchoolYear(name=year_data.name, active=False)
    db.add(year)
    await db.commit()
    await db.refresh(year)

    await log_user_action(db, admin, AuditAction.SCHOOL_YEAR_CREATED, metadata={"school_year_id": year.id, "name": year.name})
    await db.refresh(year)
    return year


@router.patch("/school-years/{year_id}/toggle", response_model=SchoolYearResponse)
async def toggle_school_year(
    year_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Activate or deactivate a school year.

    Activating a year deactivates every other one.
    """
    year = await db.get(SchoolYear, year_id)
    if not year:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="School year not found"
        )

    activate = not year.active
    if activate:
        await db.execute(update(SchoolYear).where(SchoolYear.id != year_id).values(active=False))
    year.active = activate
    await db.commit()

    await log_user_action(db, admin, AuditAction.SCHOOL_YEAR_TOGGLED, metadata={"school_year_id": year_id, "active": activate})
    await db.refresh(year)
    return year


@router.delete("/school-years/{year_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_school_year(
    year_id: int,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete a school year that no course refers to."""
    year = await db.get(SchoolYear, year_id)
    if not year:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="School year not found"
        )

    course_count = await db.scalar(select(func.count(Course.id)).where(Course.school_year_id == year_id))
    if course_count:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"School year has {course_count} course(s)"
        )

    await db.delete(year)
    await db.commit()

    await log_user_action(db, admin, AuditAction.SCHOOL_YEAR_DELETED, metadata={"school_year_id": year_id})


# System configuration

@router.get("/config", response_model=SystemConfigResponse)
async def get_config(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await get_or_create_config(db)


@router.patch("/config", response_model=SystemConfigResponse)
async def update_config(
    config_data: SystemConfigUpdate,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Switch the tax regime (IVA / IGIC)."""
    config = await get_or_create_config(db)
    config.tax_regime = config_data.tax_regime
    await db.commit()

    await log_user_action(db, admin, AuditAction.CONFIG_UPDATED, metadata={"tax_regime": config_data.tax_regime.value})
    await db.refresh(config)
    return config


# Audit trail

@router.get("/audit-logs", response_model=AuditTrailResponse)
async def get_audit_logs(
    target_user_id: Optional[int] = Query(None, description="Filter by target user ID"),
    action: Optional[str] = Query(None, description="Filter by action type"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of logs to return"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Get the audit trail, most recent first (admin-only)."""
    logs = await get_audit_trail(db=db, target_user_id=target_user_id, action=action, limit=limit)

    return AuditTrailResponse(
        logs=[AuditLogResponse.model_validate(log) for log in logs],
        total=len(logs)
    )
