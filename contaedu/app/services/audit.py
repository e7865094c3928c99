"""
Audit logging service for security events and coursework actions.

Gives teachers and administrators a trail of who created, deleted,
handed in or reviewed what.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from contaedu.app.models.audit_log import AuditLog


class AuditAction:
    """Standardized audit action constants."""
    TOKEN_REVOKED = "TOKEN_REVOKED"
    USER_CREATED = "USER_CREATED"
    USER_DELETED = "USER_DELETED"
    STUDENT_ENROLLED = "STUDENT_ENROLLED"

    # Administration
    SCHOOL_YEAR_CREATED = "SCHOOL_YEAR_CREATED"
    SCHOOL_YEAR_TOGGLED = "SCHOOL_YEAR_TOGGLED"
    SCHOOL_YEAR_DELETED = "SCHOOL_YEAR_DELETED"
    CONFIG_UPDATED = "CONFIG_UPDATED"

    # Courses and exercises
    COURSE_CREATED = "COURSE_CREATED"
    COURSE_DELETED = "COURSE_DELETED"
    EXERCISE_CREATED = "EXERCISE_CREATED"
    EXERCISE_DELETED = "EXERCISE_DELETED"
    EXERCISE_ASSIGNED = "EXERCISE_ASSIGNED"
    EXERCISE_UNASSIGNED = "EXERCISE_UNASSIGNED"
    SOLUTION_UPDATED = "SOLUTION_UPDATED"

    # Journal
    JOURNAL_ENTRY_CREATED = "JOURNAL_ENTRY_CREATED"
    JOURNAL_ENTRY_DELETED = "JOURNAL_ENTRY_DELETED"

    # Hand-ins
    EXERCISE_SUBMITTED = "EXERCISE_SUBMITTED"
    EXERCISE_REVIEWED = "EXERCISE_REVIEWED"
    EXAM_CREATED = "EXAM_CREATED"
    EXAM_STARTED = "EXAM_STARTED"
    EXAM_SUBMITTED = "EXAM_SUBMITTED"
    EXAM_EXPIRED = "EXAM_EXPIRED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    actor_username: Optional[str] = None,
    target_user_id: Optional[int] = None,
    target_username: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Log an event to the audit log and commit it.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: ID of user performing the action
        actor_username: Username of actor
        target_user_id: ID of user whose data was affected (if applicable)
        target_username: Username of target
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_username=actor_username,
        action=action,
        target_user_id=target_user_id,
        target_username=target_username,
        meta_data=metadata,
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def log_user_action(
    db: AsyncSession,
    current_user: dict,
    action: str,
    target_user_id: Optional[int] = None,
    target_username: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Log an action performed by the authenticated caller (JWT payload)."""
    return await log_event(
        db=db,
        action=action,
        actor_id=current_user.get("user_id"),
        actor_username=current_user.get("sub"),
        target_user_id=target_user_id,
        target_username=target_username,
        metadata=metadata,
    )


async def get_audit_trail(
    db: AsyncSession,
    target_user_id: Optional[int] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering.

    Returns:
        List of AuditLog instances, most recent first
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if target_user_id:
        query = query.where(AuditLog.target_user_id == target_user_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
