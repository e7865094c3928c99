"""
Audit Log Database Model.

Records security events and coursework actions (entries, hand-ins,
reviews, exams) for teachers and administrators.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from contaedu.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - TOKEN_REVOKED / USER_CREATED / USER_DELETED
    - JOURNAL_ENTRY_CREATED / JOURNAL_ENTRY_DELETED / JOURNAL_ENTRY_REJECTED
    - EXERCISE_SUBMITTED / EXERCISE_REVIEWED
    - EXAM_STARTED / EXAM_SUBMITTED / EXAM_EXPIRED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system actions)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_username = Column(String(100), nullable=True)

    action = Column(String(100), nullable=False, index=True)

    # Whose data was affected (student being reviewed, user being deleted)
    target_user_id = Column(Integer, index=True, nullable=True)
    target_username = Column(String(100), nullable=True)

    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_username})>"
