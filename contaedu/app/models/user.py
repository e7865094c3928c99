"""
User database model.

Credentials live with the external identity provider; this table only
holds profile, role and course membership.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func
from contaedu.app.db.session import Base
from contaedu.app.models.enums import UserRole


class User(Base):
    """
    User model for students, teachers and administrators.

    Students belong to one course and record the teacher that created
    (or enrolled) them, which scopes teacher audit access.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    role = Column(Enum(UserRole), default=UserRole.STUDENT, nullable=False, index=True)

    # Students only
    course_id = Column(Integer, index=True, nullable=True)

    # Teacher (or admin) that created this user
    created_by = Column(Integer, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role='{self.role.value}')>"
