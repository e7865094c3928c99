"""
Course database model.

A course belongs to one teacher and one school year. Students join a
course through its enrollment code.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from contaedu.app.db.session import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    school_year_id = Column(Integer, ForeignKey("school_years.id"), nullable=False, index=True)

    enrollment_code = Column(String(20), unique=True, index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Course(id={self.id}, name='{self.name}', teacher_id={self.teacher_id})>"
