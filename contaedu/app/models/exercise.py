"""
Exercise database models.

Exercises form a shared repository authored by teachers and are made
visible to students by assigning them to courses.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func
from contaedu.app.db.session import Base
from contaedu.app.models.enums import ExerciseType


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    exercise_type = Column(Enum(ExerciseType), default=ExerciseType.PRACTICE, nullable=False)

    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Model answer: list of entries, each {entry_number, description, statement, points, lines}
    solution = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def has_solution(self) -> bool:
        return bool(self.solution)

    def __repr__(self):
        return f"<Exercise(id={self.id}, title='{self.title}')>"


class CourseExercise(Base):
    """Assignment of an exercise to a course."""
    __tablename__ = "course_exercises"
    __table_args__ = (
        UniqueConstraint("course_id", "exercise_id", name="uq_course_exercise"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)

    assigned_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
