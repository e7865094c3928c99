"""
Exercise submission model.

Tracks the hand-in state of one exercise for one student:
IN_PROGRESS -> SUBMITTED (student) -> REVIEWED (teacher).
"""

from sqlalchemy import Column, Integer, Text, DateTime, Enum, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from contaedu.app.db.session import Base
from contaedu.app.models.enums import SubmissionStatus


class ExerciseSubmission(Base):
    __tablename__ = "exercise_submissions"
    __table_args__ = (
        UniqueConstraint("exercise_id", "student_id", name="uq_submission_exercise_student"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(Enum(SubmissionStatus), default=SubmissionStatus.IN_PROGRESS, nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)

    # Review
    feedback = Column(Text, nullable=True)
    grade = Column(Numeric(4, 2), nullable=True)
    reviewed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ExerciseSubmission(id={self.id}, exercise={self.exercise_id}, status='{self.status.value}')>"
