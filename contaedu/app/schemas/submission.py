"""
Exercise submission schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from contaedu.app.models.enums import SubmissionStatus


class SubmissionResponse(BaseModel):
    id: int
    exercise_id: int
    student_id: int
    status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    feedback: Optional[str] = None
    grade: Optional[Decimal] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionWithStudentResponse(SubmissionResponse):
    student_name: str
    student_username: str


class SubmissionReview(BaseModel):
    feedback: str = Field(..., min_length=1)
    grade: Optional[Decimal] = Field(default=None, ge=0, le=10, decimal_places=2)
