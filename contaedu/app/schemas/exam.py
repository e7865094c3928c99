"""
Exam and exam attempt schemas.
"""

from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import Optional
from contaedu.app.models.enums import ExamAttemptStatus


class ExamCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    instructions: Optional[str] = None
    exercise_id: int
    course_id: int
    duration_minutes: int = Field(default=60, ge=1, le=600)
    available_from: Optional[datetime] = None
    available_to: Optional[datetime] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.available_from and self.available_to and self.available_to <= self.available_from:
            raise ValueError("available_to must be after available_from")
        return self


class ExamUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    instructions: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=1, le=600)
    available_from: Optional[datetime] = None
    available_to: Optional[datetime] = None
    is_active: Optional[bool] = None


class ExamResponse(BaseModel):
    id: int
    title: str
    description: str
    instructions: Optional[str] = None
    exercise_id: int
    course_id: int
    teacher_id: int
    duration_minutes: int
    available_from: Optional[datetime] = None
    available_to: Optional[datetime] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ExamAttemptResponse(BaseModel):
    id: int
    exam_id: int
    student_id: int
    started_at: datetime
    submitted_at: Optional[datetime] = None
    status: ExamAttemptStatus
    remaining_seconds: int = 0

    class Config:
        from_attributes = True


class ExamAttemptWithStudentResponse(ExamAttemptResponse):
    student_name: str
