"""
Course and student enrolment schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    school_year_id: int


class CourseResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    teacher_id: int
    school_year_id: int
    enrollment_code: str
    created_at: datetime

    class Config:
        from_attributes = True


class StudentCreate(BaseModel):
    """Schema for a teacher creating a student in one of their courses."""
    username: str = Field(..., min_length=3, max_length=100)
    full_name: str = Field(..., min_length=1, max_length=200)
    course_id: int


class EnrollRequest(BaseModel):
    enrollment_code: str = Field(..., min_length=1, max_length=20)
