"""
Exercise, course assignment and model solution schemas.

A solution is a list of model journal entries; each one must pass the
same balance check as a student's entry.
"""

import datetime as dt
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from contaedu.app.domain.ledger.validator import validate_entry_lines
from contaedu.app.models.enums import ExerciseType
from contaedu.app.schemas.journal import JournalLineCreate


class ExerciseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    exercise_type: ExerciseType = ExerciseType.PRACTICE


class ExerciseResponse(BaseModel):
    id: int
    title: str
    description: str
    exercise_type: ExerciseType
    teacher_id: int
    has_solution: bool = False
    created_at: dt.datetime

    class Config:
        from_attributes = True


class CourseAssignment(BaseModel):
    course_id: int


class SolutionEntry(BaseModel):
    """One model entry of an exercise solution."""
    entry_number: Optional[int] = Field(default=None, ge=1)
    date: Optional[dt.date] = None
    description: str = Field(..., min_length=1)
    statement: Optional[str] = Field(default=None, description="Task statement shown to students")
    points: Optional[Decimal] = Field(default=None, ge=0)
    lines: List[JournalLineCreate]


class SolutionUpdate(BaseModel):
    entries: List[SolutionEntry] = Field(..., min_length=1)

    def validate_balances(self) -> None:
        """Run every model entry through the balance validator."""
        for entry in self.entries:
            validate_entry_lines(entry.lines)


class SolutionResponse(BaseModel):
    solution: Optional[List[SolutionEntry]] = None


class ExerciseTask(BaseModel):
    entry_number: Optional[int] = None
    description: str
    statement: str = ""
    points: Optional[Decimal] = None


class TaskListResponse(BaseModel):
    tasks: List[ExerciseTask]
