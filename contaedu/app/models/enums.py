"""
Enumerations shared by the ContaEdu models.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Manages school years, teachers and system settings
        TEACHER: Owns courses, exercises and exams; audits students
        STUDENT: Authors journal entries (default role)
    """
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class TaxRegime(str, enum.Enum):
    """Indirect tax regime used by exercises."""
    IVA = "IVA"  # Peninsula and Balearic Islands
    IGIC = "IGIC"  # Canary Islands


class AccountType(str, enum.Enum):
    """Chart of accounts classification."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class ExerciseType(str, enum.Enum):
    GUIDED = "GUIDED"
    PRACTICE = "PRACTICE"


class SubmissionStatus(str, enum.Enum):
    """Exercise submission workflow: student submits, teacher reviews."""
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"


class ExamAttemptStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    EXPIRED = "EXPIRED"  # Time ran out before submission
