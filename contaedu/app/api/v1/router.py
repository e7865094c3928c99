"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from contaedu.app.api.v1.endpoints import (
    auth, admin, courses, accounts, exercises,
    journal, audit, submissions, exams
)

router = APIRouter()

router.include_router(auth.router)
router.include_router(admin.router)
router.include_router(courses.router)
router.include_router(accounts.router)
router.include_router(exercises.router)

# Bookkeeping
router.include_router(journal.router)
router.include_router(audit.router)

# Hand-ins
router.include_router(submissions.router)
router.include_router(exams.router)
