"""
FastAPI Application Entry Point.

This is the main application file for the ContaEdu Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from contaedu.app.core.config import settings
from contaedu.app.core.logging_config import configure_logging
from contaedu.app.core.observability import ObservabilityMiddleware
from contaedu.app.api.v1.router import router as api_v1_router
from contaedu.app.db.session import engine, Base
from contaedu.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from contaedu.app.models.user import User
from contaedu.app.models.audit_log import AuditLog
from contaedu.app.models.school_year import SchoolYear, SystemConfig
from contaedu.app.models.course import Course
from contaedu.app.models.account import Account
from contaedu.app.models.exercise import Exercise, CourseExercise
from contaedu.app.models.journal import JournalEntry, JournalLine, JournalSequence
from contaedu.app.models.submission import ExerciseSubmission
from contaedu.app.models.exam import Exam, ExamAttempt

logger = logging.getLogger("contaedu")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Configures logging and creates database tables on startup.
    """
    configure_logging(settings.log_level, settings.log_format)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s started", settings.app_name, settings.api_version)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Double-entry bookkeeping practice for accounting students",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Welcome to ContaEdu Backend API",
        "docs": "/docs",
        "health": "/health",
    }
