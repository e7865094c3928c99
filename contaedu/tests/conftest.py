"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from contaedu.app.main import app
from contaedu.app.db.session import get_db, Base
from contaedu.app.models.course import Course
from contaedu.app.models.school_year import SchoolYear
from contaedu.app.models.exercise import Exercise, CourseExercise
from contaedu.app.models.enums import UserRole, ExerciseType
from contaedu.tests.factories import create_user
import contaedu.app.core.redis_client as redis_client_module
import contaedu.app.core.token_revocation as token_revocation_module

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


class MockRedis:
    """In-process stand-in for the few Redis commands the app uses."""

    def __init__(self):
        self.store = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0

    async def exists(self, key):
        return 1 if key in self.store else 0

    async def flushdb(self):
        self.store = {}


@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session."""
    original_client = redis_client_module.redis_client
    original_revocation_client = token_revocation_module.redis_client
    redis_client_module.redis_client = redis_client_session
    token_revocation_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client
    token_revocation_module.redis_client = original_revocation_client


@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def classroom(db_session):
    """
    One teacher with one course, two students enrolled in it and one
    exercise assigned to the course.
    """
    admin = await create_user(db_session, "admin", UserRole.ADMIN)
    teacher = await create_user(db_session, "mgarcia", UserRole.TEACHER, created_by=admin.id)

    year = SchoolYear(name="2024-2025", active=True)
    db_session.add(year)
    await db_session.commit()

    course = Course(name="1º ADFI", teacher_id=teacher.id, school_year_id=year.id, enrollment_code="ADFI2024")
    db_session.add(course)
    await db_session.commit()

    student = await create_user(db_session, "jperez", course_id=course.id, created_by=teacher.id)
    classmate = await create_user(db_session, "alopez", course_id=course.id, created_by=teacher.id)

    exercise = Exercise(
        title="Compra de mercaderías",
        description="Registra la compra con IVA",
        exercise_type=ExerciseType.PRACTICE,
        teacher_id=teacher.id,
    )
    db_session.add(exercise)
    await db_session.commit()
    db_session.add(CourseExercise(course_id=course.id, exercise_id=exercise.id))
    await db_session.commit()

    return {
        "admin": admin,
        "teacher": teacher,
        "course": course,
        "year": year,
        "student": student,
        "classmate": classmate,
        "exercise": exercise,
    }

