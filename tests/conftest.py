"""Shared test fixtures — async DB, client, auth helpers, factories.

Reusable across all test modules (auth, scheduling, invoicing, workflow).
Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Configure settings before any other import touches pydantic-settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SESSION_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("WORKFLOW_JWT_SECRET", "test-workflow-secret-for-ci")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from shift_manager.auth.service import hash_password, open_session
from shift_manager.common.constants import UserRole, WorkflowRole
from shift_manager.config import settings
from shift_manager.database import Base, get_db
from shift_manager.main import create_app

# Import ALL model modules so SQLAlchemy can resolve cross-module relationships
import shift_manager.auth.models  # noqa: F401
import shift_manager.common.audit  # noqa: F401
import shift_manager.customers.models  # noqa: F401
import shift_manager.documents.models  # noqa: F401
import shift_manager.exchange_requests.models  # noqa: F401
import shift_manager.invoices.models  # noqa: F401
import shift_manager.reports.models  # noqa: F401
import shift_manager.shifts.models  # noqa: F401
import shift_manager.workflow.models  # noqa: F401
import shift_manager.workplaces.models  # noqa: F401

# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine.sync_engine, "connect")
def _enable_foreign_keys(dbapi_conn, connection_record):
    """SQLite ignores ON DELETE rules unless foreign keys are switched on."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from shift_manager.common.rate_limit import limiter
    try:
        # Clear the in-memory storage used by slowapi/limits
        if hasattr(limiter, '_storage'):
            limiter._storage.reset()
    except Exception:
        pass
    yield


@pytest.fixture(autouse=True)
def _upload_dir(tmp_path, monkeypatch):
    """Keep uploaded files inside the test's temp directory."""
    upload_dir = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(upload_dir))
    return upload_dir


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

_counter = {"n": 0}


def _next() -> int:
    _counter["n"] += 1
    return _counter["n"]


def _make_user(
    *,
    role: UserRole = UserRole.worker,
    first_name: str = "Jana",
    last_name: str = "Nováková",
    email: Optional[str] = None,
    username: Optional[str] = None,
    password: str = "heslo123",
    parent_company_id: Optional[int] = None,
    **extra,
) -> dict:
    n = _next()
    return dict(
        first_name=first_name,
        last_name=last_name,
        username=username or f"{role.value}{n}",
        email=email or f"{role.value}{n}@example.com",
        password=hash_password(password),
        role=role.value,
        parent_company_id=parent_company_id,
        company_verified=False,
        **extra,
    )


@pytest.fixture
def make_user(db):
    """Insert a Shift Manager user and return the ORM row."""
    from shift_manager.auth.models import User

    async def _create(**kwargs) -> User:
        user = User(**_make_user(**kwargs))
        db.add(user)
        await db.commit()
        return user

    return _create


@pytest.fixture
def make_workplace(db):
    from shift_manager.workplaces.models import Workplace

    async def _create(*, name: str = "Sklad Praha", type: str = "warehouse", **kwargs) -> Workplace:
        workplace = Workplace(name=name, type=type, **kwargs)
        db.add(workplace)
        await db.commit()
        return workplace

    return _create


@pytest.fixture
def make_shift(db):
    from shift_manager.shifts.models import Shift

    async def _create(
        *,
        workplace_id: int,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        hours: float = 8,
        **kwargs,
    ) -> Shift:
        start = start or datetime(2025, 3, 10, 8, 0)
        end = start + timedelta(hours=hours)
        shift = Shift(
            workplace_id=workplace_id,
            user_id=user_id,
            date=start.replace(hour=0, minute=0),
            start_time=start,
            end_time=end,
            hours=int(hours),
            **kwargs,
        )
        db.add(shift)
        await db.commit()
        return shift

    return _create


# ── Auth helpers ────────────────────────────────────────────────────

@pytest.fixture
def auth_headers_for(db):
    """Open a persisted session for *user* and return cookie + CSRF headers."""

    async def _headers(user) -> dict[str, str]:
        token, session = await open_session(db, user, "127.0.0.1", "pytest")
        await db.commit()
        return {
            "Cookie": f"{settings.SESSION_COOKIE_NAME}={token}",
            "X-CSRF-Token": session.csrf_token,
        }

    return _headers


@pytest.fixture
async def admin(make_user):
    return await make_user(role=UserRole.admin, first_name="Admin", last_name="Root")


@pytest.fixture
async def company(make_user):
    return await make_user(
        role=UserRole.company,
        first_name="Firma",
        last_name="Owner",
        company_name="Firma s.r.o.",
        company_id="27082440",
    )


@pytest.fixture
async def worker(make_user, company):
    return await make_user(role=UserRole.worker, parent_company_id=company.id)


# ── Workflow helpers ────────────────────────────────────────────────

def create_workflow_token(user_id: int, role: str = "manager", expired: bool = False) -> str:
    """Generate a workflow bearer token for testing."""
    if expired:
        exp = datetime.now(timezone.utc) - timedelta(hours=1)
    else:
        exp = datetime.now(timezone.utc) + timedelta(days=settings.WORKFLOW_JWT_EXPIRY_DAYS)
    payload = {"id": user_id, "role": role, "exp": exp}
    return jwt.encode(
        payload, settings.WORKFLOW_JWT_SECRET, algorithm=settings.WORKFLOW_JWT_ALGORITHM,
    )


@pytest.fixture
def make_wf_user(db):
    """Insert a workflow account and return (user, bearer headers)."""
    from shift_manager.workflow.models import WorkflowUser

    async def _create(role: WorkflowRole = WorkflowRole.manager, **kwargs):
        n = _next()
        user = WorkflowUser(
            name=kwargs.pop("name", f"{role.value.title()} {n}"),
            email=kwargs.pop("email", f"wf-{role.value}{n}@example.com"),
            password=hash_password(kwargs.pop("password", "secret123")),
            role=role.value,
            **kwargs,
        )
        db.add(user)
        await db.commit()
        headers = {"Authorization": f"Bearer {create_workflow_token(user.id, role.value)}"}
        return user, headers

    return _create


@pytest.fixture
def workflow_token():
    """Token factory for hand-crafted (e.g. expired) bearer tokens."""
    return create_workflow_token
