"""
Test infrastructure for the intranet API.

Strategy
--------
- SQLite in-memory via aiosqlite, shared through StaticPool so every
  session sees the same connection (an in-memory database is
  connection-scoped). Foreign keys are enforced, as on PostgreSQL.
- ``get_db`` is overridden with the test session factory; tables are
  created before and dropped after each test.
- Redis stays disconnected (``cache._redis = None``); the CacheManager
  turns every cache call into a no-op, so the database path is exercised.
- E-mails go to a recording mailer instead of SES, and "now" comes from a
  fixed clock so deadline rules are deterministic.
"""
from dataclasses import dataclass
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from intranet.cache import cache
from intranet.clock import SystemClock
from intranet.database import Base, get_db
from intranet.dependencies import get_clock
from intranet.exceptions import EmailDeliveryError
from intranet.mailing import get_email_service
from intranet.main import app
from intranet.middleware import install_query_counter

# ---------------------------------------------------------------------------
# Test database engine — SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_query_counter(engine_test)


@event.listens_for(engine_test.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db

# All test data is laid out around this instant.
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class FixedClock(SystemClock):
    def __init__(self, now: datetime) -> None:
        self.now = now

    def utc_now(self) -> datetime:
        return self.now


@dataclass
class SentEmail:
    to: str
    subject: str
    body: str


class RecordingEmailService:
    """Mailer double that keeps sent messages and can fail for chosen addresses."""

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []
        self.fail_for: set[str] = set()

    async def send_email(self, to_email: str, subject: str, html_body: str) -> None:
        if to_email in self.fail_for:
            raise EmailDeliveryError(f"rejected {to_email}")
        self.sent.append(SentEmail(to_email, subject, html_body))

    @property
    def recipients(self) -> list[str]:
        return [email.to for email in self.sent]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """A live session for tests that call services directly."""
    async with async_session_test() as session:
        yield session


@pytest.fixture
def fixed_clock() -> FixedClock:
    clock = FixedClock(NOW)
    app.dependency_overrides[get_clock] = lambda: clock
    yield clock
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
def outbox() -> RecordingEmailService:
    mailer = RecordingEmailService()
    app.dependency_overrides[get_email_service] = lambda: mailer
    yield mailer
    app.dependency_overrides.pop(get_email_service, None)


@pytest_asyncio.fixture
async def async_client(fixed_clock, outbox) -> AsyncClient:
    """
    httpx.AsyncClient wired to the app via ASGITransport, with Redis off,
    the fixed clock and the recording mailer in place.
    """
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
