"""
Pytest configuration for the bot fixture harness.

Provides fixtures for:
- In-memory doubles of the message store, psycopg connections and pools
- Database connection management for integration tests
- Schema initialization and store cleanup
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, List, Optional

import psycopg
import pytest

from botharness.config import Settings
from botharness.domain.models import StoreCredentials
from botharness.errors import PersistenceError
from botharness.infrastructure.database import MessageDatabase
from botharness.infrastructure.db_factory import build_conninfo
from botharness.reset import reset_all

SCHEMA_PATH = Path(__file__).parent.parent / "db" / "init.sql"


class RecordingStore:
    """
    MessageStore double that records every call.

    `fail_step` names a write method that should fail; `failure` is either
    "raise" (PersistenceError) or "false" (falsy return).
    """

    def __init__(
        self,
        connected: bool = True,
        fail_step: Optional[str] = None,
        failure: str = "raise",
    ) -> None:
        self.connected = connected
        self.fail_step = fail_step
        self.failure = failure
        self.calls: List[tuple] = []

    @property
    def write_calls(self) -> List[tuple]:
        return [call for call in self.calls if call[0] != "is_connected"]

    def is_connected(self) -> bool:
        self.calls.append(("is_connected",))
        return self.connected

    def _write(self, name: str, *args: Any) -> bool:
        self.calls.append((name, *args))
        if self.fail_step == name:
            if self.failure == "raise":
                raise PersistenceError(f"{name} rejected")
            return False
        return True

    def insert_message_request(self, message) -> bool:
        return self._write("insert_message_request", message)

    def insert_user(self, user, date=None, chat=None) -> bool:
        return self._write("insert_user", user, date, chat)


class FakeCursor:
    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb

    def execute(self, statement: str, params: Any = None) -> None:
        self.connection.executed.append((statement, params))
        fail_on = self.connection.fail_on
        if fail_on is not None and fail_on in statement:
            raise psycopg.errors.ForeignKeyViolation(f"rejected: {statement.strip()}")


class FakeConnection:
    """Records statements, commits, rollbacks and close calls."""

    def __init__(self, fail_on: Optional[str] = None, fail_commit: bool = False) -> None:
        self.fail_on = fail_on
        self.fail_commit = fail_commit
        self.executed: List[tuple] = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    @property
    def statements(self) -> List[str]:
        return [statement for statement, _ in self.executed]

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        if self.fail_commit:
            raise psycopg.errors.ForeignKeyViolation("commit refused by deferred constraint")
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1

    def close(self) -> None:
        self.closed = True


class FakePool:
    """ConnectionPool double: commits on clean exit, rolls back on error."""

    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.connections: List[FakeConnection] = []
        self.fail_on = fail_on
        self.closed = False

    @contextmanager
    def connection(self) -> Generator[FakeConnection, None, None]:
        conn = FakeConnection(fail_on=self.fail_on)
        self.connections.append(conn)
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        else:
            conn.commit()

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Stands in for psycopg.connect; remembers the conninfo it was given."""

    def __init__(
        self,
        connection: Optional[FakeConnection] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.connection = connection or FakeConnection()
        self.error = error
        self.conninfo: Optional[str] = None

    def __call__(self, conninfo: str) -> FakeConnection:
        self.conninfo = conninfo
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def recording_store():
    return RecordingStore


@pytest.fixture
def fake_connection():
    return FakeConnection


@pytest.fixture
def fake_connector():
    return FakeConnector


@pytest.fixture
def fake_pool():
    return FakePool


@pytest.fixture
def credentials_data() -> dict:
    return {
        "host": "db.test",
        "database": "fixtures",
        "user": "tester",
        "password": "secret",
    }


# --- Integration fixtures -------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "bot_fixtures"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_credentials(test_settings: Settings) -> StoreCredentials:
    return test_settings.credentials()


@pytest.fixture(scope="session")
def db_connection_available(test_credentials: StoreCredentials) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(build_conninfo(test_credentials), connect_timeout=5) as conn:
            conn.execute("SELECT 1;").fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_schema_initialized(
    test_credentials: StoreCredentials, db_connection_available: bool
) -> bool:
    """
    Ensure the fixture tables exist, applying db/init.sql when needed.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    with psycopg.connect(build_conninfo(test_credentials)) as conn:
        conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
        conn.commit()
    return True


@pytest.fixture(scope="function")
def clean_store(test_credentials: StoreCredentials, db_schema_initialized: bool):
    """
    Empty every fixture table before and after each test function.
    """
    reset_all(test_credentials)
    yield
    reset_all(test_credentials)


@pytest.fixture(scope="function")
def message_db(
    test_credentials: StoreCredentials, clean_store
) -> Generator[MessageDatabase, None, None]:
    db = MessageDatabase.connect(test_credentials)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def count_rows(test_credentials: StoreCredentials):
    """Return a callable counting the rows of a fixture table."""

    def _count(table: str) -> int:
        with psycopg.connect(build_conninfo(test_credentials)) as conn:
            return conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]

    return _count
