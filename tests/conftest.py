"""
Pytest configuration and fixtures.
"""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from entity_service.models import Base
from entity_service.services import ResourceAdapter, Service
from tests.models import Tag, UserService


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite defers BEGIN on its own, which breaks SAVEPOINT; emit it ourselves
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


class QueryCounter:
    """Counts data statements sent to the database."""

    TRANSACTION_STATEMENTS = ("BEGIN", "COMMIT", "ROLLBACK", "SAVEPOINT", "RELEASE")

    def __init__(self):
        self.count = 0
        self.statements: list[str] = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if statement.strip().upper().startswith(self.TRANSACTION_STATEMENTS):
            return
        self.count += 1
        self.statements.append(statement)

    def reset(self) -> None:
        self.count = 0
        self.statements.clear()


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def query_counter():
    """Count statements emitted inside a test. Call reset() after setup."""
    counter = QueryCounter()
    event.listen(engine, "before_cursor_execute", counter)
    try:
        yield counter
    finally:
        event.remove(engine, "before_cursor_execute", counter)


@pytest.fixture
def service(db_session):
    return UserService(db_session)


@pytest.fixture
def tag_service(db_session):
    return Service(db_session, Tag)


@pytest.fixture
def resource(service):
    return ResourceAdapter(service)


@pytest.fixture
def users(service):
    """Three persisted users."""
    return service.generate(3)


@pytest.fixture
def tags(tag_service):
    """Tags with ids 1..3 and slugs one/two/three."""
    return tag_service.create_group([
        {"slug": "one", "label": "One"},
        {"slug": "two", "label": "Two"},
        {"slug": "three", "label": None},
    ])
