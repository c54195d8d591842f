"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Each test gets freshly created tables
that are dropped again afterwards.
"""

import os

# Point the application at the test database before anything
# imports the settings.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fine_ledger.main import app
from fine_ledger.models import Base
from fine_ledger.models.base import get_db
from fine_ledger.models.enums import ActorRole
from fine_ledger.schemas.actor import Actor


# SQLite file database: no external database needed, and several
# connections can share it, which the concurrency tests rely on.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    """Open additional independent sessions, e.g. one per thread."""
    return TestSessionLocal


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def enforcer():
    return Actor(id="enforcer-1", role=ActorRole.ENFORCER)


@pytest.fixture
def admin():
    return Actor(id="admin-1", role=ActorRole.ADMIN)


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the FastAPI app
    uses the test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


ENFORCER_HEADERS = {"X-Actor-Id": "enforcer-1", "X-Actor-Role": "ENFORCER"}
ADMIN_HEADERS = {"X-Actor-Id": "admin-1", "X-Actor-Role": "ADMIN"}


@pytest.fixture
def enforcer_headers():
    return dict(ENFORCER_HEADERS)


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def issue_violation(db_session, enforcer):
    """Helper: issue a violation through the ledger and return it."""
    from fine_ledger.models.enums import VehicleCategory
    from fine_ledger.schemas.violation import ViolationIssue
    from fine_ledger.services.fine_ledger import FineLedger

    def _issue(plate="ABC-1234", category=VehicleCategory.MULTICAB):
        return FineLedger(db_session).issue(
            ViolationIssue(plate_number=plate, vehicle_category=category),
            enforcer,
        )

    return _issue
