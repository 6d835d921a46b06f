"""
Test configuration and fixtures.
"""
import os
import pytest
from typing import Generator
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Configure settings before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["IMPORT_ISOLATION_LEVEL"] = ""

from menu_import.main import app
from menu_import.db.base import Base
from menu_import.db.session import _enable_sqlite_foreign_keys, get_db
from menu_import.services.entity_store import SqlAlchemyEntityStore
from menu_import.services.import_logger import ImportLogger
import menu_import.models  # noqa: F401


# One in-memory database shared by every session of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(engine, "connect", _enable_sqlite_foreign_keys)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a database session against a fresh schema."""
    Base.metadata.create_all(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def store(db: Session) -> SqlAlchemyEntityStore:
    """Entity store bound to the test session."""
    return SqlAlchemyEntityStore(db)


@pytest.fixture
def import_logger() -> ImportLogger:
    return ImportLogger()


@pytest.fixture
def restaurant_data_path() -> str:
    """Sample export with two restaurants, legacy keys, and shared items."""
    return os.path.join(os.path.dirname(__file__), "fixtures", "restaurant_data.json")
