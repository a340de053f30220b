"""Shared fixtures: an in-memory SQLite database wired into the app."""
import os

os.environ["DATABASE_URL"] = "sqlite://"

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from expense_service import models  # noqa: F401  # Register tables with metadata
from expense_service.database import Base, get_db
from expense_service.main import app


@pytest.fixture
def engine():
    """A fresh in-memory database per test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session):
    """Test client whose routes use the in-memory session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_db():
    """A session whose every query and commit fails like a lost connection."""
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    db = MagicMock()
    db.query.side_effect = error
    db.commit.side_effect = error
    return db


@pytest.fixture
def failing_client(broken_db):
    """Test client whose routes hit an unreachable database."""
    def override_get_db():
        yield broken_db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
