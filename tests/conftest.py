"""
Shared test fixtures: SQLite database, test client, template registry.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from reelquote.database import Base, get_db
from reelquote.main import app
from reelquote.pricing import build_default_registry


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def registry():
    """The built-in template registry."""
    return build_default_registry()


@pytest.fixture
def quote_payload():
    """Scenario quote: two crew lines, one gear line, transport + F&B."""
    return {
        "project_type": "company_profile",
        "crew": [
            {"role": "Lead", "qty": 1, "days": 1, "rate_per_day": 1_000_000},
            {"role": "Support", "qty": 2, "days": 0.5, "rate_per_day": 400_000},
        ],
        "gear": [
            {"name": "Kit", "qty": 1, "days": 1, "rate_per_day": 250_000},
        ],
        "oop": {"transport": 150_000, "fnb": 50_000},
        "complexity": {"answers": [2, 3, 2, 1, 3, 2, 1, 2, 2, 1]},
        "business": {"skill_level": "intermediate", "profit_margin_pct": 0.1},
    }
