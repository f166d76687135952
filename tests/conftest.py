"""Shared test fixtures for VCFolio."""

import sys
import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Keep the app's own engine off disk; tests use their own engines below
os.environ.setdefault("DATABASE_URL", "sqlite://")

from vcfolio.config import get_settings
from vcfolio.database import Base, enable_sqlite_foreign_keys
from vcfolio import models

ADMIN_PASSWORD = "test-admin-password"


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Point uploads at a temp dir and use a small, known configuration."""
    upload_dir = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(upload_dir))
    monkeypatch.setenv("MAX_UPLOAD_SIZE_MB", "1")
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-0123456789")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def upload_dir(test_settings):
    path = test_settings.UPLOAD_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database session for testing."""
    engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def sample_project(db_session):
    """Create a sample project: 1,000,000 valuation, 20% stake, 100,000 cost."""
    from datetime import date

    project = models.Project(
        name="Acme AI",
        brief_intro="Document understanding for insurers",
        portfolio_status="Series A",
        investment_date=date(2023, 5, 1),
        capital_invested=100_000,
        initial_shareholding_ratio=25.0,
        current_shareholding_ratio=20.0,
        investment_cost=100_000,
        latest_financing_valuation=1_000_000,
    )
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture
def client(tmp_path, test_settings):
    """Create a test client with a file-based temp database."""
    from fastapi.testclient import TestClient
    from vcfolio.database import get_db
    from vcfolio.main import app

    db_path = tmp_path / "test.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(client):
    """Log in as administrator and return the Authorization header."""
    resp = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
