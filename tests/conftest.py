import os

# Configure an isolated in-memory database before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test_secret_key")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.core.storage import r2_storage
from app.db.base import Base
from app.db.session import SessionLocal, engine
from tests.utils import auth_header, make_user


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def local_uploads(tmp_path, monkeypatch):
    """Keep uploads on local disk under a temporary directory."""
    monkeypatch.setattr(r2_storage, "client", None)
    monkeypatch.setattr(r2_storage, "local_root", tmp_path / "uploads")
    return tmp_path / "uploads"


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def founder(db):
    return make_user(db, "founder", first_name="Ada", last_name="Lovelace")


@pytest.fixture
def investor(db):
    return make_user(db, "investor")


@pytest.fixture
def founder_headers(founder):
    return auth_header(founder)


@pytest.fixture
def investor_headers(investor):
    return auth_header(investor)


@pytest.fixture
def timeline():
    """Distinct, increasing creation times for ordering tests."""
    start = datetime(2024, 1, 1, 12, 0, 0)
    return [start + timedelta(minutes=i) for i in range(50)]
