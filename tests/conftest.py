import itertools
import os
from datetime import datetime, timedelta, timezone

# Settings() 는 import 시점에 읽히므로 앱 import 전에 설정
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["APP_ENV"] = "test"
os.environ.pop("JWT_AUDIENCE", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from intervium.config import settings
from intervium.db.base import Base, SessionLocal, engine
from intervium.models.interview import InterviewAttempt, STATUS_COMPLETED
from intervium.services.attempt_store import AttemptStore
from intervium.services.catalog import load_catalog

BASE_TIME = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db) -> AttemptStore:
    return AttemptStore(db)


@pytest.fixture(scope="session")
def catalog():
    return load_catalog(settings.catalog_dir, settings.popular_badge)


@pytest.fixture
def add_attempt(db):
    """Insert and commit an attempt; each call is one second newer than the last."""
    clock = itertools.count()

    def _add(user_id="user-1", **overrides) -> InterviewAttempt:
        created_at = overrides.pop("created_at", None) or BASE_TIME + timedelta(seconds=next(clock))
        values = {
            "profession_id": "backend-developer",
            "character_id": "joe",
            "status": STATUS_COMPLETED,
            "started_at": created_at - timedelta(minutes=20),
            "completed_at": created_at,
            "overall_score": 70,
        }
        values.update(overrides)
        attempt = InterviewAttempt(user_id=user_id, created_at=created_at, **values)
        db.add(attempt)
        db.commit()
        db.refresh(attempt)
        return attempt

    return _add


def _make_token(sub="user-1", secret="test-secret", **claims) -> str:
    payload = {"sub": sub, "email": f"{sub}@example.com", **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def make_token():
    return _make_token


@pytest.fixture
def auth_headers():
    def _headers(user_id="user-1") -> dict:
        return {"Authorization": f"Bearer {_make_token(user_id)}"}

    return _headers


@pytest.fixture
def client():
    from intervium.main import app

    with TestClient(app) as c:
        yield c
