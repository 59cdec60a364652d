"""Shared fixtures. Settings are read at import time, so the env is set first."""

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-that-is-long-enough-for-hs256")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from marketplace.config import Settings  # noqa: E402
from tests.fakes import InMemoryDatabase  # noqa: E402

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def config():
    return Settings(
        supabase_url="http://localhost:54321",
        supabase_service_role_key="test",
        supabase_jwt_secret="test",
        questions_per_test=10,
        allow_forced_passes=True,
    )


@pytest.fixture
def seed_questions(db):
    """Add `count` questions for a role whose correct answer is always option 1."""

    def _seed(role: str, count: int = 10) -> list[dict]:
        return [
            db.add(
                "test_questions",
                role=role,
                question_text=f"{role} question {i}",
                options=["a", "b", "c", "d"],
                correct_answer=1,
            )
            for i in range(count)
        ]

    return _seed
