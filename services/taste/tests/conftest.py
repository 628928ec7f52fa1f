"""
Shared test fixtures for the taste engine test suite.

Provides:
- FakeRedis: dict-backed stand-in for redis.asyncio with WATCH/MULTI/EXEC
- fixed clock and profile stores / service
- async FastAPI test client (no Redis needed)
- small factories for vectors, interactions and profiles
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from redis.exceptions import WatchError

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from services.taste.interactions.types import Interaction, InteractionAction  # noqa: E402
from services.taste.profile.service import TasteProfileService  # noqa: E402
from services.taste.profile.store import InMemoryProfileStore, RedisProfileStore  # noqa: E402
from services.taste.vector.model import TasteVector, clamp_vector  # noqa: E402

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fake Redis
# ---------------------------------------------------------------------------

class FakePipeline:
    def __init__(self, redis: "FakeRedis") -> None:
        self._redis = redis
        self._watched: dict[str, int] = {}
        self._queued: list[tuple[str, str]] = []
        self._multi = False

    async def __aenter__(self) -> "FakePipeline":
        return self

    async def __aexit__(self, *exc) -> None:
        self._watched.clear()
        self._queued.clear()

    async def watch(self, *keys: str) -> None:
        for key in keys:
            self._watched[key] = self._redis.versions.get(key, 0)

    async def unwatch(self) -> None:
        self._watched.clear()

    async def get(self, key: str) -> str | None:
        return self._redis.data.get(key)

    def multi(self) -> None:
        self._multi = True

    def set(self, key: str, value: str) -> "FakePipeline":
        self._queued.append((key, value))
        return self

    async def execute(self) -> list[bool]:
        if self._redis.before_execute is not None:
            hook, self._redis.before_execute = self._redis.before_execute, None
            await hook()
        for key, version in self._watched.items():
            if self._redis.versions.get(key, 0) != version:
                self._queued.clear()
                raise WatchError(f"watched key {key} changed")
        for key, value in self._queued:
            await self._redis.set(key, value)
        results = [True] * len(self._queued)
        self._queued.clear()
        self._watched.clear()
        return results


class FakeRedis:
    """In-memory async Redis covering the commands the profile store uses."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.versions: dict[str, int] = {}
        self.before_execute = None

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        self.versions[key] = self.versions.get(key, 0) + 1
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.versions[key] = self.versions.get(key, 0) + 1
                removed += 1
        return removed

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def aclose(self) -> None:
        return None


@pytest.fixture
def fake_redis():
    return FakeRedis()


# ---------------------------------------------------------------------------
# Clock, stores, service
# ---------------------------------------------------------------------------

class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def memory_store():
    return InMemoryProfileStore()


@pytest.fixture
def redis_store(fake_redis):
    return RedisProfileStore(fake_redis)


@pytest.fixture
def service(memory_store, clock):
    return TasteProfileService(memory_store, clock=clock)


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
async def app(clock):
    """Test app with an in-memory profile store and a fixed clock."""
    from services.taste.config import settings
    from services.taste.main import app as _app

    _app.state.redis = None
    _app.state.settings = settings
    _app.state.profile_service = TasteProfileService(InMemoryProfileStore(), clock=clock)
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_vector(**values: float) -> TasteVector:
    """Partial vector, unspecified dimensions 0."""
    return clamp_vector(values)


def make_interaction(
    action: InteractionAction | str = InteractionAction.THUMBS_UP,
    /,
    timestamp: datetime = NOW,
    content_id: int = 27205,
    **vector: float,
) -> Interaction:
    return Interaction(
        content_id=content_id,
        content_type="movie",
        action=InteractionAction(action),
        timestamp=timestamp,
        content_vector=make_vector(**(vector or {"scifi": 1.0, "intensity": 0.6})),
    )


def make_profile_record(**overrides: Any) -> dict:
    """Minimal stored record in the current 24-wide layout."""
    base = {
        "userId": "user-1",
        "vector": [0.0] * 24,
        "confidence": [0.0] * 24,
        "seedVector": None,
        "quizVector": None,
        "quizConfidence": None,
        "clusterIds": [],
        "quizCompleted": False,
        "quizAnswers": [],
        "interactionLog": [],
        "lastUpdated": NOW.isoformat(),
        "revision": 1,
        "version": 2,
    }
    base.update(overrides)
    return base
