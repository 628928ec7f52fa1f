"""
Profile persistence.

Two ProfileStore implementations behind one async protocol:

  InMemoryProfileStore  dict-backed, used for local dev and when Redis is down
  RedisProfileStore     one JSON string per user

Key format:  taste_profile:{user_id}

save() is compare-and-set on ``revision``: the caller passes the revision it
loaded (None for a brand-new profile) and gets StaleProfileError if anyone
else saved in between. The Redis store does this with WATCH/MULTI/EXEC, using
only standard Redis commands (GET, SET, DEL).
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Protocol

from redis.exceptions import WatchError

from services.taste.errors import StaleProfileError
from services.taste.profile.types import TasteProfile, profile_from_record, profile_to_record

logger = logging.getLogger(__name__)


class ProfileStore(Protocol):
    async def get(self, user_id: str) -> TasteProfile | None: ...

    async def save(self, profile: TasteProfile, expected_revision: int | None) -> TasteProfile: ...

    async def clear(self, user_id: str) -> None: ...


def _check_revision(user_id: str, current: int | None, expected: int | None) -> None:
    if current != expected:
        raise StaleProfileError(
            f"profile {user_id} is at revision {current}, expected {expected}"
        )


def _next_revision(profile: TasteProfile, current: int | None) -> TasteProfile:
    return dataclasses.replace(profile, revision=(current or 0) + 1)


class InMemoryProfileStore:
    """Process-local store. Not shared between workers."""

    def __init__(self) -> None:
        self._profiles: dict[str, TasteProfile] = {}

    async def get(self, user_id: str) -> TasteProfile | None:
        return self._profiles.get(user_id)

    async def save(self, profile: TasteProfile, expected_revision: int | None) -> TasteProfile:
        existing = self._profiles.get(profile.user_id)
        current = existing.revision if existing else None
        _check_revision(profile.user_id, current, expected_revision)
        saved = _next_revision(profile, current)
        self._profiles[profile.user_id] = saved
        return saved

    async def clear(self, user_id: str) -> None:
        self._profiles.pop(user_id, None)


class RedisProfileStore:
    """Redis-backed store. ``redis`` is a redis.asyncio client (decode_responses=True)."""

    def __init__(self, redis: Any, key_prefix: str = "taste_profile") -> None:
        self._redis = redis
        self._key_prefix = key_prefix

    def _redis_key(self, user_id: str) -> str:
        return f"{self._key_prefix}:{user_id}"

    @staticmethod
    def _decode(raw: str | bytes | None) -> TasteProfile | None:
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode()
        return profile_from_record(json.loads(raw))

    async def get(self, user_id: str) -> TasteProfile | None:
        raw = await self._redis.get(self._redis_key(user_id))
        return self._decode(raw)

    async def save(self, profile: TasteProfile, expected_revision: int | None) -> TasteProfile:
        key = self._redis_key(profile.user_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            await pipe.watch(key)
            existing = self._decode(await pipe.get(key))
            current = existing.revision if existing else None
            if current != expected_revision:
                await pipe.unwatch()
                _check_revision(profile.user_id, current, expected_revision)

            saved = _next_revision(profile, current)
            pipe.multi()
            pipe.set(key, json.dumps(profile_to_record(saved)))
            try:
                await pipe.execute()
            except WatchError:
                raise StaleProfileError(
                    f"profile {profile.user_id} changed during save"
                ) from None

        logger.debug("profile_store: saved user=%s revision=%d", profile.user_id, saved.revision)
        return saved

    async def clear(self, user_id: str) -> None:
        await self._redis.delete(self._redis_key(user_id))
