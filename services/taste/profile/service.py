"""
TasteProfileService — async read-modify-write over a ProfileStore.

Every mutation for a user runs under that user's asyncio.Lock: load one
snapshot, apply one pure transition from profile.updates, save with the
loaded revision. Two concurrent interactions for the same user therefore
serialize instead of each appending to a stale log. Across processes the
store's compare-and-set catches what the lock cannot.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from services.taste.errors import ProfileNotFoundError, TasteEngineError
from services.taste.interactions.blender import LEARNING_RATE, MAX_INTERACTIONS
from services.taste.interactions.content_mapping import ContentMetadata, content_to_vector
from services.taste.interactions.types import Interaction, InteractionAction
from services.taste.profile import updates
from services.taste.profile.store import ProfileStore
from services.taste.profile.types import TasteProfile
from services.taste.quiz.session import QuizResult
from services.taste.vector.model import TasteVector

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TasteProfileService:
    def __init__(
        self,
        store: ProfileStore,
        learning_rate: float = LEARNING_RATE,
        max_interactions: int = MAX_INTERACTIONS,
        stale_after: timedelta = updates.RECOMPUTE_STALE_AFTER,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._learning_rate = learning_rate
        self._max_interactions = max_interactions
        self._stale_after = stale_after
        self._clock = clock
        # entries vanish once no coroutine holds or awaits the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    async def _load(self, user_id: str) -> TasteProfile:
        profile = await self._store.get(user_id)
        if profile is None:
            raise ProfileNotFoundError(f"no taste profile for user {user_id}")
        return profile

    async def _save(self, profile: TasteProfile, loaded: TasteProfile | None) -> TasteProfile:
        expected = loaded.revision if loaded is not None else None
        return await self._store.save(profile, expected_revision=expected)

    # -- reads ------------------------------------------------------------

    async def get_profile(self, user_id: str) -> TasteProfile:
        return await self._load(user_id)

    # -- creation ---------------------------------------------------------

    async def initialize_from_clusters(self, user_id: str, cluster_ids: Iterable[str]) -> TasteProfile:
        """Create a cluster-seeded profile. An existing profile is returned untouched."""
        async with self._lock(user_id):
            existing = await self._store.get(user_id)
            if existing is not None:
                return existing
            profile = updates.new_profile_from_clusters(user_id, cluster_ids, self._clock())
            saved = await self._save(profile, None)
            logger.info("profile_service: initialized user=%s clusters=%s", user_id, list(saved.cluster_ids))
            return saved

    async def initialize_from_genres(self, user_id: str, genres: Iterable[str]) -> TasteProfile:
        """Create a genre-default profile. An existing profile is returned untouched."""
        async with self._lock(user_id):
            existing = await self._store.get(user_id)
            if existing is not None:
                return existing
            profile = updates.new_profile_from_genres(user_id, genres, self._clock())
            saved = await self._save(profile, None)
            logger.info("profile_service: initialized user=%s from genres", user_id)
            return saved

    # -- updates ----------------------------------------------------------

    async def save_quiz_results(self, user_id: str, result: QuizResult) -> TasteProfile:
        """Install quiz results as the baseline, creating the profile if needed."""
        async with self._lock(user_id):
            now = self._clock()
            loaded = await self._store.get(user_id)
            base = loaded or updates.new_profile_from_clusters(user_id, result.cluster_ids, now)
            profile = updates.apply_quiz_result(base, result, now, self._learning_rate)
            saved = await self._save(profile, loaded)
            logger.info(
                "profile_service: quiz saved user=%s answers=%d replayed=%d",
                user_id, len(result.answers), len(saved.interaction_log),
            )
            return saved

    async def record_interaction(
        self,
        user_id: str,
        content_id: int,
        content_type: str,
        action: InteractionAction | str,
        metadata: ContentMetadata | None = None,
        content_vector: TasteVector | None = None,
    ) -> TasteProfile:
        """
        Blend one interaction into the user's profile.

        Exactly one of ``metadata`` (mapped through content_to_vector) or a
        precomputed ``content_vector`` must be given.
        """
        if (metadata is None) == (content_vector is None):
            raise TasteEngineError("pass exactly one of metadata or content_vector")
        vector = content_vector if content_vector is not None else content_to_vector(metadata)

        async with self._lock(user_id):
            loaded = await self._load(user_id)
            interaction = Interaction(
                content_id=content_id,
                content_type=content_type,
                action=InteractionAction(action),
                timestamp=self._clock(),
                content_vector=vector,
            )
            profile = updates.record_interaction(
                loaded, interaction, self._learning_rate, self._max_interactions
            )
            saved = await self._save(profile, loaded)
            logger.debug(
                "profile_service: interaction user=%s content=%s action=%s log=%d",
                user_id, content_id, interaction.action.value, len(saved.interaction_log),
            )
            return saved

    async def recompute(self, user_id: str) -> TasteProfile:
        async with self._lock(user_id):
            loaded = await self._load(user_id)
            profile = updates.recompute_profile(loaded, self._clock(), self._learning_rate)
            return await self._save(profile, loaded)

    async def recompute_if_stale(self, user_id: str) -> tuple[TasteProfile, bool]:
        """Recompute when the profile is older than the stale window. Returns (profile, recomputed)."""
        async with self._lock(user_id):
            loaded = await self._load(user_id)
            now = self._clock()
            if not updates.needs_recomputation(loaded, now, self._stale_after):
                return loaded, False
            profile = updates.recompute_profile(loaded, now, self._learning_rate)
            return await self._save(profile, loaded), True

    async def clear(self, user_id: str) -> None:
        async with self._lock(user_id):
            await self._store.clear(user_id)
            logger.info("profile_service: cleared user=%s", user_id)
