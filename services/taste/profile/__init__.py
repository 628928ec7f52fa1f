"""
services.taste.profile — persisted taste profiles and their update rules.

All profile writes go through TasteProfileService, which serializes updates per
user and saves with compare-and-set.

Usage:
    from services.taste.profile import InMemoryProfileStore, TasteProfileService

    service = TasteProfileService(InMemoryProfileStore())
    await service.initialize_from_clusters("user-123", ["dark-thrillers", "cult-indie"])
"""

from __future__ import annotations

from services.taste.profile.service import TasteProfileService
from services.taste.profile.store import InMemoryProfileStore, ProfileStore, RedisProfileStore
from services.taste.profile.types import TasteProfile, profile_from_record, profile_to_record
from services.taste.profile.updates import (
    apply_quiz_result,
    needs_recomputation,
    quiz_baseline,
    recompute_profile,
    record_interaction,
)

__all__ = [
    "TasteProfile",
    "TasteProfileService",
    "ProfileStore",
    "InMemoryProfileStore",
    "RedisProfileStore",
    "profile_to_record",
    "profile_from_record",
    "record_interaction",
    "recompute_profile",
    "apply_quiz_result",
    "quiz_baseline",
    "needs_recomputation",
]
