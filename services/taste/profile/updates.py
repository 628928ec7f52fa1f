"""
Pure profile transitions: snapshot in, snapshot out.

Nothing here touches storage. The service layer loads a snapshot, calls one
of these, and saves the result with compare-and-set, so the interaction log
append and the vector update always come from the same snapshot.

Recompute contract: the replay baseline is resolved from quiz data only
(stored quiz vector, else the quiz re-scored from seed + answers, else a
genre-default fallback built from the seed). ``profile.vector`` is never a
baseline, which keeps recompute idempotent.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from services.taste.clusters import compute_cluster_seed_vector
from services.taste.interactions.blender import (
    LEARNING_RATE,
    MAX_INTERACTIONS,
    append_to_log,
    apply_interaction,
    apply_interaction_confidence,
    genre_default_baseline,
    replay_confidence,
    replay_interactions,
)
from services.taste.interactions.types import Interaction
from services.taste.profile.types import TasteProfile
from services.taste.quiz.scoring import compute_quiz_confidence, compute_quiz_vector
from services.taste.quiz.session import QuizResult
from services.taste.vector.model import ConfidenceVector, TasteVector, genre_default_vector

logger = logging.getLogger(__name__)

RECOMPUTE_STALE_AFTER = timedelta(hours=24)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def new_profile_from_clusters(user_id: str, cluster_ids: Iterable[str], now: datetime) -> TasteProfile:
    cluster_ids = tuple(cluster_ids)
    seed = compute_cluster_seed_vector(cluster_ids)
    return TasteProfile(
        user_id=user_id,
        vector=seed,
        confidence=ConfidenceVector.zero(),
        last_updated=now,
        seed_vector=seed,
        cluster_ids=cluster_ids,
    )


def new_profile_from_genres(user_id: str, genres: Iterable[str], now: datetime) -> TasteProfile:
    seed = genre_default_vector(list(genres))
    return TasteProfile(
        user_id=user_id,
        vector=seed,
        confidence=ConfidenceVector.zero(),
        last_updated=now,
        seed_vector=seed,
    )


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------

def quiz_baseline(profile: TasteProfile) -> tuple[TasteVector, ConfidenceVector, str]:
    """
    Resolve the replay baseline for ``profile``.

    Returns:
        (vector, confidence, source) where source is one of
        'quiz', 'quiz_rescored' or 'genre_default'.
    """
    if profile.quiz_vector is not None:
        return (
            profile.quiz_vector,
            profile.quiz_confidence or ConfidenceVector.zero(),
            "quiz",
        )
    if profile.quiz_completed and profile.quiz_answers and profile.seed_vector is not None:
        vector = compute_quiz_vector(profile.seed_vector, profile.quiz_answers)
        confidence = compute_quiz_confidence(profile.quiz_answers)
        return vector, confidence, "quiz_rescored"
    return genre_default_baseline(profile.seed_vector), ConfidenceVector.zero(), "genre_default"


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def record_interaction(
    profile: TasteProfile,
    interaction: Interaction,
    learning_rate: float = LEARNING_RATE,
    max_interactions: int = MAX_INTERACTIONS,
) -> TasteProfile:
    """Incremental update: blend without recency, append to the capped log."""
    return dataclasses.replace(
        profile,
        vector=apply_interaction(profile.vector, interaction, learning_rate),
        confidence=apply_interaction_confidence(profile.confidence, interaction),
        interaction_log=append_to_log(profile.interaction_log, interaction, max_interactions),
        last_updated=interaction.timestamp,
    )


def recompute_profile(
    profile: TasteProfile,
    now: datetime,
    learning_rate: float = LEARNING_RATE,
) -> TasteProfile:
    """
    Rebuild vector and confidence from the baseline plus the full log, with recency.

    An empty log returns the profile untouched; the genre-default baseline
    must never replace a cluster or genre seed.
    """
    if not profile.interaction_log:
        return profile
    baseline, baseline_confidence, source = quiz_baseline(profile)
    vector = replay_interactions(baseline, profile.interaction_log, now, learning_rate)
    confidence = replay_confidence(baseline_confidence, profile.interaction_log)
    logger.info(
        "profile_updates: recompute user=%s baseline=%s interactions=%d",
        profile.user_id, source, len(profile.interaction_log),
    )
    return dataclasses.replace(profile, vector=vector, confidence=confidence, last_updated=now)


def apply_quiz_result(
    profile: TasteProfile,
    result: QuizResult,
    now: datetime,
    learning_rate: float = LEARNING_RATE,
) -> TasteProfile:
    """
    Install a (re)taken quiz as the new baseline.

    The existing interaction log is kept and replayed on top of the new
    quiz vector, so interaction history survives a retake.
    """
    updated = dataclasses.replace(
        profile,
        vector=result.vector,
        confidence=result.confidence,
        last_updated=now,
        seed_vector=result.seed_vector,
        quiz_vector=result.vector,
        quiz_confidence=result.confidence,
        cluster_ids=result.cluster_ids,
        quiz_completed=True,
        quiz_answers=result.answers,
    )
    return recompute_profile(updated, now, learning_rate)


def needs_recomputation(
    profile: TasteProfile,
    now: datetime,
    stale_after: timedelta = RECOMPUTE_STALE_AFTER,
) -> bool:
    """True when there is history to replay and the last update is older than ``stale_after``."""
    if not profile.interaction_log:
        return False
    last = profile.last_updated
    if last.tzinfo is None:
        last = last.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - last > stale_after
