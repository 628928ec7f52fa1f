"""
Ranking — order candidate titles by similarity to a user's taste vector.

Scores are similarity_percent() values (0-100, 50 = orthogonal). When the
profile's confidence is passed, low-evidence dimensions count for less.

Cluster diagnostics (cluster_similarities, cluster_differentiation) are for
tuning the cluster catalogue: two clusters whose seeds sit too close together
give the quiz nothing to separate.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from services.taste.clusters import TASTE_CLUSTERS
from services.taste.vector.dimensions import DIMENSION_WEIGHTS, GENRE_DIMENSIONS, GENRE_LABELS
from services.taste.vector.model import (
    ConfidenceVector,
    TasteVector,
    clamp_vector,
    cosine_similarity,
    similarity_percent,
)

GREAT_MATCH_THRESHOLD = 80
GOOD_MATCH_THRESHOLD = 60


@dataclass(frozen=True)
class Candidate:
    content_id: str
    vector: TasteVector


@dataclass(frozen=True)
class ScoredCandidate:
    content_id: str
    score: int
    reason: str


def _shared_genre(user: TasteVector, content: TasteVector) -> str | None:
    """The content genre the user likes most, or None if they share none."""
    best: str | None = None
    best_weight = 0.0
    for genre in GENRE_DIMENSIONS:
        weight = user.genres[genre] * content.genres[genre]
        if weight > best_weight:
            best, best_weight = genre, weight
    return best


def match_reason(score: int, user: TasteVector, content: TasteVector) -> str:
    genre = _shared_genre(user, content)
    label = GENRE_LABELS[genre] if genre else None
    if score >= GREAT_MATCH_THRESHOLD:
        return f"Great match for your taste in {label}" if label else "Great match for your taste"
    if score >= GOOD_MATCH_THRESHOLD:
        return f"Matches your {label} preferences" if label else "Matches your preferences"
    return "Popular pick"


def rank_candidates(
    vector: TasteVector,
    candidates: Iterable[Candidate],
    confidence: ConfidenceVector | None = None,
    limit: int | None = None,
) -> list[ScoredCandidate]:
    """
    Score and sort candidates, best first.

    Equal scores keep their input order. ``limit`` truncates after sorting.
    """
    scored = []
    for candidate in candidates:
        score = similarity_percent(vector, candidate.vector, confidence=confidence)
        scored.append(
            ScoredCandidate(
                content_id=candidate.content_id,
                score=score,
                reason=match_reason(score, vector, candidate.vector),
            )
        )
    scored.sort(key=lambda s: -s.score)
    return scored[:limit] if limit is not None else scored


# ---------------------------------------------------------------------------
# Cluster diagnostics
# ---------------------------------------------------------------------------

def cluster_similarities(vector: TasteVector) -> dict[str, float]:
    """Weighted cosine between ``vector`` and every cluster seed, keyed by cluster id."""
    return {
        cluster.id: cosine_similarity(vector, clamp_vector(cluster.vector), DIMENSION_WEIGHTS)
        for cluster in TASTE_CLUSTERS
    }


def cluster_differentiation() -> tuple[list[str], np.ndarray]:
    """
    Pairwise weighted cosine between all cluster seeds.

    Returns:
        (cluster_ids, matrix) where matrix[i, j] is the similarity of
        cluster_ids[i] and cluster_ids[j]. The diagonal is 1.0.
    """
    ids = [c.id for c in TASTE_CLUSTERS]
    seeds = [clamp_vector(c.vector) for c in TASTE_CLUSTERS]
    size = len(seeds)
    matrix = np.eye(size, dtype=np.float64)
    for i in range(size):
        for j in range(i + 1, size):
            sim = cosine_similarity(seeds[i], seeds[j], DIMENSION_WEIGHTS)
            matrix[i, j] = matrix[j, i] = sim
    return ids, matrix
