"""
Quiz pair selection for the genre-responsive and adaptive phases.

Genre-responsive: score each pool pair by the user's top genres it triggers,
2 points for a genre the fixed pairs never test and 1 point for a genre they
already cover. Matching trigger clusters only break ties.

Adaptive: rank every dimension of the interim vector by ambiguity

    genre:  1 - |v - 0.5| * 2     (1.0 at 0.5, "we don't know")
    meta:   1 - |v|               (1.0 at 0.0, neutral)

take the top-K plus anything above a high-ambiguity threshold (capped), and
score each unused pair by how many ambiguous dimensions it tests, how many
dimensions it tests at all, and how far apart its two options sit on the
ambiguous ones.

Both phases then fill their quota greedily through three tiers:
  1. no shared content with already-asked or already-selected pairs
  2. content overlap allowed
  3. previously excluded pairs allowed back in
The selection itself never repeats a pair id. Running short never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass

from services.taste.quiz.pairs import (
    ADAPTIVE_PAIRS,
    ALL_PAIRS,
    GENRE_RESPONSIVE_PAIRS,
    covered_genres,
)
from services.taste.quiz.types import QuizPair
from services.taste.vector.dimensions import ALL_DIMENSIONS, GENRE_SET
from services.taste.vector.model import TasteVector

logger = logging.getLogger(__name__)

DEFAULT_GENRE_RESPONSIVE_COUNT = 2
DEFAULT_ADAPTIVE_COUNT = 5

UNCOVERED_GENRE_POINTS = 2
COVERED_GENRE_POINTS = 1


@dataclass(frozen=True)
class AdaptiveSelectionConfig:
    """Tuning knobs for adaptive pair selection."""

    ambiguous_top_k: int = 3
    high_ambiguity_threshold: float = 0.7
    max_ambiguous_dimensions: int = 6
    ambiguity_match_weight: float = 2.0
    breadth_bonus: float = 0.1
    separation_weight: float = 0.5


DEFAULT_ADAPTIVE_CONFIG = AdaptiveSelectionConfig()


# ---------------------------------------------------------------------------
# Shared greedy fill
# ---------------------------------------------------------------------------

def _fill_with_fallbacks(
    ranked: Sequence[QuizPair],
    reusable: Sequence[QuizPair],
    count: int,
    blocked_content: Iterable[str],
    phase_label: str,
) -> list[QuizPair]:
    selected: list[QuizPair] = []
    selected_ids: set[str] = set()
    taken = set(blocked_content)

    # Tier 1: overlap-free
    for pair in ranked:
        if len(selected) >= count:
            break
        if any(cid in taken for cid in pair.content_ids):
            continue
        selected.append(pair)
        selected_ids.add(pair.id)
        taken.update(pair.content_ids)

    # Tier 2: allow content overlap
    if len(selected) < count:
        logger.warning(
            "quiz_selection: %s relaxing overlap constraint selected=%d wanted=%d",
            phase_label, len(selected), count,
        )
        for pair in ranked:
            if len(selected) >= count:
                break
            if pair.id in selected_ids:
                continue
            selected.append(pair)
            selected_ids.add(pair.id)

    # Tier 3: allow previously excluded pairs back in
    if len(selected) < count and reusable:
        logger.warning(
            "quiz_selection: %s reusing excluded pairs selected=%d wanted=%d",
            phase_label, len(selected), count,
        )
        for pair in reusable:
            if len(selected) >= count:
                break
            if pair.id in selected_ids:
                continue
            selected.append(pair)
            selected_ids.add(pair.id)

    return selected


def _content_ids_of(pair_ids: Collection[str], pairs: Iterable[QuizPair]) -> set[str]:
    blocked: set[str] = set()
    for pair in pairs:
        if pair.id in pair_ids:
            blocked.update(pair.content_ids)
    return blocked


# ---------------------------------------------------------------------------
# Genre-responsive
# ---------------------------------------------------------------------------

def score_genre_responsive_pair(
    pair: QuizPair,
    top_genre_keys: Collection[str],
    covered: Collection[str],
) -> int:
    score = 0
    for genre in pair.trigger_genres:
        if genre not in top_genre_keys:
            continue
        score += COVERED_GENRE_POINTS if genre in covered else UNCOVERED_GENRE_POINTS
    return score


def select_genre_responsive_pairs(
    top_genre_keys: Sequence[str],
    exclude_pair_ids: Collection[str],
    cluster_ids: Collection[str] = (),
    count: int = DEFAULT_GENRE_RESPONSIVE_COUNT,
    pool: Sequence[QuizPair] = GENRE_RESPONSIVE_PAIRS,
) -> list[QuizPair]:
    """
    Pick ``count`` genre-responsive pairs for the user's top genres.

    Args:
        top_genre_keys: Genre keys derived from the cluster seed, strongest first.
        exclude_pair_ids: Pairs already asked (normally the fixed pairs). Their
            content is blocked in tier 1 and pool members among them only come
            back in tier 3.
        cluster_ids: Selected clusters; matching trigger clusters break score ties.
        count: Quota. The result is shorter only if the pool itself is.
        pool: Candidate pairs.
    """
    if count <= 0:
        return []

    top = set(top_genre_keys)
    covered = covered_genres()
    clusters = set(cluster_ids)
    excluded = set(exclude_pair_ids)

    def rank_key(pair: QuizPair) -> tuple[int, int]:
        cluster_hits = sum(1 for c in pair.trigger_clusters if c in clusters)
        return (-score_genre_responsive_pair(pair, top, covered), -cluster_hits)

    ranked = sorted((p for p in pool if p.id not in excluded), key=rank_key)
    reusable = sorted((p for p in pool if p.id in excluded), key=rank_key)
    blocked = _content_ids_of(excluded, (*ALL_PAIRS, *pool))

    selected = _fill_with_fallbacks(ranked, reusable, count, blocked, "genre-responsive")
    logger.info(
        "quiz_selection: genre-responsive top_genres=%s uncovered=%s selected=%s",
        list(top_genre_keys),
        sorted(g for g in top if g not in covered),
        [p.id for p in selected],
    )
    return selected


# ---------------------------------------------------------------------------
# Adaptive
# ---------------------------------------------------------------------------

def dimension_ambiguity(vector: TasteVector) -> dict[str, float]:
    """Ambiguity per dimension in canonical order; 1.0 means fully undecided."""
    ambiguity: dict[str, float] = {}
    for dim in ALL_DIMENSIONS:
        value = vector[dim]
        if dim in GENRE_SET:
            ambiguity[dim] = 1.0 - abs(value - 0.5) * 2.0
        else:
            ambiguity[dim] = 1.0 - abs(value)
    return ambiguity


def ambiguous_dimensions(
    vector: TasteVector,
    config: AdaptiveSelectionConfig = DEFAULT_ADAPTIVE_CONFIG,
) -> list[str]:
    """
    The dimensions adaptive pairs should target, most ambiguous first.

    Always the top ``ambiguous_top_k``; then every further dimension above
    ``high_ambiguity_threshold`` until ``max_ambiguous_dimensions`` is reached.
    """
    ambiguity = dimension_ambiguity(vector)
    # sorted() is stable, so ties keep canonical dimension order
    ranked = sorted(ambiguity, key=lambda d: -ambiguity[d])

    chosen = ranked[: config.ambiguous_top_k]
    for dim in ranked[config.ambiguous_top_k:]:
        if len(chosen) >= config.max_ambiguous_dimensions:
            break
        if ambiguity[dim] > config.high_ambiguity_threshold:
            chosen.append(dim)
    return chosen


def score_adaptive_pair(
    pair: QuizPair,
    ambiguous: Collection[str],
    config: AdaptiveSelectionConfig = DEFAULT_ADAPTIVE_CONFIG,
) -> float:
    score = 0.0
    for dim in pair.dimensions_tested:
        if dim not in ambiguous:
            continue
        score += config.ambiguity_match_weight
        # Separation only counts where both titles take a position
        if dim in pair.option_a.vector and dim in pair.option_b.vector:
            spread = abs(pair.option_a.vector[dim] - pair.option_b.vector[dim])
            score += spread * config.separation_weight
    score += len(pair.dimensions_tested) * config.breadth_bonus
    return score


def select_adaptive_pairs(
    interim_vector: TasteVector,
    used_pair_ids: Collection[str],
    count: int = DEFAULT_ADAPTIVE_COUNT,
    config: AdaptiveSelectionConfig = DEFAULT_ADAPTIVE_CONFIG,
    pool: Sequence[QuizPair] = ADAPTIVE_PAIRS,
) -> list[QuizPair]:
    """Pick ``count`` adaptive pairs that best resolve the interim vector's open dimensions."""
    if count <= 0:
        return []

    ambiguous = set(ambiguous_dimensions(interim_vector, config))
    used = set(used_pair_ids)

    def rank_key(pair: QuizPair) -> float:
        return -score_adaptive_pair(pair, ambiguous, config)

    ranked = sorted((p for p in pool if p.id not in used), key=rank_key)
    reusable = sorted((p for p in pool if p.id in used), key=rank_key)
    blocked = _content_ids_of(used, (*ALL_PAIRS, *pool))

    selected = _fill_with_fallbacks(ranked, reusable, count, blocked, "adaptive")
    logger.info(
        "quiz_selection: adaptive ambiguous=%s selected=%s",
        sorted(ambiguous),
        [p.id for p in selected],
    )
    return selected
