"""
Interaction blending — passive signals nudging a taste vector.

Each interaction blends the vector toward its content vector (positive
actions) or away from it (thumbs_down, removed):

    effective_weight = ACTION_WEIGHTS[action] * recency
    v = blend(v, content_vector, effective_weight, learning_rate)

Recency only applies when replaying a log. A freshly recorded interaction is
by definition recent, so the incremental path uses recency 1.0.

Replays are chronological (stable for equal timestamps) and always start from
a caller-supplied baseline. Never feed a replay's output back in as the
baseline of another replay over the same log: that applies every interaction
twice and the profile drifts further on each recompute.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone

from services.taste.interactions.types import Interaction, InteractionAction
from services.taste.vector.dimensions import ALL_DIMENSIONS, GENRE_DIMENSIONS, META_DIMENSIONS
from services.taste.vector.model import (
    ConfidenceVector,
    TasteVector,
    blend_vector,
    blend_vector_away,
    clamp_confidence,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

LEARNING_RATE = 0.05
MAX_INTERACTIONS = 500

ACTION_WEIGHTS: dict[InteractionAction, float] = {
    InteractionAction.THUMBS_UP: 1.0,
    InteractionAction.THUMBS_DOWN: 0.6,
    InteractionAction.WATCHLIST_ADD: 0.3,
    InteractionAction.WATCHED: 0.5,
    InteractionAction.REMOVED: 0.4,
}

INTERACTION_CONFIDENCE_GAINS: dict[InteractionAction, float] = {
    InteractionAction.THUMBS_UP: 0.05,
    InteractionAction.WATCHED: 0.04,
    InteractionAction.THUMBS_DOWN: 0.04,
    InteractionAction.WATCHLIST_ADD: 0.02,
    InteractionAction.REMOVED: 0.03,
}

# (max age in days, weight), checked in order
RECENCY_BANDS: tuple[tuple[float, float], ...] = (
    (7.0, 1.0),
    (30.0, 0.8),
    (90.0, 0.5),
)
RECENCY_FLOOR = 0.3

# Genre value given to every genre the seed expressed, when no quiz exists
GENRE_DEFAULT_BASELINE = 0.2


# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

def _aware(ts: datetime) -> datetime:
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=timezone.utc)


def recency_weight(timestamp: datetime, now: datetime) -> float:
    """1.0 within a week, 0.8 within a month, 0.5 within a quarter, else 0.3."""
    age_days = (_aware(now) - _aware(timestamp)).total_seconds() / 86400.0
    for max_days, weight in RECENCY_BANDS:
        if age_days <= max_days:
            return weight
    return RECENCY_FLOOR


def effective_weight(interaction: Interaction, recency: float = 1.0) -> float:
    return ACTION_WEIGHTS[interaction.action] * recency


# ---------------------------------------------------------------------------
# Vector updates
# ---------------------------------------------------------------------------

def apply_interaction(
    vector: TasteVector,
    interaction: Interaction,
    learning_rate: float = LEARNING_RATE,
    recency: float = 1.0,
) -> TasteVector:
    """Blend one interaction into ``vector``."""
    weight = effective_weight(interaction, recency)
    if interaction.is_negative:
        return blend_vector_away(vector, interaction.content_vector, weight, learning_rate)
    return blend_vector(vector, interaction.content_vector, weight, learning_rate)


def chronological(log: Sequence[Interaction]) -> list[Interaction]:
    # sorted() is stable: equal timestamps keep log order
    return sorted(log, key=lambda i: _aware(i.timestamp))


def replay_interactions(
    baseline: TasteVector,
    log: Sequence[Interaction],
    now: datetime,
    learning_rate: float = LEARNING_RATE,
    use_recency: bool = True,
    diminishing_returns: bool = False,
) -> TasteVector:
    """
    Rebuild a vector by replaying ``log`` on top of ``baseline``.

    Args:
        baseline: The quiz baseline (or genre-default fallback). Never a vector
            that already has this log applied.
        log: Interactions in any order; replayed oldest first.
        now: Reference time for recency weighting.
        use_recency: False reproduces the incremental path exactly.
        diminishing_returns: Scale the n-th interaction of a given action by
            1 / (1 + log2(n)), damping long runs of the same signal.
    """
    vector = baseline
    seen: Counter[InteractionAction] = Counter()
    for interaction in chronological(log):
        recency = recency_weight(interaction.timestamp, now) if use_recency else 1.0
        if diminishing_returns:
            seen[interaction.action] += 1
            recency *= 1.0 / (1.0 + math.log2(seen[interaction.action]))
        vector = apply_interaction(vector, interaction, learning_rate, recency)
    return vector


def append_to_log(
    log: Sequence[Interaction],
    interaction: Interaction,
    cap: int = MAX_INTERACTIONS,
) -> tuple[Interaction, ...]:
    """Append and drop the oldest entries beyond ``cap``."""
    updated = (*log, interaction)
    if len(updated) > cap:
        dropped = len(updated) - cap
        logger.debug("interaction_blender: log at cap=%d, dropping %d oldest", cap, dropped)
        updated = updated[dropped:]
    return updated


def genre_default_baseline(seed: TasteVector | None) -> TasteVector:
    """Fallback replay baseline: 0.2 on every genre the seed sets, all else neutral."""
    genres = {g: 0.0 for g in GENRE_DIMENSIONS}
    if seed is not None:
        for g in GENRE_DIMENSIONS:
            if seed.genres[g] > 0.0:
                genres[g] = GENRE_DEFAULT_BASELINE
    return TasteVector(genres=genres, meta={m: 0.0 for m in META_DIMENSIONS})


# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------

def apply_interaction_confidence(
    confidence: ConfidenceVector,
    interaction: Interaction,
) -> ConfidenceVector:
    """Add the action's gain to every dimension the content vector sets."""
    gain = INTERACTION_CONFIDENCE_GAINS[interaction.action]
    values = confidence.to_dict()
    for dim in ALL_DIMENSIONS:
        if interaction.content_vector[dim] != 0.0:
            values[dim] = min(1.0, values[dim] + gain)
    return clamp_confidence(values)


def replay_confidence(
    baseline: ConfidenceVector,
    log: Sequence[Interaction],
) -> ConfidenceVector:
    confidence = baseline
    for interaction in chronological(log):
        confidence = apply_interaction_confidence(confidence, interaction)
    return confidence
