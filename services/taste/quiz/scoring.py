"""
Quiz scoring — turns answered pairs into a taste vector and a confidence vector.

Per-answer delta on the pair's tested dimensions only:

  A / B     (chosen - unchosen) * 0.3, negative results damped by 0.6
  both      0.3 * a + 0.3 * b              (two winner passes, no loser side)
  neither   -0.15 per option that sets a tested genre; meta untouched
  skip      nothing

Each delta is multiplied by its phase weight (fixed 1.0, genre-responsive 1.0,
adaptive 0.7) and accumulated onto the running vector.

Meta dimensions are cap-aware: near the +/-1 bound the step is scaled by

    scale = max(0, min(1, headroom / 0.5, headroom / |delta|))

so values approach the edge instead of slamming into it. Genre dimensions are
simply saturated into [0, 1] after each answer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from services.taste.errors import UnknownPairError
from services.taste.quiz.pairs import ALL_PAIRS
from services.taste.quiz.types import QuizAnswer, QuizChoice, QuizPair, QuizPhase
from services.taste.vector.dimensions import (
    GENRE_DIMENSIONS,
    GENRE_LABELS,
    GENRE_SET,
    META_DIMENSIONS,
)
from services.taste.vector.model import (
    ConfidenceVector,
    TasteVector,
    clamp_confidence,
    clamp_vector,
    top_genres,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PHASE_WEIGHTS: dict[QuizPhase, float] = {
    QuizPhase.FIXED: 1.0,
    QuizPhase.GENRE_RESPONSIVE: 1.0,
    QuizPhase.ADAPTIVE: 0.7,
}

# Step size toward the chosen option's position
ANSWER_STEP = 0.3

# Picking Dark Knight over Mamma Mia! says less about disliking musicals
# than it says about liking action.
NEGATIVE_DAMPING = 0.6

NEITHER_PENALTY = 0.15

# Distance from a meta bound at which cap-aware scaling starts
CAP_AWARE_THRESHOLD = 0.5

QUIZ_CONFIDENCE_GAINS: dict[QuizChoice, float] = {
    QuizChoice.A: 0.20,
    QuizChoice.B: 0.20,
    QuizChoice.BOTH: 0.10,
    QuizChoice.NEITHER: 0.05,
    QuizChoice.SKIP: 0.0,
}


# ---------------------------------------------------------------------------
# Per-answer delta
# ---------------------------------------------------------------------------

def compute_answer_delta(pair: QuizPair, choice: QuizChoice) -> dict[str, float]:
    """Raw (unweighted) delta for one answer. Only tested dimensions appear."""
    delta: dict[str, float] = {}
    a = pair.option_a
    b = pair.option_b

    if choice is QuizChoice.SKIP:
        return delta

    if choice is QuizChoice.BOTH:
        for dim in pair.dimensions_tested:
            delta[dim] = a.value(dim) * ANSWER_STEP + b.value(dim) * ANSWER_STEP
        return delta

    if choice is QuizChoice.NEITHER:
        for dim in pair.dimensions_tested:
            if dim not in GENRE_SET:
                continue
            penalty = 0.0
            if a.value(dim) > 0:
                penalty -= NEITHER_PENALTY
            if b.value(dim) > 0:
                penalty -= NEITHER_PENALTY
            if penalty:
                delta[dim] = penalty
        return delta

    chosen, unchosen = (a, b) if choice is QuizChoice.A else (b, a)
    for dim in pair.dimensions_tested:
        raw = (chosen.value(dim) - unchosen.value(dim)) * ANSWER_STEP
        if raw < 0:
            raw *= NEGATIVE_DAMPING
        delta[dim] = raw
    return delta


def cap_aware_scale(current: float, delta: float, threshold: float = CAP_AWARE_THRESHOLD) -> float:
    """Scale factor in [0, 1] for a meta step of ``delta`` from ``current``."""
    if delta == 0.0:
        return 1.0
    headroom = 1.0 - current if delta > 0 else current + 1.0
    return max(0.0, min(1.0, headroom / threshold, headroom / abs(delta)))


# ---------------------------------------------------------------------------
# Accumulation
# ---------------------------------------------------------------------------

def _pair_lookup(pairs: Iterable[QuizPair] | Mapping[str, QuizPair] | None) -> Mapping[str, QuizPair]:
    if pairs is None:
        pairs = ALL_PAIRS
    if isinstance(pairs, Mapping):
        return pairs
    return {p.id: p for p in pairs}


def _resolve(answer: QuizAnswer, lookup: Mapping[str, QuizPair]) -> QuizPair:
    pair = lookup.get(answer.pair_id)
    if pair is None:
        raise UnknownPairError(f"answer references unknown pair {answer.pair_id!r}")
    return pair


def compute_quiz_vector(
    base_vector: TasteVector,
    answers: Sequence[QuizAnswer],
    pairs: Iterable[QuizPair] | Mapping[str, QuizPair] | None = None,
) -> TasteVector:
    """
    Fold quiz answers onto ``base_vector``.

    Args:
        base_vector: Starting point, normally the cluster seed.
        answers: Answers in the order they were given.
        pairs: Pairs the answers refer to; defaults to the full catalogue.

    Raises:
        UnknownPairError: an answer references a pair not in ``pairs``. Nothing
            is applied in that case.
    """
    lookup = _pair_lookup(pairs)
    resolved = [(answer, _resolve(answer, lookup)) for answer in answers]

    genres = dict(base_vector.genres)
    meta = dict(base_vector.meta)

    for answer, pair in resolved:
        delta = compute_answer_delta(pair, answer.choice)
        if not delta:
            continue
        weight = PHASE_WEIGHTS[answer.phase]

        for dim, raw in delta.items():
            step = raw * weight
            if dim in GENRE_SET:
                genres[dim] = max(0.0, min(1.0, genres[dim] + step))
            else:
                scale = cap_aware_scale(meta[dim], step)
                if scale < 1.0:
                    logger.debug(
                        "quiz_scoring: cap-aware %s current=%.3f step=%.3f scale=%.3f",
                        dim, meta[dim], step, scale,
                    )
                meta[dim] += step * scale

        logger.debug(
            "quiz_scoring: pair=%s choice=%s phase=%s delta=%s",
            pair.id, answer.choice.value, answer.phase.value,
            {d: round(v * weight, 3) for d, v in delta.items()},
        )

    final = clamp_vector({**genres, **meta})
    logger.info(
        "quiz_scoring: scored answers=%d top_genres=%s",
        len(resolved), top_genres(final, 3),
    )
    return final


def compute_quiz_confidence(
    answers: Sequence[QuizAnswer],
    pairs: Iterable[QuizPair] | Mapping[str, QuizPair] | None = None,
) -> ConfidenceVector:
    """Evidence per dimension: each answer adds its choice's gain to every tested dimension, capped at 1."""
    lookup = _pair_lookup(pairs)
    confidence: dict[str, float] = {}
    for answer in answers:
        pair = _resolve(answer, lookup)
        gain = QUIZ_CONFIDENCE_GAINS[answer.choice]
        if gain == 0.0:
            continue
        for dim in pair.dimensions_tested:
            confidence[dim] = min(1.0, confidence.get(dim, 0.0) + gain)
    return clamp_confidence(confidence)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def most_ambiguous_dimensions(vector: TasteVector, count: int = 3) -> list[str]:
    """Genre dims closest to 0.5 and meta dims closest to 0, most ambiguous first."""
    closeness = {g: abs(vector.genres[g] - 0.5) * 2.0 for g in GENRE_DIMENSIONS}
    closeness.update({m: abs(vector.meta[m]) for m in META_DIMENSIONS})
    return sorted(closeness, key=lambda d: closeness[d])[:count]


def top_genre_names(vector: TasteVector, count: int = 3) -> list[str]:
    """Display names of the strongest genres, e.g. ['Action', 'Sci-Fi']."""
    return [GENRE_LABELS[g] for g in top_genres(vector, count)]
