"""
QuizSession — drives one user through the three quiz phases.

    fixed -> genre-responsive -> (interim score) -> adaptive -> (final score) -> complete

Pairs for the next phase are chosen only once the current phase is fully
answered: genre-responsive pairs from the cluster seed's top genres, adaptive
pairs from the interim vector (seed + fixed + genre-responsive answers).
A phase whose selection comes back empty is passed straight through.

Scoring only happens at phase boundaries. A session that is abandoned part
way never produces a vector, so nothing half-scored can reach a profile.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from services.taste.clusters import compute_cluster_seed_vector, top_genre_keys_from_clusters
from services.taste.errors import QuizSessionError
from services.taste.quiz.pairs import get_fixed_pairs, get_pair
from services.taste.quiz.scoring import compute_quiz_confidence, compute_quiz_vector
from services.taste.quiz.selection import (
    DEFAULT_ADAPTIVE_CONFIG,
    DEFAULT_ADAPTIVE_COUNT,
    DEFAULT_GENRE_RESPONSIVE_COUNT,
    AdaptiveSelectionConfig,
    select_adaptive_pairs,
    select_genre_responsive_pairs,
)
from services.taste.quiz.types import QuizAnswer, QuizChoice, QuizPair, QuizPhase
from services.taste.vector.model import ConfidenceVector, TasteVector

logger = logging.getLogger(__name__)

TOP_GENRE_COUNT = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class QuizResult:
    """Everything a completed quiz produced."""

    cluster_ids: tuple[str, ...]
    seed_vector: TasteVector
    interim_vector: TasteVector
    vector: TasteVector
    confidence: ConfidenceVector
    answers: tuple[QuizAnswer, ...]
    pairs: tuple[QuizPair, ...]


class QuizSession:
    """Stateful, single-user quiz walker. Not shared across users."""

    def __init__(
        self,
        cluster_ids: Iterable[str],
        genre_responsive_count: int = DEFAULT_GENRE_RESPONSIVE_COUNT,
        adaptive_count: int = DEFAULT_ADAPTIVE_COUNT,
        adaptive_config: AdaptiveSelectionConfig = DEFAULT_ADAPTIVE_CONFIG,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.cluster_ids = tuple(cluster_ids)
        self.seed_vector = compute_cluster_seed_vector(self.cluster_ids)
        self.interim_vector: TasteVector | None = None

        self._genre_responsive_count = genre_responsive_count
        self._adaptive_count = adaptive_count
        self._adaptive_config = adaptive_config
        self._clock = clock

        self._answers: list[QuizAnswer] = []
        self._asked: list[QuizPair] = []
        self._pending: list[QuizPair] = []
        self._phase: QuizPhase | None = None
        self._result: QuizResult | None = None

        self._enter(QuizPhase.FIXED, get_fixed_pairs())

    # -- state ------------------------------------------------------------

    @property
    def phase(self) -> QuizPhase | None:
        """Current phase, or None once the quiz is complete."""
        return self._phase

    @property
    def is_complete(self) -> bool:
        return self._result is not None

    @property
    def pending_pairs(self) -> list[QuizPair]:
        """Unanswered pairs of the current phase, in presentation order."""
        return list(self._pending)

    @property
    def answers(self) -> list[QuizAnswer]:
        return list(self._answers)

    def next_pair(self) -> QuizPair | None:
        return self._pending[0] if self._pending else None

    # -- transitions ------------------------------------------------------

    def answer(self, pair_id: str, choice: QuizChoice | str) -> None:
        """Record an answer for a pair of the current phase."""
        if self._phase is None:
            raise QuizSessionError("quiz is already complete")
        pair = next((p for p in self._pending if p.id == pair_id), None)
        if pair is None:
            raise QuizSessionError(
                f"pair {pair_id!r} is not pending in phase {self._phase.value}"
            )

        self._answers.append(
            QuizAnswer(
                pair_id=pair.id,
                choice=QuizChoice(choice),
                phase=self._phase,
                timestamp=self._clock(),
            )
        )
        self._pending.remove(pair)
        if not self._pending:
            self._advance()

    def result(self) -> QuizResult:
        if self._result is None:
            raise QuizSessionError(
                f"quiz not complete (phase={self._phase.value if self._phase else None})"
            )
        return self._result

    def _enter(self, phase: QuizPhase, pairs: list[QuizPair]) -> None:
        self._phase = phase
        self._pending = list(pairs)
        self._asked.extend(pairs)
        logger.info(
            "quiz_session: entering phase=%s pairs=%s",
            phase.value, [p.id for p in pairs],
        )
        if not self._pending:
            self._advance()

    def _advance(self) -> None:
        if self._phase is QuizPhase.FIXED:
            top_genres = top_genre_keys_from_clusters(self.cluster_ids, TOP_GENRE_COUNT)
            pairs = select_genre_responsive_pairs(
                top_genres,
                exclude_pair_ids=[p.id for p in self._asked],
                cluster_ids=self.cluster_ids,
                count=self._genre_responsive_count,
            )
            self._enter(QuizPhase.GENRE_RESPONSIVE, pairs)

        elif self._phase is QuizPhase.GENRE_RESPONSIVE:
            self.interim_vector = compute_quiz_vector(self.seed_vector, self._answers, self._asked)
            pairs = select_adaptive_pairs(
                self.interim_vector,
                used_pair_ids=[p.id for p in self._asked],
                count=self._adaptive_count,
                config=self._adaptive_config,
            )
            self._enter(QuizPhase.ADAPTIVE, pairs)

        elif self._phase is QuizPhase.ADAPTIVE:
            self._finish()

    def _finish(self) -> None:
        vector = compute_quiz_vector(self.seed_vector, self._answers, self._asked)
        confidence = compute_quiz_confidence(self._answers, self._asked)
        self._result = QuizResult(
            cluster_ids=self.cluster_ids,
            seed_vector=self.seed_vector,
            interim_vector=self.interim_vector or self.seed_vector,
            vector=vector,
            confidence=confidence,
            answers=tuple(self._answers),
            pairs=tuple(self._asked),
        )
        self._phase = None
        logger.info("quiz_session: complete answers=%d", len(self._answers))


def result_from_answers(cluster_ids: Iterable[str], answers: Iterable[QuizAnswer]) -> QuizResult:
    """
    Score a quiz taken elsewhere (e.g. by a stateless client).

    Answers are trusted as given: phase comes from each answer and pairs are
    looked up in the full catalogue.

    Raises:
        UnknownClusterError, UnknownPairError
    """
    cluster_ids = tuple(cluster_ids)
    answers = tuple(answers)
    seed = compute_cluster_seed_vector(cluster_ids)
    pairs = tuple(get_pair(a.pair_id) for a in answers)
    early = [a for a in answers if a.phase is not QuizPhase.ADAPTIVE]
    return QuizResult(
        cluster_ids=cluster_ids,
        seed_vector=seed,
        interim_vector=compute_quiz_vector(seed, early),
        vector=compute_quiz_vector(seed, answers),
        confidence=compute_quiz_confidence(answers),
        answers=answers,
        pairs=pairs,
    )
