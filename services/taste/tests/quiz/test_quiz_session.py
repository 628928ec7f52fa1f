"""
Tests for QuizSession — the three-phase quiz walker — and stateless scoring
of client-held answers.
"""

import pytest

from services.taste.errors import QuizSessionError, UnknownClusterError
from services.taste.quiz.scoring import compute_quiz_vector
from services.taste.quiz.session import QuizSession, result_from_answers
from services.taste.quiz.types import QuizChoice, QuizPhase

CLUSTERS = ["action-adrenaline", "dark-thrillers", "cult-indie"]


def _run(session: QuizSession, choice: str = "A") -> None:
    while not session.is_complete:
        pair = session.next_pair()
        session.answer(pair.id, choice)


class TestPhases:

    def test_starts_with_fixed_pairs(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        assert session.phase is QuizPhase.FIXED
        assert [p.id for p in session.pending_pairs][:1] == ["fixed-1"]
        assert len(session.pending_pairs) == 5

    def test_walks_all_three_phases(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        seen = []
        while not session.is_complete:
            seen.append(session.phase)
            pair = session.next_pair()
            session.answer(pair.id, "A")

        assert seen.count(QuizPhase.FIXED) == 5
        assert seen.count(QuizPhase.GENRE_RESPONSIVE) == 2
        assert seen.count(QuizPhase.ADAPTIVE) == 5
        assert session.phase is None
        assert session.next_pair() is None

    def test_answers_record_phase_and_time(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        _run(session)
        answers = session.answers
        assert answers[0].phase is QuizPhase.FIXED
        assert answers[-1].phase is QuizPhase.ADAPTIVE
        assert all(a.timestamp == clock.now for a in answers)

    def test_no_pair_asked_twice(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        _run(session, "B")
        ids = [a.pair_id for a in session.answers]
        assert len(ids) == len(set(ids))

    def test_empty_phase_is_passed_through(self, clock):
        session = QuizSession(CLUSTERS, genre_responsive_count=0, clock=clock)
        for pair in session.pending_pairs:
            session.answer(pair.id, "A")
        assert session.phase is QuizPhase.ADAPTIVE
        assert session.interim_vector is not None

    def test_interim_vector_set_before_adaptive(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        assert session.interim_vector is None
        while session.phase is not QuizPhase.ADAPTIVE:
            session.answer(session.next_pair().id, "A")
        expected = compute_quiz_vector(session.seed_vector, session.answers)
        assert session.interim_vector == expected


class TestResult:

    def test_result_matches_scoring(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        _run(session)
        result = session.result()
        assert result.cluster_ids == tuple(CLUSTERS)
        assert result.vector == compute_quiz_vector(result.seed_vector, result.answers)
        assert len(result.pairs) == 12
        assert result.confidence["tone"] > 0.0

    def test_result_before_completion_raises(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        with pytest.raises(QuizSessionError, match="not complete"):
            session.result()

    def test_skipping_everything_keeps_seed(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        _run(session, "skip")
        result = session.result()
        assert result.vector == result.seed_vector
        assert all(v == 0.0 for v in result.confidence.to_dict().values())

    def test_stateless_scoring_matches_session(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        _run(session)
        live = session.result()
        replayed = result_from_answers(CLUSTERS, live.answers)
        assert replayed.vector == live.vector
        assert replayed.confidence == live.confidence
        assert replayed.interim_vector == live.interim_vector


class TestMisuse:

    def test_answer_for_pair_not_pending(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        with pytest.raises(QuizSessionError, match="not pending"):
            session.answer("adaptive-1", QuizChoice.A)

    def test_answer_after_completion(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        _run(session)
        with pytest.raises(QuizSessionError, match="already complete"):
            session.answer("fixed-1", "A")

    def test_invalid_choice(self, clock):
        session = QuizSession(CLUSTERS, clock=clock)
        with pytest.raises(ValueError):
            session.answer("fixed-1", "maybe")

    def test_unknown_cluster(self, clock):
        with pytest.raises(UnknownClusterError):
            QuizSession(["not-a-cluster"], clock=clock)
