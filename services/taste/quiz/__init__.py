"""
services.taste.quiz — forced-choice taste quiz: pair catalogue, selection, scoring.

Usage:
    from services.taste.quiz import QuizSession, QuizChoice

    session = QuizSession(["action-adrenaline", "dark-thrillers", "cult-indie"])
    while not session.is_complete:
        pair = session.next_pair()
        session.answer(pair.id, QuizChoice.A)
    result = session.result()
"""

from __future__ import annotations

from services.taste.quiz.pairs import (
    ADAPTIVE_PAIRS,
    ALL_PAIRS,
    FIXED_PAIRS,
    GENRE_RESPONSIVE_PAIRS,
    get_fixed_pairs,
    get_pair,
)
from services.taste.quiz.scoring import (
    compute_answer_delta,
    compute_quiz_confidence,
    compute_quiz_vector,
)
from services.taste.quiz.selection import (
    AdaptiveSelectionConfig,
    select_adaptive_pairs,
    select_genre_responsive_pairs,
)
from services.taste.quiz.session import QuizResult, QuizSession, result_from_answers
from services.taste.quiz.types import QuizAnswer, QuizChoice, QuizOption, QuizPair, QuizPhase

__all__ = [
    "QuizPhase",
    "QuizChoice",
    "QuizOption",
    "QuizPair",
    "QuizAnswer",
    "QuizSession",
    "QuizResult",
    "result_from_answers",
    "AdaptiveSelectionConfig",
    "FIXED_PAIRS",
    "GENRE_RESPONSIVE_PAIRS",
    "ADAPTIVE_PAIRS",
    "ALL_PAIRS",
    "get_pair",
    "get_fixed_pairs",
    "select_genre_responsive_pairs",
    "select_adaptive_pairs",
    "compute_answer_delta",
    "compute_quiz_vector",
    "compute_quiz_confidence",
]
