"""
TasteProfile snapshot and its JSON record form.

A profile is an immutable snapshot. Every update builds a new one; the store
persists it with compare-and-set on ``revision``.

``quiz_vector`` / ``quiz_confidence`` are the quiz-completion baseline that a
full recompute replays the interaction log from. ``vector`` / ``confidence``
are derived and may always be rebuilt from baseline + log.

Records store vectors as positional arrays (see vector.codec), so profiles
written under older dimension layouts still load.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from services.taste.interactions.types import Interaction, InteractionAction
from services.taste.quiz.types import QuizAnswer, QuizChoice, QuizPhase
from services.taste.vector.codec import (
    array_to_confidence,
    array_to_vector,
    confidence_to_array,
    vector_to_array,
)
from services.taste.vector.model import ConfidenceVector, TasteVector

SCHEMA_VERSION = 2


@dataclass(frozen=True)
class TasteProfile:
    user_id: str
    vector: TasteVector
    confidence: ConfidenceVector
    last_updated: datetime
    seed_vector: TasteVector | None = None
    """Cluster seed (or genre-default vector) the profile was created from."""
    quiz_vector: TasteVector | None = None
    """Quiz-completion baseline. None until a quiz is completed."""
    quiz_confidence: ConfidenceVector | None = None
    cluster_ids: tuple[str, ...] = ()
    quiz_completed: bool = False
    quiz_answers: tuple[QuizAnswer, ...] = ()
    interaction_log: tuple[Interaction, ...] = ()
    revision: int = 0
    """Bumped by the store on every save."""
    version: int = field(default=SCHEMA_VERSION)


# ---------------------------------------------------------------------------
# Record encoding
# ---------------------------------------------------------------------------

def _encode_answer(answer: QuizAnswer) -> dict[str, Any]:
    return {
        "pairId": answer.pair_id,
        "choice": answer.choice.value,
        "phase": answer.phase.value,
        "timestamp": answer.timestamp.isoformat() if answer.timestamp else None,
    }


def _decode_answer(raw: dict[str, Any]) -> QuizAnswer:
    ts = raw.get("timestamp")
    return QuizAnswer(
        pair_id=raw["pairId"],
        choice=QuizChoice(raw["choice"]),
        phase=QuizPhase(raw["phase"]),
        timestamp=datetime.fromisoformat(ts) if ts else None,
    )


def _encode_interaction(interaction: Interaction) -> dict[str, Any]:
    return {
        "contentId": interaction.content_id,
        "contentType": interaction.content_type,
        "action": interaction.action.value,
        "timestamp": interaction.timestamp.isoformat(),
        "contentVector": vector_to_array(interaction.content_vector),
    }


def _decode_interaction(raw: dict[str, Any]) -> Interaction:
    return Interaction(
        content_id=int(raw["contentId"]),
        content_type=raw["contentType"],
        action=InteractionAction(raw["action"]),
        timestamp=datetime.fromisoformat(raw["timestamp"]),
        content_vector=array_to_vector(raw["contentVector"]),
    )


def profile_to_record(profile: TasteProfile) -> dict[str, Any]:
    """Serialize to a JSON-safe dict."""
    return {
        "userId": profile.user_id,
        "vector": vector_to_array(profile.vector),
        "confidence": confidence_to_array(profile.confidence),
        "seedVector": vector_to_array(profile.seed_vector) if profile.seed_vector else None,
        "quizVector": vector_to_array(profile.quiz_vector) if profile.quiz_vector else None,
        "quizConfidence": (
            confidence_to_array(profile.quiz_confidence) if profile.quiz_confidence else None
        ),
        "clusterIds": list(profile.cluster_ids),
        "quizCompleted": profile.quiz_completed,
        "quizAnswers": [_encode_answer(a) for a in profile.quiz_answers],
        "interactionLog": [_encode_interaction(i) for i in profile.interaction_log],
        "lastUpdated": profile.last_updated.isoformat(),
        "revision": profile.revision,
        "version": profile.version,
    }


def profile_from_record(raw: dict[str, Any]) -> TasteProfile:
    """Inverse of profile_to_record(). Accepts legacy vector widths."""
    confidence = raw.get("confidence")
    seed = raw.get("seedVector")
    quiz_vector = raw.get("quizVector")
    quiz_confidence = raw.get("quizConfidence")
    return TasteProfile(
        user_id=raw["userId"],
        vector=array_to_vector(raw["vector"]),
        confidence=array_to_confidence(confidence) if confidence else ConfidenceVector.zero(),
        seed_vector=array_to_vector(seed) if seed else None,
        quiz_vector=array_to_vector(quiz_vector) if quiz_vector else None,
        quiz_confidence=array_to_confidence(quiz_confidence) if quiz_confidence else None,
        cluster_ids=tuple(raw.get("clusterIds") or ()),
        quiz_completed=bool(raw.get("quizCompleted", False)),
        quiz_answers=tuple(_decode_answer(a) for a in raw.get("quizAnswers") or ()),
        interaction_log=tuple(_decode_interaction(i) for i in raw.get("interactionLog") or ()),
        last_updated=datetime.fromisoformat(raw["lastUpdated"]),
        revision=int(raw.get("revision", 0)),
        version=int(raw.get("version", SCHEMA_VERSION)),
    )
