"""
services.taste.interactions — passive signals and how they move a taste vector.

Usage:
    from services.taste.interactions import (
        ContentMetadata, Interaction, InteractionAction, content_to_vector,
    )

    vector = content_to_vector(ContentMetadata(genre_ids=(28, 53), release_year=2014))
"""

from __future__ import annotations

from services.taste.interactions.blender import (
    ACTION_WEIGHTS,
    LEARNING_RATE,
    MAX_INTERACTIONS,
    append_to_log,
    apply_interaction,
    genre_default_baseline,
    recency_weight,
    replay_interactions,
)
from services.taste.interactions.content_mapping import ContentMetadata, content_to_vector
from services.taste.interactions.types import NEGATIVE_ACTIONS, Interaction, InteractionAction

__all__ = [
    "Interaction",
    "InteractionAction",
    "NEGATIVE_ACTIONS",
    "ContentMetadata",
    "content_to_vector",
    "ACTION_WEIGHTS",
    "LEARNING_RATE",
    "MAX_INTERACTIONS",
    "recency_weight",
    "apply_interaction",
    "replay_interactions",
    "append_to_log",
    "genre_default_baseline",
]
