"""
services.taste.vector — taste vector schema, value type, math and codec.

Usage:
    from services.taste.vector import clamp_vector, cosine_similarity

    v = clamp_vector({"comedy": 0.9, "tone": 0.8})
    score = cosine_similarity(v, other)
"""

from __future__ import annotations

from services.taste.vector.codec import (
    array_to_confidence,
    array_to_vector,
    confidence_to_array,
    vector_to_array,
)
from services.taste.vector.dimensions import (
    ALL_DIMENSIONS,
    DIMENSION_WEIGHTS,
    GENRE_DIMENSIONS,
    META_DIMENSIONS,
)
from services.taste.vector.model import (
    ConfidenceVector,
    TasteVector,
    blend_vector,
    blend_vector_away,
    clamp_confidence,
    clamp_vector,
    cosine_similarity,
    genre_default_vector,
    genres_above,
    is_non_zero,
    similarity_percent,
    top_genres,
)

__all__ = [
    "ALL_DIMENSIONS",
    "DIMENSION_WEIGHTS",
    "GENRE_DIMENSIONS",
    "META_DIMENSIONS",
    "TasteVector",
    "ConfidenceVector",
    "clamp_vector",
    "clamp_confidence",
    "blend_vector",
    "blend_vector_away",
    "cosine_similarity",
    "similarity_percent",
    "top_genres",
    "genres_above",
    "is_non_zero",
    "genre_default_vector",
    "vector_to_array",
    "array_to_vector",
    "confidence_to_array",
    "array_to_confidence",
]
