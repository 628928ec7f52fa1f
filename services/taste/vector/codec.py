"""
Positional array codec for persisted taste vectors.

Vectors are stored as plain float arrays in canonical dimension order. Three
historical layouts exist in storage and are told apart by length alone:

  25  legacy    included an ``anime`` genre (dropped on read)
  22  interim   ``family`` and ``western`` absent (read back as 0.0)
  24  current   ALL_DIMENSIONS

Any other width is read positionally in the current order with a warning:
missing trailing positions decode to 0.0 and extra entries are ignored.
None/NaN entries decode to 0.0, non-numeric ones raise VectorSchemaError,
and decoded values are clamped into their family bounds. Writes always use
the current layout.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from services.taste.errors import VectorSchemaError
from services.taste.vector.dimensions import ALL_DIMENSIONS
from services.taste.vector.model import (
    ConfidenceVector,
    TasteVector,
    clamp_confidence,
    clamp_vector,
)

logger = logging.getLogger(__name__)

LEGACY_25D_ORDER: tuple[str, ...] = (
    "action", "adventure", "animation", "anime", "comedy", "crime",
    "documentary", "drama", "family", "fantasy", "history", "horror",
    "musical", "mystery", "reality", "romance", "scifi", "thriller",
    "war", "western", "tone", "pacing", "era", "popularity", "intensity",
)

INTERIM_22D_ORDER: tuple[str, ...] = (
    "action", "adventure", "animation", "comedy", "crime",
    "documentary", "drama", "fantasy", "history", "horror",
    "musical", "mystery", "reality", "romance", "scifi", "thriller",
    "war", "tone", "pacing", "era", "popularity", "intensity",
)

# Dimensions that existed in an old layout but no longer exist at all
REMOVED_DIMENSIONS = frozenset({"anime"})

LAYOUTS: dict[int, tuple[str, ...]] = {
    len(LEGACY_25D_ORDER): LEGACY_25D_ORDER,
    len(INTERIM_22D_ORDER): INTERIM_22D_ORDER,
    len(ALL_DIMENSIONS): ALL_DIMENSIONS,
}


def _entry(value: float | str | None) -> float:
    if value is None:
        return 0.0
    try:
        value = float(value)
    except (TypeError, ValueError) as exc:
        raise VectorSchemaError(f"non-numeric vector entry {value!r}") from exc
    return 0.0 if math.isnan(value) else value


def _decode_named(arr: Sequence[float | str | None]) -> dict[str, float]:
    layout = LAYOUTS.get(len(arr))
    if layout is None:
        logger.warning(
            "vector_codec: unexpected %d-wide array, decoding positionally as %d-wide",
            len(arr), len(ALL_DIMENSIONS),
        )
        return {
            dim: _entry(arr[i]) if i < len(arr) else 0.0
            for i, dim in enumerate(ALL_DIMENSIONS)
        }
    if layout is not ALL_DIMENSIONS:
        logger.debug("vector_codec: migrating %d-wide array", len(arr))
    return {
        dim: _entry(value)
        for dim, value in zip(layout, arr)
        if dim not in REMOVED_DIMENSIONS
    }


def vector_to_array(vector: TasteVector) -> list[float]:
    """Encode in the current 24-wide layout."""
    return [vector[dim] for dim in ALL_DIMENSIONS]


def array_to_vector(arr: Sequence[float | None]) -> TasteVector:
    """Decode any stored layout into a clamped TasteVector."""
    return clamp_vector(_decode_named(arr))


def confidence_to_array(confidence: ConfidenceVector) -> list[float]:
    return [confidence[dim] for dim in ALL_DIMENSIONS]


def array_to_confidence(arr: Sequence[float | None]) -> ConfidenceVector:
    return clamp_confidence(_decode_named(arr))
