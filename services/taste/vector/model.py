"""
TasteVector value type and the pure vector operations built on it.

A TasteVector holds two explicitly typed families, ``genres`` (bounded [0, 1])
and ``meta`` (bounded [-1, 1]). Construction is strict: every key present,
nothing extra, every value inside its family's bound. Anything that needs to
compute outside the bounds works on a plain ``dict[str, float]`` and comes
back through clamp_vector().

Blending is a leaky exponential moving average:

    toward:  v[d] += weight * rate * (target[d] - v[d])
    away:    v[d] += weight * rate * (v[d] - target[d])

so a single strong interaction can never overwrite the profile.

Similarity scales every dimension by its weight (and, optionally, by how much
evidence backs it) before taking a plain cosine. Zero magnitude returns 0.0.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from services.taste.errors import TasteEngineError, UnknownDimensionError
from services.taste.vector.dimensions import (
    ALL_DIMENSIONS,
    DIMENSION_WEIGHTS,
    GENRE_BOUNDS,
    GENRE_DIMENSIONS,
    GENRE_SET,
    META_BOUNDS,
    META_DIMENSIONS,
    META_SET,
)

# Confidence-weighted similarity never drops a dimension entirely: with zero
# evidence it still counts at half weight.
CONFIDENCE_FLOOR = 0.5

# Default genre values for users who pick genres instead of taking the quiz.
DEFAULT_SELECTED_GENRE = 0.5
DEFAULT_UNSELECTED_GENRE = 0.25


def _check_family(
    name: str,
    values: Mapping[str, float],
    keys: tuple[str, ...],
    bounds: tuple[float, float],
) -> dict[str, float]:
    extra = set(values) - set(keys)
    if extra:
        raise UnknownDimensionError(f"{name}: unexpected dimensions {sorted(extra)}")
    missing = [k for k in keys if k not in values]
    if missing:
        raise UnknownDimensionError(f"{name}: missing dimensions {missing}")
    low, high = bounds
    checked: dict[str, float] = {}
    for key in keys:
        value = float(values[key])
        if not (low <= value <= high):
            raise TasteEngineError(f"{name}.{key}={value} outside [{low}, {high}]")
        checked[key] = value
    return checked


@dataclass(frozen=True, eq=False)
class TasteVector:
    """A bounded 24-dimension preference vector (19 genre + 5 meta)."""

    genres: Mapping[str, float]
    meta: Mapping[str, float]

    def __post_init__(self) -> None:
        genres = _check_family("genres", self.genres, GENRE_DIMENSIONS, GENRE_BOUNDS)
        meta = _check_family("meta", self.meta, META_DIMENSIONS, META_BOUNDS)
        object.__setattr__(self, "genres", MappingProxyType(genres))
        object.__setattr__(self, "meta", MappingProxyType(meta))

    @classmethod
    def zero(cls) -> TasteVector:
        return cls(
            genres={k: 0.0 for k in GENRE_DIMENSIONS},
            meta={k: 0.0 for k in META_DIMENSIONS},
        )

    @classmethod
    def from_dict(cls, values: Mapping[str, float]) -> TasteVector:
        """Strict constructor from a flat mapping holding all 24 keys."""
        unknown = set(values) - set(ALL_DIMENSIONS)
        if unknown:
            raise UnknownDimensionError(f"unknown dimensions {sorted(unknown)}")
        return cls(
            genres={k: values[k] for k in GENRE_DIMENSIONS if k in values},
            meta={k: values[k] for k in META_DIMENSIONS if k in values},
        )

    def __getitem__(self, dimension: str) -> float:
        if dimension in GENRE_SET:
            return self.genres[dimension]
        if dimension in META_SET:
            return self.meta[dimension]
        raise UnknownDimensionError(dimension)

    def to_dict(self) -> dict[str, float]:
        """Flat mapping in canonical dimension order."""
        return {**self.genres, **self.meta}

    def to_array(self) -> np.ndarray:
        return np.array([self[d] for d in ALL_DIMENSIONS], dtype=np.float64)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TasteVector):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(self[d] for d in ALL_DIMENSIONS))

    def __repr__(self) -> str:
        nonzero = {d: round(v, 4) for d, v in self.to_dict().items() if v != 0.0}
        return f"TasteVector({nonzero})"


@dataclass(frozen=True, eq=False)
class ConfidenceVector:
    """Evidence strength per dimension, each value in [0, 1]."""

    values: Mapping[str, float]

    def __post_init__(self) -> None:
        unknown = set(self.values) - set(ALL_DIMENSIONS)
        if unknown:
            raise UnknownDimensionError(f"confidence: unknown dimensions {sorted(unknown)}")
        checked: dict[str, float] = {}
        for key in ALL_DIMENSIONS:
            value = float(self.values.get(key, 0.0))
            if not (0.0 <= value <= 1.0):
                raise TasteEngineError(f"confidence.{key}={value} outside [0, 1]")
            checked[key] = value
        object.__setattr__(self, "values", MappingProxyType(checked))

    @classmethod
    def zero(cls) -> ConfidenceVector:
        return cls(values={})

    def __getitem__(self, dimension: str) -> float:
        return self.values[dimension]

    def to_dict(self) -> dict[str, float]:
        return dict(self.values)

    def to_array(self) -> np.ndarray:
        return np.array([self.values[d] for d in ALL_DIMENSIONS], dtype=np.float64)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfidenceVector):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(self.values[d] for d in ALL_DIMENSIONS))


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------

def clamp_value(dimension: str, value: float) -> float:
    if math.isnan(value):
        return 0.0
    if dimension in GENRE_SET:
        low, high = GENRE_BOUNDS
    elif dimension in META_SET:
        low, high = META_BOUNDS
    else:
        raise UnknownDimensionError(dimension)
    return max(low, min(high, value))


def clamp_vector(values: Mapping[str, float]) -> TasteVector:
    """
    Build a TasteVector from unbounded values.

    Genre keys are clipped into [0, 1], meta keys into [-1, 1]. Missing keys
    become 0.0 and NaN becomes 0.0. Unknown keys raise UnknownDimensionError.
    """
    unknown = set(values) - set(ALL_DIMENSIONS)
    if unknown:
        raise UnknownDimensionError(f"unknown dimensions {sorted(unknown)}")
    return TasteVector(
        genres={k: clamp_value(k, float(values.get(k, 0.0))) for k in GENRE_DIMENSIONS},
        meta={k: clamp_value(k, float(values.get(k, 0.0))) for k in META_DIMENSIONS},
    )


def clamp_confidence(values: Mapping[str, float]) -> ConfidenceVector:
    return ConfidenceVector(
        values={k: max(0.0, min(1.0, float(values.get(k, 0.0)))) for k in ALL_DIMENSIONS}
    )


# ---------------------------------------------------------------------------
# Blending
# ---------------------------------------------------------------------------

def _check_blend_args(weight: float, rate: float) -> None:
    if not (0.0 <= weight <= 1.0):
        raise TasteEngineError(f"blend weight {weight} outside [0, 1]")
    if rate <= 0.0:
        raise TasteEngineError(f"blend rate must be positive, got {rate}")


def blend_vector(
    current: TasteVector,
    target: TasteVector,
    weight: float,
    rate: float,
) -> TasteVector:
    """Move ``current`` a fraction ``weight * rate`` of the way toward ``target``."""
    _check_blend_args(weight, rate)
    step = weight * rate
    return clamp_vector({d: current[d] + step * (target[d] - current[d]) for d in ALL_DIMENSIONS})


def blend_vector_away(
    current: TasteVector,
    target: TasteVector,
    weight: float,
    rate: float,
) -> TasteVector:
    """Move ``current`` away from ``target`` by the same magnitude blend_vector would move toward it."""
    _check_blend_args(weight, rate)
    step = weight * rate
    return clamp_vector({d: current[d] + step * (current[d] - target[d]) for d in ALL_DIMENSIONS})


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------

def _weight_array(
    weights: Mapping[str, float] | None,
    confidence: ConfidenceVector | None,
) -> np.ndarray:
    weights = weights if weights is not None else DIMENSION_WEIGHTS
    w = np.array([float(weights.get(d, 0.0)) for d in ALL_DIMENSIONS], dtype=np.float64)
    if confidence is not None:
        w = w * (CONFIDENCE_FLOOR + (1.0 - CONFIDENCE_FLOOR) * confidence.to_array())
    return w


def cosine_similarity(
    a: TasteVector,
    b: TasteVector,
    weights: Mapping[str, float] | None = None,
    confidence: ConfidenceVector | None = None,
) -> float:
    """
    Weighted cosine similarity in [-1, 1].

    Each dimension of both vectors is scaled by its weight (times the
    confidence factor when ``confidence`` is given) before the dot product.
    Returns 0.0 when either weighted vector has zero magnitude.
    """
    w = _weight_array(weights, confidence)
    wa = a.to_array() * w
    wb = b.to_array() * w
    norm_a = np.linalg.norm(wa)
    norm_b = np.linalg.norm(wb)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    raw = float(np.dot(wa, wb) / (norm_a * norm_b))
    return max(-1.0, min(1.0, raw))


def similarity_percent(
    a: TasteVector,
    b: TasteVector,
    weights: Mapping[str, float] | None = None,
    confidence: ConfidenceVector | None = None,
) -> int:
    """cosine_similarity() mapped onto an integer 0-100 scale."""
    raw = cosine_similarity(a, b, weights=weights, confidence=confidence)
    return round((raw + 1.0) / 2.0 * 100)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def top_genres(vector: TasteVector, count: int = 3) -> list[str]:
    """Top ``count`` genre keys, strongest first. Ties keep canonical order."""
    return sorted(GENRE_DIMENSIONS, key=lambda g: -vector.genres[g])[:count]


def genres_above(vector: TasteVector, threshold: float = 0.1) -> list[str]:
    """Genre keys strictly above ``threshold``, strongest first."""
    above = [g for g in GENRE_DIMENSIONS if vector.genres[g] > threshold]
    return sorted(above, key=lambda g: -vector.genres[g])


def is_non_zero(vector: TasteVector) -> bool:
    return any(v != 0.0 for v in vector.to_dict().values())


def genre_default_vector(selected_genres: list[str]) -> TasteVector:
    """Profile for users who picked genres directly: selected 0.5, others 0.25, meta neutral."""
    unknown = [g for g in selected_genres if g not in GENRE_SET]
    if unknown:
        raise UnknownDimensionError(f"unknown genres {unknown}")
    selected = set(selected_genres)
    return TasteVector(
        genres={
            g: DEFAULT_SELECTED_GENRE if g in selected else DEFAULT_UNSELECTED_GENRE
            for g in GENRE_DIMENSIONS
        },
        meta={m: 0.0 for m in META_DIMENSIONS},
    )
