"""
Quiz value types: phases, choices, options, pairs and recorded answers.

A QuizPair is pure data. The only structural invariant is that every
dimension a pair claims to test is actually set by at least one of its two
options; the catalogue enforces it when the pools are built.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType


class QuizPhase(str, Enum):
    FIXED = "fixed"
    GENRE_RESPONSIVE = "genre-responsive"
    ADAPTIVE = "adaptive"


class QuizChoice(str, Enum):
    A = "A"
    B = "B"
    BOTH = "both"
    NEITHER = "neither"
    SKIP = "skip"


@dataclass(frozen=True)
class QuizOption:
    tmdb_id: int
    media_type: str
    """'movie' or 'tv'."""
    title: str
    year: int
    descriptor: str
    vector: Mapping[str, float]
    """Sparse position of the title in taste space. Unset dimensions read as 0."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "vector", MappingProxyType(dict(self.vector)))

    @property
    def content_id(self) -> str:
        """Identity used for overlap checks between pairs."""
        return f"{self.media_type}-{self.tmdb_id}"

    def value(self, dimension: str) -> float:
        return self.vector.get(dimension, 0.0)


@dataclass(frozen=True)
class QuizPair:
    id: str
    phase: QuizPhase
    dimensions_tested: tuple[str, ...]
    option_a: QuizOption
    option_b: QuizOption
    trigger_genres: tuple[str, ...] = ()
    """Genre keys that make a genre-responsive pair relevant."""
    trigger_clusters: tuple[str, ...] = ()
    """Cluster ids that make a genre-responsive pair relevant (tie-break only)."""

    @property
    def content_ids(self) -> tuple[str, str]:
        return (self.option_a.content_id, self.option_b.content_id)


@dataclass(frozen=True)
class QuizAnswer:
    pair_id: str
    choice: QuizChoice
    phase: QuizPhase
    timestamp: datetime | None = field(default=None, compare=False)
