"""
Dimension schema for taste vectors.

Two families with different bounds:
  genre dimensions   [0, 1]   how much the user likes the genre
  meta dimensions    [-1, 1]  bipolar axes (light/dark, slow/fast, ...)

Canonical order is genres then meta. The codec, the similarity metric and the
ambiguity ranking all iterate in this order so results are deterministic.
"""

from __future__ import annotations

GENRE_DIMENSIONS: tuple[str, ...] = (
    "action",
    "adventure",
    "animation",
    "comedy",
    "crime",
    "documentary",
    "drama",
    "family",
    "fantasy",
    "history",
    "horror",
    "musical",
    "mystery",
    "reality",
    "romance",
    "scifi",
    "thriller",
    "war",
    "western",
)

# tone:       -1 dark/serious       .. +1 light/fun
# pacing:     -1 slow burn          .. +1 fast-paced
# era:        -1 classic            .. +1 modern
# popularity: -1 niche              .. +1 mainstream
# intensity:  -1 calm               .. +1 intense
META_DIMENSIONS: tuple[str, ...] = (
    "tone",
    "pacing",
    "era",
    "popularity",
    "intensity",
)

ALL_DIMENSIONS: tuple[str, ...] = GENRE_DIMENSIONS + META_DIMENSIONS

GENRE_SET = frozenset(GENRE_DIMENSIONS)
META_SET = frozenset(META_DIMENSIONS)

GENRE_BOUNDS = (0.0, 1.0)
META_BOUNDS = (-1.0, 1.0)

# Relative importance in similarity. Era matters least: people watch across eras.
DIMENSION_WEIGHTS: dict[str, float] = {
    **{genre: 1.0 for genre in GENRE_DIMENSIONS},
    "tone": 0.8,
    "pacing": 0.6,
    "era": 0.4,
    "popularity": 0.5,
    "intensity": 0.7,
}

GENRE_LABELS: dict[str, str] = {
    "action": "Action",
    "adventure": "Adventure",
    "animation": "Animation",
    "comedy": "Comedy",
    "crime": "Crime",
    "documentary": "Documentary",
    "drama": "Drama",
    "family": "Family",
    "fantasy": "Fantasy",
    "history": "History",
    "horror": "Horror",
    "musical": "Musical",
    "mystery": "Mystery",
    "reality": "Reality",
    "romance": "Romance",
    "scifi": "Sci-Fi",
    "thriller": "Thriller",
    "war": "War",
    "western": "Western",
}


def is_genre(dimension: str) -> bool:
    return dimension in GENRE_SET


def is_meta(dimension: str) -> bool:
    return dimension in META_SET


def bounds_for(dimension: str) -> tuple[float, float]:
    """Return (low, high) for a dimension key. Unknown keys raise KeyError."""
    if dimension in GENRE_SET:
        return GENRE_BOUNDS
    if dimension in META_SET:
        return META_BOUNDS
    raise KeyError(dimension)
