"""
Content metadata -> TasteVector mapping.

Genre dimensions are binary (1.0 when the title carries the TMDb genre).
Meta dimensions are derived:

  tone        mean of dark/light genre signals, plus combo nudges
  pacing      mean of fast/slow genre signals, runtime as a tie-breaker
  era         release-year band, pulled toward classic by history/war
  popularity  TMDb popularity band, adjusted by vote count
  intensity   mean of high/low intensity genre signals, plus combo nudges

Results are memoised per metadata value (500 entries).
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from dataclasses import dataclass

from services.taste.vector.model import TasteVector, clamp_vector

# TMDb genre ids, movie and TV
ACTION = 28
ADVENTURE = 12
ANIMATION = 16
COMEDY = 35
CRIME = 80
DOCUMENTARY = 99
DRAMA = 18
FAMILY = 10751
FANTASY = 14
HISTORY = 36
HORROR = 27
MUSIC = 10402
MYSTERY = 9648
ROMANCE = 10749
SCIENCE_FICTION = 878
THRILLER = 53
WAR = 10752
WESTERN = 37
TV_ACTION_ADVENTURE = 10759
TV_REALITY = 10764
TV_WAR_POLITICS = 10768

TMDB_GENRE_TO_DIMENSION: dict[int, str] = {
    ACTION: "action",
    ADVENTURE: "adventure",
    ANIMATION: "animation",
    COMEDY: "comedy",
    CRIME: "crime",
    DOCUMENTARY: "documentary",
    DRAMA: "drama",
    FAMILY: "family",
    FANTASY: "fantasy",
    HISTORY: "history",
    HORROR: "horror",
    MUSIC: "musical",
    MYSTERY: "mystery",
    ROMANCE: "romance",
    SCIENCE_FICTION: "scifi",
    THRILLER: "thriller",
    WAR: "war",
    WESTERN: "western",
    TV_ACTION_ADVENTURE: "action",
    TV_REALITY: "reality",
    TV_WAR_POLITICS: "war",
}

# Canonical TMDb id for each genre dimension (movie ids preferred)
DIMENSION_TO_TMDB_GENRE: dict[str, int] = {
    dim: tmdb_id
    for tmdb_id, dim in reversed(list(TMDB_GENRE_TO_DIMENSION.items()))
}

VECTOR_CACHE_SIZE = 500

# (genre id, contribution) per axis. Each matching genre counts as one signal.
_TONE_SIGNALS: tuple[tuple[int, float], ...] = (
    (HORROR, -0.8), (THRILLER, -0.5), (CRIME, -0.4), (WAR, -0.5), (DRAMA, -0.2),
    (COMEDY, 0.6), (FAMILY, 0.7), (ANIMATION, 0.3), (MUSIC, 0.4), (ROMANCE, 0.3),
)
_PACING_SIGNALS: tuple[tuple[int, float], ...] = (
    (ACTION, 0.7), (THRILLER, 0.5), (HORROR, 0.3), (TV_ACTION_ADVENTURE, 0.6),
    (DRAMA, -0.4), (DOCUMENTARY, -0.5), (HISTORY, -0.4), (ROMANCE, -0.2),
)
_INTENSITY_SIGNALS: tuple[tuple[int, float], ...] = (
    (HORROR, 0.8), (THRILLER, 0.6), (ACTION, 0.5), (WAR, 0.6),
    (COMEDY, -0.4), (ROMANCE, -0.3), (FAMILY, -0.5), (DOCUMENTARY, -0.2),
)


@dataclass(frozen=True)
class ContentMetadata:
    genre_ids: tuple[int, ...]
    popularity: float | None = None
    vote_count: int | None = None
    release_year: int | None = None
    original_language: str | None = None
    runtime: int | None = None

    def __post_init__(self) -> None:
        # Order-insensitive so equal genre sets share a cache entry
        object.__setattr__(self, "genre_ids", tuple(sorted(set(self.genre_ids))))


def _clip(value: float) -> float:
    return max(-1.0, min(1.0, value))


def _signal_mean(genres: frozenset[int], signals: Iterable[tuple[int, float]]) -> tuple[float, int]:
    total = 0.0
    count = 0
    for genre_id, contribution in signals:
        if genre_id in genres:
            total += contribution
            count += 1
    return total, count


def derive_tone(genres: frozenset[int]) -> float:
    tone, signals = _signal_mean(genres, _TONE_SIGNALS)
    if ACTION in genres and COMEDY in genres:
        tone += 0.3
    if HORROR in genres and THRILLER in genres:
        tone -= 0.3
    if DRAMA in genres and COMEDY in genres:
        tone += 0.2
    return _clip(tone / signals) if signals else 0.0


def derive_pacing(genres: frozenset[int], runtime: int | None = None) -> float:
    pacing, signals = _signal_mean(genres, _PACING_SIGNALS)
    if runtime:
        if runtime > 150:
            pacing -= 0.2
            signals += 1
        elif runtime < 90:
            pacing += 0.2
            signals += 1
    return _clip(pacing / signals) if signals else 0.0


def derive_era(genres: frozenset[int], release_year: int | None = None) -> float:
    era = 0.0
    if release_year:
        if release_year < 1980:
            era = -0.8
        elif release_year < 1990:
            era = -0.5
        elif release_year < 2000:
            era = -0.3
        elif release_year < 2010:
            era = 0.0
        elif release_year < 2015:
            era = 0.3
        elif release_year < 2020:
            era = 0.6
        else:
            era = 0.8
    # Period settings read as classic regardless of release date
    if HISTORY in genres:
        era -= 0.3
    if WAR in genres:
        era -= 0.2
    return _clip(era)


def derive_popularity(popularity: float | None = None, vote_count: int | None = None) -> float:
    pop = 0.0
    if popularity is not None:
        if popularity > 100:
            pop = 0.9
        elif popularity > 50:
            pop = 0.6
        elif popularity > 20:
            pop = 0.3
        elif popularity > 10:
            pop = 0.0
        elif popularity > 5:
            pop = -0.3
        else:
            pop = -0.6
    if vote_count is not None:
        if vote_count < 100:
            pop -= 0.3
        elif vote_count < 500:
            pop -= 0.1
        elif vote_count > 5000:
            pop += 0.2
    return _clip(pop)


def derive_intensity(genres: frozenset[int]) -> float:
    intensity, signals = _signal_mean(genres, _INTENSITY_SIGNALS)
    if HORROR in genres and THRILLER in genres:
        intensity += 0.3
    if ROMANCE in genres and COMEDY in genres:
        intensity -= 0.2
    return _clip(intensity / signals) if signals else 0.0


@functools.lru_cache(maxsize=VECTOR_CACHE_SIZE)
def content_to_vector(meta: ContentMetadata) -> TasteVector:
    """Map TMDb metadata to a TasteVector. Unknown genre ids are ignored."""
    genres = frozenset(meta.genre_ids)
    values: dict[str, float] = {}
    for genre_id in meta.genre_ids:
        dim = TMDB_GENRE_TO_DIMENSION.get(genre_id)
        if dim:
            values[dim] = 1.0

    values["tone"] = derive_tone(genres)
    values["pacing"] = derive_pacing(genres, meta.runtime)
    values["era"] = derive_era(genres, meta.release_year)
    values["popularity"] = derive_popularity(meta.popularity, meta.vote_count)
    values["intensity"] = derive_intensity(genres)
    return clamp_vector(values)


def clear_content_vector_cache() -> None:
    content_to_vector.cache_clear()
