"""
Taste clusters — static archetypes a new user picks before the quiz.

Each cluster is a sparse partial vector. The seed vector is the per-dimension
mean over only the selected clusters that actually define that dimension:
"undefined" is not the same as "zero", so picking Dark Thrillers plus a
cluster that is silent on tone does not halve the tone signal.

The mean is taken in catalogue order with duplicate ids collapsed, so the
seed is bit-identical regardless of the order the user tapped clusters in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from services.taste.errors import CatalogueError, UnknownClusterError
from services.taste.vector.dimensions import ALL_DIMENSIONS, GENRE_DIMENSIONS
from services.taste.vector.model import TasteVector, clamp_vector

logger = logging.getLogger(__name__)

# Exposed for onboarding callers; the seed builder itself accepts any count.
MIN_CLUSTERS = 3
MAX_CLUSTERS = 5

HOME_GENRE_THRESHOLD = 0.3
HOME_GENRE_LIMIT = 8


@dataclass(frozen=True)
class TasteCluster:
    id: str
    name: str
    description: str
    emoji: str
    vector: Mapping[str, float]


def _cluster(cluster_id: str, name: str, description: str, emoji: str, **vector: float) -> TasteCluster:
    unknown = set(vector) - set(ALL_DIMENSIONS)
    if unknown:
        raise CatalogueError(f"cluster {cluster_id}: unknown dimensions {sorted(unknown)}")
    return TasteCluster(cluster_id, name, description, emoji, MappingProxyType(vector))


TASTE_CLUSTERS: tuple[TasteCluster, ...] = (
    _cluster(
        "feel-good-funny", "Feel-Good & Funny",
        "Light comedies, sitcoms, and uplifting stories", "😍",
        comedy=0.9, drama=0.2, tone=0.8, intensity=-0.4, pacing=0.3,
    ),
    _cluster(
        "action-adrenaline", "Action & Adrenaline",
        "Explosions, fights, and high-stakes chases", "🚀",
        action=0.9, adventure=0.5, thriller=0.3, intensity=0.75, pacing=0.9, tone=-0.2,
    ),
    _cluster(
        "dark-thrillers", "Dark Thrillers",
        "Tense, gritty crime and suspense", "🔪",
        thriller=0.9, crime=0.6, mystery=0.3, tone=-0.8, intensity=0.7, pacing=0.7,
    ),
    _cluster(
        "rom-coms-love-stories", "Rom-Coms & Love Stories",
        "Romantic comedies and sweeping romances", "💕",
        romance=0.9, comedy=0.6, drama=0.3, tone=0.7, intensity=-0.3,
    ),
    _cluster(
        "epic-scifi-fantasy", "Epic Sci-Fi & Fantasy",
        "Grand worlds, speculative stories, and mythic adventures", "🔮",
        scifi=0.8, fantasy=0.8, adventure=0.5, intensity=0.2, pacing=-0.2, era=-0.2,
    ),
    _cluster(
        "horror-supernatural", "Horror & Supernatural",
        "Scary, creepy, and unsettling", "👻",
        horror=0.9, thriller=0.4, mystery=0.2, tone=-0.9, intensity=0.75, pacing=0.2,
    ),
    _cluster(
        "mind-bending-mysteries", "Mind-Bending Mysteries",
        "Psychological puzzles and twist-driven stories", "🧠",
        mystery=0.9, thriller=0.5, scifi=0.2, tone=-0.5, intensity=0.5, pacing=-0.3,
    ),
    _cluster(
        "heartfelt-drama", "Heartfelt Drama",
        "Character-driven emotional stories", "💚",
        drama=0.9, romance=0.2, tone=0.3, intensity=0.2, pacing=-0.4,
    ),
    _cluster(
        "true-crime-real-stories", "True Crime & Real Stories",
        "Documentaries, docuseries, and based-on-true-events", "📰",
        documentary=0.9, crime=0.5, history=0.3, tone=-0.5, intensity=0.5, pacing=-0.2,
    ),
    _cluster(
        "anime-animation", "Anime & Animation",
        "Anime, animated series, and animated films", "🍥",
        animation=0.9, action=0.3, fantasy=0.3, intensity=0.3, pacing=0.2,
    ),
    _cluster(
        "prestige-award-winners", "Prestige & Award-Winners",
        "Critically acclaimed, Oscar- and BAFTA-calibre", "🏆",
        drama=0.7, history=0.2, documentary=0.2, tone=-0.3, intensity=0.5,
        pacing=-0.4, popularity=-0.4,
    ),
    _cluster(
        "history-war", "History & War",
        "Period pieces, historical epics, and war stories", "⚔️",
        history=0.9, war=0.7, drama=0.6, tone=-0.3, intensity=0.5, pacing=-0.5, era=0.7,
    ),
    _cluster(
        "reality-entertainment", "Reality & Entertainment",
        "Competition shows, reality TV, and entertainment", "📺",
        reality=0.9, comedy=0.2, tone=0.5, pacing=0.6, popularity=0.6, intensity=-0.2,
    ),
    _cluster(
        "cult-indie", "Cult & Indie",
        "Off-beat, niche, and under-the-radar gems", "🎬",
        drama=0.3, comedy=0.2, tone=-0.2, popularity=-0.8, intensity=0.2,
    ),
)

CLUSTERS_BY_ID: dict[str, TasteCluster] = {c.id: c for c in TASTE_CLUSTERS}


def get_cluster(cluster_id: str) -> TasteCluster:
    try:
        return CLUSTERS_BY_ID[cluster_id]
    except KeyError:
        raise UnknownClusterError(f"unknown cluster id {cluster_id!r}") from None


def resolve_clusters(cluster_ids: Iterable[str]) -> list[TasteCluster]:
    """
    Validate ids and return the distinct clusters in catalogue order.

    Raises UnknownClusterError on the first id not in the catalogue.
    """
    wanted = set()
    for cluster_id in cluster_ids:
        get_cluster(cluster_id)
        wanted.add(cluster_id)
    return [c for c in TASTE_CLUSTERS if c.id in wanted]


def compute_cluster_seed_vector(cluster_ids: Iterable[str]) -> TasteVector:
    """Average the selected clusters per dimension, counting only clusters that define it."""
    clusters = resolve_clusters(cluster_ids)
    values: dict[str, float] = {}
    for dim in ALL_DIMENSIONS:
        defined = [c.vector[dim] for c in clusters if dim in c.vector]
        if defined:
            values[dim] = sum(defined) / len(defined)

    seed = clamp_vector(values)
    logger.debug(
        "clusters: seed computed clusters=%s dims=%s",
        [c.id for c in clusters],
        {d: round(v, 3) for d, v in seed.to_dict().items() if v != 0.0},
    )
    return seed


def top_genre_keys_from_clusters(cluster_ids: Iterable[str], top_n: int = 3) -> list[str]:
    """Strongest positive genre dimensions of the cluster seed, strongest first."""
    seed = compute_cluster_seed_vector(cluster_ids)
    positive = [g for g in GENRE_DIMENSIONS if seed.genres[g] > 0.0]
    return sorted(positive, key=lambda g: -seed.genres[g])[:top_n]


def derive_home_genre_keys(cluster_ids: Iterable[str]) -> list[str]:
    """Genre keys with a seed value of at least 0.3, strongest first, at most 8."""
    seed = compute_cluster_seed_vector(cluster_ids)
    strong = [g for g in GENRE_DIMENSIONS if seed.genres[g] >= HOME_GENRE_THRESHOLD]
    return sorted(strong, key=lambda g: -seed.genres[g])[:HOME_GENRE_LIMIT]
