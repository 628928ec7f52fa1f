"""
Quiz endpoints. Stateless: the client holds the answers and sends them back.

GET  /quiz/clusters                  — cluster catalogue for onboarding
POST /quiz/seed                      — seed vector and top genres for a cluster pick
POST /quiz/pairs/genre-responsive    — phase 2 pairs for the picked clusters
POST /quiz/pairs/adaptive            — phase 3 pairs for an interim vector
POST /quiz/score                     — final vector and confidence for a set of answers
"""

from typing import Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from services.taste.clusters import (
    MAX_CLUSTERS,
    TASTE_CLUSTERS,
    compute_cluster_seed_vector,
    derive_home_genre_keys,
    top_genre_keys_from_clusters,
)
from services.taste.quiz.pairs import get_fixed_pairs
from services.taste.quiz.selection import select_adaptive_pairs, select_genre_responsive_pairs
from services.taste.quiz.session import result_from_answers
from services.taste.quiz.types import QuizAnswer, QuizChoice, QuizPair, QuizPhase
from services.taste.vector.model import clamp_vector, top_genres

router = APIRouter(prefix="/quiz", tags=["quiz"])


class SeedRequest(BaseModel):
    clusterIds: list[str] = Field(min_length=1, max_length=MAX_CLUSTERS)


class GenreResponsiveRequest(BaseModel):
    clusterIds: list[str] = Field(min_length=1, max_length=MAX_CLUSTERS)
    excludePairIds: list[str] = Field(default_factory=list)
    count: int | None = Field(default=None, ge=0, le=10)


class AdaptiveRequest(BaseModel):
    vector: dict[str, float]
    usedPairIds: list[str] = Field(default_factory=list)
    count: int | None = Field(default=None, ge=0, le=20)


class AnswerPayload(BaseModel):
    pairId: str
    choice: Literal["A", "B", "both", "neither", "skip"]
    phase: Literal["fixed", "genre-responsive", "adaptive"]


class ScoreRequest(BaseModel):
    clusterIds: list[str] = Field(min_length=1, max_length=MAX_CLUSTERS)
    answers: list[AnswerPayload] = Field(max_length=50)


def pair_payload(pair: QuizPair) -> dict:
    def option(o) -> dict:
        return {
            "tmdbId": o.tmdb_id,
            "mediaType": o.media_type,
            "title": o.title,
            "year": o.year,
            "descriptor": o.descriptor,
        }

    return {
        "id": pair.id,
        "phase": pair.phase.value,
        "dimensionsTested": list(pair.dimensions_tested),
        "optionA": option(pair.option_a),
        "optionB": option(pair.option_b),
    }


def to_answers(payloads: list[AnswerPayload]) -> list[QuizAnswer]:
    return [
        QuizAnswer(pair_id=a.pairId, choice=QuizChoice(a.choice), phase=QuizPhase(a.phase))
        for a in payloads
    ]


@router.get("/clusters")
async def list_clusters(request: Request) -> dict:
    return {
        "success": True,
        "data": {
            "clusters": [
                {"id": c.id, "name": c.name, "description": c.description, "emoji": c.emoji}
                for c in TASTE_CLUSTERS
            ],
            "fixedPairs": [pair_payload(p) for p in get_fixed_pairs()],
        },
        "requestId": request.state.request_id,
    }


@router.post("/seed")
async def seed(body: SeedRequest, request: Request) -> dict:
    vector = compute_cluster_seed_vector(body.clusterIds)
    return {
        "success": True,
        "data": {
            "vector": vector.to_dict(),
            "topGenres": top_genre_keys_from_clusters(body.clusterIds),
            "homeGenres": derive_home_genre_keys(body.clusterIds),
        },
        "requestId": request.state.request_id,
    }


@router.post("/pairs/genre-responsive")
async def genre_responsive_pairs(body: GenreResponsiveRequest, request: Request) -> dict:
    settings = request.app.state.settings
    pairs = select_genre_responsive_pairs(
        top_genre_keys_from_clusters(body.clusterIds),
        exclude_pair_ids=body.excludePairIds,
        cluster_ids=body.clusterIds,
        count=body.count if body.count is not None else settings.genre_responsive_count,
    )
    return {
        "success": True,
        "data": {"pairs": [pair_payload(p) for p in pairs]},
        "requestId": request.state.request_id,
    }


@router.post("/pairs/adaptive")
async def adaptive_pairs(body: AdaptiveRequest, request: Request) -> dict:
    settings = request.app.state.settings
    pairs = select_adaptive_pairs(
        clamp_vector(body.vector),
        used_pair_ids=body.usedPairIds,
        count=body.count if body.count is not None else settings.adaptive_count,
    )
    return {
        "success": True,
        "data": {"pairs": [pair_payload(p) for p in pairs]},
        "requestId": request.state.request_id,
    }


@router.post("/score")
async def score(body: ScoreRequest, request: Request) -> dict:
    result = result_from_answers(body.clusterIds, to_answers(body.answers))
    return {
        "success": True,
        "data": {
            "seedVector": result.seed_vector.to_dict(),
            "interimVector": result.interim_vector.to_dict(),
            "vector": result.vector.to_dict(),
            "confidence": result.confidence.to_dict(),
            "topGenres": top_genres(result.vector),
        },
        "requestId": request.state.request_id,
    }
