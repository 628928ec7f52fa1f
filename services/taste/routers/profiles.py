"""
Taste profile endpoints.

POST   /profiles/{user_id}/init          — create from clusters or picked genres
GET    /profiles/{user_id}               — current profile (recomputed first if stale)
POST   /profiles/{user_id}/quiz          — install quiz answers as the baseline
POST   /profiles/{user_id}/interactions  — blend one interaction
POST   /profiles/{user_id}/recompute     — rebuild from baseline + interaction log
POST   /profiles/{user_id}/rank          — rank candidate titles against the profile
DELETE /profiles/{user_id}               — drop the profile
"""

from typing import Literal

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field, model_validator

from services.taste.clusters import MAX_CLUSTERS
from services.taste.interactions.content_mapping import ContentMetadata, content_to_vector
from services.taste.profile.service import TasteProfileService
from services.taste.profile.types import TasteProfile
from services.taste.quiz.session import result_from_answers
from services.taste.ranking import Candidate, rank_candidates
from services.taste.routers.quiz import AnswerPayload, to_answers
from services.taste.vector.model import top_genres

router = APIRouter(prefix="/profiles", tags=["profiles"])


class InitRequest(BaseModel):
    clusterIds: list[str] | None = Field(default=None, min_length=1, max_length=MAX_CLUSTERS)
    genres: list[str] | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _one_source(self) -> "InitRequest":
        if (self.clusterIds is None) == (self.genres is None):
            raise ValueError("provide exactly one of clusterIds or genres")
        return self


class QuizSubmission(BaseModel):
    clusterIds: list[str] = Field(min_length=1, max_length=MAX_CLUSTERS)
    answers: list[AnswerPayload] = Field(max_length=50)


class ContentPayload(BaseModel):
    genreIds: list[int] = Field(default_factory=list)
    popularity: float | None = None
    voteCount: int | None = None
    releaseYear: int | None = None
    originalLanguage: str | None = None
    runtime: int | None = None

    def to_metadata(self) -> ContentMetadata:
        return ContentMetadata(
            genre_ids=tuple(self.genreIds),
            popularity=self.popularity,
            vote_count=self.voteCount,
            release_year=self.releaseYear,
            original_language=self.originalLanguage,
            runtime=self.runtime,
        )


class InteractionRequest(ContentPayload):
    contentId: int
    contentType: Literal["movie", "tv"]
    action: Literal["thumbs_up", "thumbs_down", "watchlist_add", "watched", "removed"]


class RankCandidate(ContentPayload):
    contentId: str


class RankRequest(BaseModel):
    candidates: list[RankCandidate] = Field(max_length=500)
    limit: int | None = Field(default=None, ge=1, le=500)
    useConfidence: bool = True


def _service(request: Request) -> TasteProfileService:
    return request.app.state.profile_service


def profile_payload(profile: TasteProfile) -> dict:
    return {
        "userId": profile.user_id,
        "vector": profile.vector.to_dict(),
        "confidence": profile.confidence.to_dict(),
        "topGenres": top_genres(profile.vector),
        "clusterIds": list(profile.cluster_ids),
        "quizCompleted": profile.quiz_completed,
        "interactionCount": len(profile.interaction_log),
        "lastUpdated": profile.last_updated.isoformat(),
        "revision": profile.revision,
    }


def _ok(request: Request, data: dict) -> dict:
    return {"success": True, "data": data, "requestId": request.state.request_id}


@router.post("/{user_id}/init")
async def init_profile(user_id: str, body: InitRequest, request: Request) -> dict:
    service = _service(request)
    if body.clusterIds is not None:
        profile = await service.initialize_from_clusters(user_id, body.clusterIds)
    else:
        profile = await service.initialize_from_genres(user_id, body.genres)
    return _ok(request, profile_payload(profile))


@router.get("/{user_id}")
async def get_profile(
    user_id: str,
    request: Request,
    refresh: bool = Query(default=True, description="Recompute first if the profile is stale"),
) -> dict:
    service = _service(request)
    if refresh:
        profile, recomputed = await service.recompute_if_stale(user_id)
    else:
        profile, recomputed = await service.get_profile(user_id), False
    return _ok(request, {**profile_payload(profile), "recomputed": recomputed})


@router.post("/{user_id}/quiz")
async def submit_quiz(user_id: str, body: QuizSubmission, request: Request) -> dict:
    result = result_from_answers(body.clusterIds, to_answers(body.answers))
    profile = await _service(request).save_quiz_results(user_id, result)
    return _ok(request, profile_payload(profile))


@router.post("/{user_id}/interactions")
async def record_interaction(user_id: str, body: InteractionRequest, request: Request) -> dict:
    profile = await _service(request).record_interaction(
        user_id,
        content_id=body.contentId,
        content_type=body.contentType,
        action=body.action,
        metadata=body.to_metadata(),
    )
    return _ok(request, profile_payload(profile))


@router.post("/{user_id}/recompute")
async def recompute(user_id: str, request: Request) -> dict:
    profile = await _service(request).recompute(user_id)
    return _ok(request, profile_payload(profile))


@router.post("/{user_id}/rank")
async def rank(user_id: str, body: RankRequest, request: Request) -> dict:
    profile = await _service(request).get_profile(user_id)
    candidates = [
        Candidate(content_id=c.contentId, vector=content_to_vector(c.to_metadata()))
        for c in body.candidates
    ]
    ranked = rank_candidates(
        profile.vector,
        candidates,
        confidence=profile.confidence if body.useConfidence else None,
        limit=body.limit,
    )
    return _ok(request, {
        "results": [
            {"contentId": r.content_id, "score": r.score, "reason": r.reason}
            for r in ranked
        ],
        "count": len(ranked),
    })


@router.delete("/{user_id}")
async def delete_profile(user_id: str, request: Request) -> dict:
    await _service(request).clear(user_id)
    return _ok(request, {"userId": user_id, "deleted": True})
