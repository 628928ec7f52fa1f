"""
GET /health — liveness plus which profile store is active.
"""

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict:
    return {
        "success": True,
        "data": {
            "status": "healthy",
            "version": request.app.state.settings.app_version,
            "profileStore": "redis" if request.app.state.redis is not None else "memory",
        },
        "requestId": request.state.request_id,
    }
