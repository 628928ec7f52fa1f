"""
Taste engine FastAPI service — quiz, profile and ranking endpoints.

Entrypoint: uvicorn services.taste.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import timedelta

import redis.asyncio as aioredis
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from services.taste.config import settings
from services.taste.errors import ProfileNotFoundError, StaleProfileError, TasteEngineError
from services.taste.profile.service import TasteProfileService
from services.taste.profile.store import InMemoryProfileStore, RedisProfileStore
from services.taste.routers import health, profiles, quiz

logger = logging.getLogger(__name__)


def build_profile_service(store) -> TasteProfileService:
    return TasteProfileService(
        store,
        learning_rate=settings.learning_rate,
        max_interactions=settings.max_interactions,
        stale_after=timedelta(hours=settings.recompute_stale_hours),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # Redis for profile storage, in-memory if unavailable
    redis_client = None
    if settings.redis_url:
        try:
            redis_client = aioredis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
            )
            await redis_client.ping()
        except Exception as e:
            logger.warning(f"Redis unavailable, using in-memory profile store: {e}")
            redis_client = None

    if redis_client is not None:
        store = RedisProfileStore(redis_client, key_prefix=settings.redis_key_prefix)
    else:
        store = InMemoryProfileStore()

    app.state.redis = redis_client
    app.state.settings = settings
    app.state.profile_service = build_profile_service(store)

    yield

    if redis_client:
        await redis_client.aclose()


app = FastAPI(
    title="Taste Engine API",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(quiz.router)
app.include_router(profiles.router)


@app.middleware("http")
async def request_envelope_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# -- Exception Handlers --

def _error(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message},
            "requestId": getattr(request.state, "request_id", str(uuid.uuid4())),
        },
    )


@app.exception_handler(ProfileNotFoundError)
async def profile_not_found_handler(request: Request, exc: ProfileNotFoundError) -> JSONResponse:
    return _error(request, 404, exc.code, str(exc))


@app.exception_handler(StaleProfileError)
async def stale_profile_handler(request: Request, exc: StaleProfileError) -> JSONResponse:
    logger.warning("Profile write conflict: %s", exc)
    return _error(request, 409, exc.code, str(exc))


@app.exception_handler(TasteEngineError)
async def taste_engine_error_handler(request: Request, exc: TasteEngineError) -> JSONResponse:
    return _error(request, 422, exc.code, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(request, 422, "VALIDATION_ERROR", str(exc.errors()))


@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return _error(request, 404, "NOT_FOUND", "Resource not found.")


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    return _error(request, 500, "INTERNAL_ERROR", "An unexpected error occurred.")
