"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (Redis pool, database engine).
Middleware, CORS, the catch-all error handler and routers are all
registered here; each concern's code lives in its own module.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobhub import __version__
from jobhub.api import api_router
from jobhub.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` at shutdown.
    Redis is optional — without it the API works, minus live updates and
    rate limiting.
    """
    logger.info(
        "jobhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        admin_allowlist_size=len(settings.admin_external_ids),
    )

    from jobhub.realtime.pubsub import close_redis, init_redis
    try:
        await init_redis()
        logger.info("jobhub.redis_connected", url=settings.redis_url)
    except Exception as e:
        logger.warning("jobhub.redis_unavailable", error=str(e))

    yield

    logger.info("jobhub.shutdown")
    await close_redis()

    from jobhub.db.engine import engine
    await engine.dispose()


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log everything, reveal nothing in production."""
    logger.exception(
        "jobhub.unhandled_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
    )
    content = {"detail": "Something went wrong!"}
    if settings.environment != "production":
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="JobHub API",
        description="Job board — jobs, applications, comments and likes",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from jobhub.middleware.rate_limit import RateLimitMiddleware
    from jobhub.middleware.request_id import RequestIdMiddleware
    from jobhub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        write_rpm=settings.rate_limit_write_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-ID"],
    )

    app.add_exception_handler(Exception, unhandled_error)

    app.include_router(api_router)

    from jobhub.realtime.websocket import router as ws_router
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: jobhub.main:app)
app = create_app()
