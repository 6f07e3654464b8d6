"""CharterHub API application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.charterhub.api.middlewares import setup_middlewares
from src.charterhub.api.v1.router import api_router
from src.charterhub.core.config import Settings, get_settings
from src.charterhub.core.db import dispose_engine
from src.charterhub.core.exceptions import setup_exception_handlers
from src.charterhub.core.health import setup_health_endpoint, setup_metrics
from src.charterhub.core.logging import get_logger, setup_logging
from src.charterhub.core.rate_limit import limiter
from src.charterhub.core.redis import close_redis

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "auth", "description": "Invited registration, login, refresh and logout"},
    {"name": "invitations", "description": "Create, validate and consume customer invitations"},
    {"name": "users", "description": "The authenticated user's profile"},
    {"name": "health", "description": "Liveness and dependency status"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting application", app_name=settings.app_name, app_env=settings.app_env)

    yield

    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


def _docs_urls(settings: Settings) -> dict[str, str | None]:
    if not settings.enable_openapi:
        return {"docs_url": None, "redoc_url": None, "openapi_url": None}
    return {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Customer invitations and session credentials for CharterHub",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        **_docs_urls(settings),
    )

    setup_exception_handlers(app)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    setup_middlewares(app, settings)

    app.include_router(api_router)
    setup_health_endpoint(app)
    setup_metrics(app)

    return app


app = create_app()
