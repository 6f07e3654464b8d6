"""Health endpoint and Prometheus metrics."""

import secrets
import time

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.charterhub.api.dependencies.db import DBSession
from src.charterhub.core.config import get_settings
from src.charterhub.core.logging import get_logger
from src.charterhub.core.redis import get_redis

logger = get_logger(__name__)


async def check_database(session: AsyncSession) -> str:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check database failure", error=str(e))
        return "unhealthy"
    return "healthy"


async def check_redis() -> str:
    redis = await get_redis()
    if redis is None:
        return "not_configured"
    try:
        await redis.ping()  # type: ignore[misc]
    except RedisError as e:
        logger.warning("Health check redis failure", error=str(e))
        return "unhealthy"
    return "healthy"


def overall_status(database: str, redis: str) -> str:
    """The database is required. A broken Redis only degrades the service."""
    if database != "healthy":
        return "unhealthy"
    if redis == "unhealthy":
        return "degraded"
    return "healthy"


def setup_health_endpoint(app: FastAPI) -> None:
    @app.get("/health", tags=["health"])
    async def health(session: DBSession) -> JSONResponse:
        database = await check_database(session)
        redis = await check_redis()
        summary = overall_status(database, redis)
        return JSONResponse(
            status_code=status.HTTP_200_OK if summary == "healthy" else 503,
            content={
                "status": summary,
                "database": database,
                "redis": redis,
                "timestamp": time.time(),
            },
        )


def setup_metrics(app: FastAPI) -> None:
    """Expose /metrics, guarded by X-Metrics-Key when METRICS_API_KEY is set."""
    expected_key = get_settings().metrics_api_key
    instrumentator = Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app)

    if not expected_key:
        instrumentator.expose(app, endpoint="/metrics")
        return

    metrics_key = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def require_metrics_key(api_key: str | None = Depends(metrics_key)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected_key):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(require_metrics_key)])
