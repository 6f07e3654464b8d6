"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.charterhub.core.config import Settings
from src.charterhub.core.security import SecurityHeadersMiddleware

from .request_context import request_context_middleware

__all__ = ["request_context_middleware", "setup_middlewares"]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install middlewares. The last one added runs first on a request."""
    app.middleware("http")(request_context_middleware)

    app.add_middleware(SecurityHeadersMiddleware, hsts=settings.is_production)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Must wrap everything else so request_context sees the correlation ID
    app.add_middleware(CorrelationIdMiddleware)
