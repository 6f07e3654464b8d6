"""Tests for error-to-response mapping."""

import pytest
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.charterhub.core.exceptions import (
    CharterHubError,
    EmailInUseError,
    InvalidInputError,
    InvalidInvitationError,
    InvalidTokenError,
    StorageError,
    TokenAlreadyUsedError,
    TokenExpiredError,
    UserNotFoundError,
    setup_exception_handlers,
)

pytestmark = pytest.mark.unit


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    app.add_middleware(CorrelationIdMiddleware)

    @app.get("/boom")
    async def boom() -> None:
        raise exc

    return app


@pytest.mark.parametrize(
    ("exc", "status_code", "kind"),
    [
        (InvalidInputError(), 400, "validation_error"),
        (InvalidTokenError(), 404, "invalid_token"),
        (TokenAlreadyUsedError(customer_id=7, customer_email="a@b.com"), 409, "token_used"),
        (TokenExpiredError(), 410, "token_expired"),
        (InvalidInvitationError(), 422, "invalid_invitation"),
        (EmailInUseError(), 409, "email_in_use"),
        (UserNotFoundError(), 404, "user_not_found"),
        (StorageError(), 500, "database_error"),
    ],
)
def test_error_kinds_map_to_status(exc: CharterHubError, status_code: int, kind: str) -> None:
    with TestClient(_app_raising(exc)) as client:
        response = client.get("/boom")

    assert response.status_code == status_code
    body = response.json()
    assert body["error"] == kind
    assert body["detail"] == exc.message
    assert body["request_id"]
    assert body["request_id"] == response.headers["X-Request-ID"]


def test_token_used_carries_customer() -> None:
    exc = TokenAlreadyUsedError(customer_id=7, customer_email="a@b.com")
    with TestClient(_app_raising(exc)) as client:
        body = client.get("/boom").json()

    assert body["customer_id"] == 7
    assert body["customer_email"] == "a@b.com"


def test_storage_error_hides_cause() -> None:
    try:
        raise OperationalError("SELECT 1", {}, Exception("password=hunter2"))
    except OperationalError as cause:
        exc = StorageError()
        exc.__cause__ = cause

    with TestClient(_app_raising(exc)) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert "hunter2" not in response.text
    assert response.json()["detail"] == "A database error occurred"


def test_http_exception_keeps_headers() -> None:
    exc = HTTPException(status_code=401, detail="nope", headers={"WWW-Authenticate": "Bearer"})
    with TestClient(_app_raising(exc)) as client:
        response = client.get("/boom")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["request_id"]


def test_unhandled_exception_is_generic() -> None:
    app = _app_raising(RuntimeError("secret detail"))
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"
    assert "secret detail" not in response.text
