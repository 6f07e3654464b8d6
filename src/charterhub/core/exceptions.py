"""Domain errors and exception handlers with request_id in responses."""

from enum import Enum
from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.charterhub.core.logging import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    """Machine-readable error tags returned to API clients."""

    VALIDATION_ERROR = "validation_error"
    INVALID_TOKEN = "invalid_token"
    TOKEN_USED = "token_used"
    TOKEN_EXPIRED = "token_expired"
    INVALID_INVITATION = "invalid_invitation"
    EMAIL_IN_USE = "email_in_use"
    USER_NOT_FOUND = "user_not_found"
    DATABASE_ERROR = "database_error"


class CharterHubError(Exception):
    """Base class for errors raised by services and mapped at the HTTP boundary."""

    kind: ErrorKind = ErrorKind.DATABASE_ERROR
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)

    def extra(self) -> dict[str, Any]:
        """Additional fields for the error response body."""
        return {}


class InvitationError(CharterHubError):
    """Raised when a presented invitation token cannot be used."""


class InvalidInputError(InvitationError):
    kind = ErrorKind.VALIDATION_ERROR
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class InvalidTokenError(InvitationError):
    kind = ErrorKind.INVALID_TOKEN
    status_code = status.HTTP_404_NOT_FOUND
    message = "Invalid invitation token"


class TokenAlreadyUsedError(InvitationError):
    """The invitation was already consumed.

    Carries the customer reference so clients can redirect to login instead of
    failing hard.
    """

    kind = ErrorKind.TOKEN_USED
    status_code = status.HTTP_409_CONFLICT
    message = "This invitation has already been used"

    def __init__(self, customer_id: int | None, customer_email: str, message: str | None = None):
        super().__init__(message)
        self.customer_id = customer_id
        self.customer_email = customer_email

    def extra(self) -> dict[str, Any]:
        return {"customer_id": self.customer_id, "customer_email": self.customer_email}


class TokenExpiredError(InvitationError):
    kind = ErrorKind.TOKEN_EXPIRED
    status_code = status.HTTP_410_GONE
    message = "This invitation has expired"


class InvalidInvitationError(InvitationError):
    kind = ErrorKind.INVALID_INVITATION
    status_code = 422
    message = "Invalid invitation data"


class EmailInUseError(CharterHubError):
    kind = ErrorKind.EMAIL_IN_USE
    status_code = status.HTTP_409_CONFLICT
    message = "Email address is already in use"


class UserNotFoundError(CharterHubError):
    kind = ErrorKind.USER_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class StorageError(CharterHubError):
    """Connection or transaction failure. Details stay in server logs."""

    kind = ErrorKind.DATABASE_ERROR
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "A database error occurred"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(CharterHubError)
    async def charterhub_error_handler(request: Request, exc: CharterHubError) -> JSONResponse:
        request_id = correlation_id.get()
        if isinstance(exc, StorageError):
            logger.error(
                "Storage error",
                request_id=request_id,
                path=request.url.path,
                error=str(exc.__cause__) if exc.__cause__ else exc.message,
            )
        else:
            logger.info(
                "Request rejected",
                kind=exc.kind.value,
                path=request.url.path,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.kind.value,
                "detail": exc.message,
                "request_id": request_id,
                **exc.extra(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
