"""Structured logging for CharterHub.

Events are structlog dicts. Request and user identifiers travel in
contextvars, so services log plain events and the middleware decides what
context they carry. Secret-bearing keys are masked before rendering.
"""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, Processor, WrappedLogger

# Keys whose values must never reach a log sink in full
SECRET_KEYS = frozenset(
    {"password", "hashed_password", "token", "access_token", "refresh_token", "jwt_secret_key"}
)

QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "httpcore", "resend")


def token_prefix(token: str | None) -> str:
    """Shorten a secret token for log output. Never log full tokens."""
    if not token:
        return ""
    return f"{token[:8]}..."


def mask_secrets(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Replace passwords with a placeholder and tokens with their prefix."""
    for key in SECRET_KEYS.intersection(event_dict):
        value = event_dict[key]
        if key.endswith("token") and isinstance(value, str):
            event_dict[key] = value if value.endswith("...") else token_prefix(value)
        else:
            event_dict[key] = "***"
    return event_dict


def _processor_chain(debug: bool) -> list[Processor]:
    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        mask_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_logging(debug: bool = False) -> None:
    """Configure structlog on top of the standard library root logger.

    Debug mode renders colored console lines; otherwise one JSON object is
    written per event.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=_processor_chain(debug),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None, ip_address: str | None = None) -> None:
    """Attach the correlation ID and client IP to every later event of this request."""
    context = {"request_id": request_id, "client_ip": ip_address}
    bind_contextvars(**{key: value for key, value in context.items() if value})


def bind_user_context(user_id: int, role: str, email: str | None = None) -> None:
    """Attach the authenticated user to the log context.

    The email is only bound when LOG_USER_EMAILS is enabled.
    """
    from src.charterhub.core.config import get_settings

    bind_contextvars(user_id=user_id, user_role=role)
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()
