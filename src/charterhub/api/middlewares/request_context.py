"""Per-request context shared by structured logs and audit rows."""

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.charterhub.core.audit_context import (
    clear_audit_context,
    client_ip,
    set_audit_context,
)
from src.charterhub.core.logging import bind_request_context, clear_request_context


async def request_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Bind request ID and client IP for the duration of one request.

    Both contexts are reset on entry and exit so nothing leaks between
    requests served by the same task.
    """
    clear_request_context()
    clear_audit_context()

    request_id = correlation_id.get()
    ip_address = client_ip(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )
    bind_request_context(request_id, ip_address)
    set_audit_context(ip_address=ip_address, request_id=request_id)

    try:
        return await call_next(request)
    finally:
        clear_audit_context()
        clear_request_context()
