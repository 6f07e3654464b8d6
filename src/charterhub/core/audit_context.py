"""Request origin for audit rows, carried in a contextvar.

The request-context middleware fills it; AuditService reads it when writing
an auth log entry, so services never pass IPs or request IDs around.
"""

from contextvars import ContextVar
from dataclasses import dataclass

# charterhub_auth_logs.ip_address column width (fits IPv6)
IP_ADDRESS_MAX_LENGTH = 45


@dataclass(frozen=True)
class AuditContext:
    ip_address: str | None = None
    request_id: str | None = None


NO_CONTEXT = AuditContext()

_current: ContextVar[AuditContext] = ContextVar("charterhub_audit_context", default=NO_CONTEXT)


def set_audit_context(ip_address: str | None = None, request_id: str | None = None) -> None:
    _current.set(AuditContext(ip_address=ip_address, request_id=request_id))


def get_audit_context() -> AuditContext:
    return _current.get()


def clear_audit_context() -> None:
    _current.set(NO_CONTEXT)


def client_ip(forwarded_for: str | None, client_host: str | None) -> str | None:
    """Pick the originating client address.

    The left-most X-Forwarded-For entry wins; an empty one falls back to the
    socket peer.
    """
    origin = (forwarded_for or "").split(",", 1)[0].strip() or client_host
    return origin[:IP_ADDRESS_MAX_LENGTH] if origin else None
