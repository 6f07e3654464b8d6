"""Invitation emails sent through Resend."""

import asyncio
import html

import resend
from resend.exceptions import ResendError

from src.charterhub.core.config import get_settings
from src.charterhub.core.logging import get_logger

logger = get_logger(__name__)

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #1f2937; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #0e7490; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_MUTED_STYLE = "color: #6b7280; font-size: 14px;"


def build_invitation_url(token: str) -> str:
    settings = get_settings()
    return f"{settings.app_url}/register?invitation={token}"


async def send_invitation_email(to: str, token: str, customer_name: str, expire_days: int) -> bool:
    """Send a registration invitation to a charter customer.

    The Resend SDK is blocking, so the request runs in a worker thread and is
    abandoned after EMAIL_SEND_TIMEOUT_SECONDS.

    Args:
        to: Recipient email address
        token: Invitation token (plaintext, included in the URL)
        customer_name: Name used in the greeting, may be empty
        expire_days: Days until the invitation expires

    Returns:
        True if the email was sent (or only logged because no API key is set),
        False on error. Invitation creation never fails because of email.
    """
    settings = get_settings()
    invitation_url = build_invitation_url(token)

    if not settings.resend_api_key:
        logger.warning(
            "RESEND_API_KEY not set - invitation email not sent",
            to=to,
            email_type="invitation",
        )
        return True

    resend.api_key = settings.resend_api_key
    message: resend.Emails.SendParams = {
        "from": settings.email_from,
        "to": [to],
        "subject": f"Complete your {settings.app_name} registration",
        "html": _invitation_html(customer_name, invitation_url, expire_days),
    }

    try:
        await asyncio.wait_for(
            asyncio.to_thread(resend.Emails.send, message),
            timeout=settings.email_send_timeout_seconds,
        )
    except TimeoutError:
        logger.error(
            "Invitation email timed out", to=to, timeout=settings.email_send_timeout_seconds
        )
        return False
    except (ResendError, OSError) as e:
        logger.error("Failed to send invitation email", to=to, error=str(e))
        return False

    logger.info("Invitation email sent", to=to)
    return True


def _invitation_html(customer_name: str, invitation_url: str, expire_days: int) -> str:
    greeting = f"Hi {html.escape(customer_name)}," if customer_name else "Hello,"
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #0e7490; margin-bottom: 24px;">Your charter account is ready</h1>
    <p>{greeting}</p>
    <p>Your charter team has set up an account for you. Choose a password to
    view your bookings and documents:</p>
    <p style="margin: 32px 0;">
        <a href="{invitation_url}" style="{_BUTTON_STYLE}">Complete registration</a>
    </p>
    <p style="{_MUTED_STYLE}">
        This link can be used once and expires in {expire_days} days.
    </p>
</body>
</html>"""
