"""
Email Service - transactional mail through the Resend HTTP API.

Only verification emails are sent. Without RESEND_API_KEY the mailer logs
the message and skips delivery, which keeps local runs self-contained.
"""

from html import escape

import httpx
import structlog

from jobboard.core.config import get_settings
from jobboard.core.errors import EmailDeliveryError

logger = structlog.get_logger(__name__)


class Mailer:
    """Thin Resend client."""

    def __init__(self, api_key: str, api_url: str, sender: str, timeout: float):
        self.api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.timeout = timeout

    def send(self, to: str, subject: str, html: str) -> None:
        if not self.api_key:
            logger.warning("email_skipped_no_api_key", to=to, subject=subject)
            return

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.api_url, headers=headers, json=payload)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("email_rejected", to=to, status=e.response.status_code)
            raise EmailDeliveryError(
                f"Email provider rejected the message ({e.response.status_code})"
            ) from e
        except httpx.HTTPError as e:
            logger.error("email_transport_error", to=to, error=str(e))
            raise EmailDeliveryError("Email provider is unreachable") from e

        logger.info("email_sent", to=to, subject=subject)


def verification_email_html(user_name: str, verify_url: str, expires_minutes: int) -> str:
    url = escape(verify_url, quote=True)
    return (
        f"<p>Hi {escape(user_name)},</p>"
        "<p>Confirm your email address to finish setting up your account.</p>"
        f'<p><a href="{url}">Verify email</a></p>'
        f"<p>The link expires in {expires_minutes} minutes. If you did not sign up, ignore this email.</p>"
    )


def send_verification_email(mailer: Mailer, email: str, user_name: str, raw_token: str) -> None:
    settings = get_settings()
    verify_url = f"{settings.app_base_url}/auth/verify-email?token={raw_token}"
    mailer.send(
        to=email,
        subject="Verify your email",
        html=verification_email_html(user_name, verify_url, settings.verification_token_minutes),
    )


def get_mailer() -> Mailer:
    """FastAPI dependency - the configured mailer."""
    settings = get_settings()
    return Mailer(
        api_key=settings.resend_api_key,
        api_url=settings.resend_api_url,
        sender=settings.email_from,
        timeout=settings.email_timeout,
    )
