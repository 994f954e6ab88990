import httpx
from onboarding.config.settings import settings
from onboarding.modules.notifications.templates import render_template
from typing import List, Optional, Union
import logging

logger = logging.getLogger(__name__)


class EmailNotConfigured(RuntimeError):
    pass


class EmailDeliveryError(RuntimeError):
    pass


class EmailService:
    """Sends transactional mail through the Resend REST API."""

    def __init__(self, api_key: Optional[str] = None, from_address: Optional[str] = None,
                 http_client: Optional[httpx.Client] = None):
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.from_address = from_address or settings.resend_from
        self.http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, to: Union[str, List[str]], subject: str, html: str) -> str:
        """Send an email and return the provider message id"""
        if not self.is_configured:
            logger.warning("RESEND_API_KEY is not set. Emails will not be sent.")
            raise EmailNotConfigured("RESEND_API_KEY is not configured")

        payload = {
            "from": self.from_address,
            "to": to if isinstance(to, list) else [to],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            if self.http_client is not None:
                response = self.http_client.post(settings.resend_api_url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=10.0) as client:
                    response = client.post(settings.resend_api_url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Email send to {payload['to']} failed: {e}")
            raise EmailDeliveryError(str(e)) from e

        message_id = response.json().get("id", "")
        logger.info(f"Email sent to {payload['to']} ({message_id})")
        return message_id

    def send_verification_code(self, email: str, code: str) -> str:
        subject, html = render_template(
            "verification_code",
            code=code,
            email=email,
            ttl_minutes=settings.otp_ttl_minutes,
        )
        return self.send(email, subject, html)


def get_email_service() -> EmailService:
    return EmailService()
