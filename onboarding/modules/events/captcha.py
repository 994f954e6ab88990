import httpx
from onboarding.config.settings import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def verify_recaptcha(token: Optional[str], http_client: Optional[httpx.Client] = None) -> bool:
    """Check a reCAPTCHA token with Google.

    Without a configured secret the check is off and passes. Once a secret
    is set a missing token fails.
    """
    if not settings.recaptcha_secret_key:
        return True
    if not token:
        logger.warning("Registration without reCAPTCHA token rejected")
        return False

    data = {"secret": settings.recaptcha_secret_key, "response": token}
    try:
        if http_client is not None:
            response = http_client.post(settings.recaptcha_verify_url, data=data)
        else:
            with httpx.Client(timeout=10.0) as client:
                response = client.post(settings.recaptcha_verify_url, data=data)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"reCAPTCHA verification request failed: {e}")
        return False

    return bool(response.json().get("success"))
