"""
One-time code verification of a user's company email address.

The pending code lives on the user's own row (verification_code,
verification_email, verification_expires) and is cleared once verified.
"""

import enum
import secrets
from datetime import datetime, timedelta
from supabase import Client
from fastapi import HTTPException
from onboarding.config.settings import settings
from onboarding.core.clock import parse_timestamp, utc_now
from onboarding.core.errors import raise_db_error
from onboarding.core.validation import is_company_email
from onboarding.modules.notifications.service import (
    EmailService, EmailNotConfigured, EmailDeliveryError
)
from onboarding.modules.verification.schemas import (
    SendCodeResponse, VerifyCodeResponse, PendingCodeResponse
)
from typing import List, Optional, Union
import logging

logger = logging.getLogger(__name__)


class VerificationOutcome(str, enum.Enum):
    OK = "ok"
    MISSING = "missing"
    EXPIRED = "expired"
    INVALID = "invalid"


OUTCOME_MESSAGES = {
    VerificationOutcome.MISSING: "No verification code found",
    VerificationOutcome.EXPIRED: "Verification code has expired",
    VerificationOutcome.INVALID: "Invalid verification code",
}


def generate_code(length: int = 6) -> str:
    """Numeric code without a leading zero"""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def check_verification_code(
    stored_code: Optional[str],
    submitted_code: str,
    expires: Union[str, datetime, None],
    now: Optional[datetime] = None,
) -> VerificationOutcome:
    if not stored_code or not expires:
        return VerificationOutcome.MISSING
    now = now or utc_now()
    if now > parse_timestamp(expires):
        return VerificationOutcome.EXPIRED
    if not secrets.compare_digest(stored_code, submitted_code):
        return VerificationOutcome.INVALID
    return VerificationOutcome.OK


class VerificationService:
    def __init__(self, supabase: Client, email_service: EmailService):
        self.supabase = supabase
        self.email_service = email_service

    def send_code(self, profile: dict, email: str) -> SendCodeResponse:
        """Store a fresh code on the user's row and email it"""
        domain = settings.company_email_domain
        if not is_company_email(email, domain):
            raise HTTPException(status_code=400, detail=f"Valid @{domain} email required")
        if profile.get("is_verified") and (profile.get("master_email") or "").lower() == email.lower():
            raise HTTPException(status_code=409, detail="Email already verified")

        code = generate_code(settings.otp_code_length)
        expires_at = utc_now() + timedelta(minutes=settings.otp_ttl_minutes)
        try:
            self.supabase.table("users")\
                .update({
                    "verification_code": code,
                    "verification_email": email,
                    "verification_expires": expires_at.isoformat(),
                })\
                .eq("id", profile["id"])\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to generate verification code")

        # The code is only returned to the caller when no email could be sent
        echoed_code = None
        try:
            self.email_service.send_verification_code(email, code)
        except EmailNotConfigured:
            if not settings.is_development:
                raise HTTPException(status_code=503, detail="Email delivery is not configured")
            logger.info(f"Verification code for {email}: {code}")
            echoed_code = code
        except EmailDeliveryError:
            raise HTTPException(status_code=502, detail="Failed to send verification email")

        logger.info(f"Verification code issued for user {profile['id']}")
        return SendCodeResponse(
            message="Verification code sent",
            expires_at=expires_at,
            code=echoed_code,
        )

    def verify_code(self, user_id: str, code: str) -> VerifyCodeResponse:
        code = (code or "").strip()
        if len(code) != settings.otp_code_length or not code.isdigit():
            raise HTTPException(
                status_code=400,
                detail=f"Valid {settings.otp_code_length}-digit code required"
            )
        try:
            result = self.supabase.table("users")\
                .select("verification_code, verification_email, verification_expires")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch user data")
        row = (result.data if result else None) or {}

        outcome = check_verification_code(
            row.get("verification_code") if row.get("verification_email") else None,
            code,
            row.get("verification_expires"),
        )
        if outcome is not VerificationOutcome.OK:
            raise HTTPException(status_code=400, detail=OUTCOME_MESSAGES[outcome])

        try:
            self.supabase.table("users")\
                .update({
                    "master_email": row["verification_email"],
                    "is_verified": True,
                    "verification_code": None,
                    "verification_email": None,
                    "verification_expires": None,
                    "updated_at": utc_now().isoformat(),
                })\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to update profile")

        logger.info(f"Email verified for user {user_id}")
        return VerifyCodeResponse(
            message="Email verified successfully",
            master_email=row["verification_email"],
        )

    def list_pending_codes(self, now: Optional[datetime] = None) -> List[PendingCodeResponse]:
        """Users with an outstanding code, latest expiry first"""
        try:
            result = self.supabase.table("users")\
                .select("id, github_username, first_name, last_name, verification_code, verification_email, verification_expires")\
                .not_.is_("verification_code", "null")\
                .order("verification_expires", desc=True)\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch verification codes")

        now = now or utc_now()
        pending = []
        for row in result.data or []:
            expires = parse_timestamp(row.get("verification_expires"))
            remaining = int((expires - now).total_seconds()) if expires else 0
            pending.append(PendingCodeResponse(
                **row,
                is_expired=expires is None or expires < now,
                time_remaining=max(0, remaining),
            ))
        return pending
