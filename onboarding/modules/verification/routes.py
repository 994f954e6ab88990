from fastapi import APIRouter, Depends, Request
from onboarding.config.settings import settings
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.notifications.service import EmailService, get_email_service
from onboarding.modules.verification.schemas import (
    SendCodeRequest, SendCodeResponse, VerifyCodeRequest, VerifyCodeResponse, PendingCodeResponse
)
from onboarding.modules.verification.service import VerificationService
from onboarding.core.dependencies import get_current_profile, require_owner
from onboarding.core.rate_limit import limiter
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/verification", tags=["verification"])


def get_verification_service(
    supabase: Client = Depends(get_supabase),
    email_service: EmailService = Depends(get_email_service)
) -> VerificationService:
    return VerificationService(supabase, email_service)


@router.post("/send", response_model=SendCodeResponse)
@limiter.limit(settings.otp_rate_limit)
async def send_verification_code(
    request: Request,
    body: SendCodeRequest,
    profile: Dict = Depends(get_current_profile),
    service: VerificationService = Depends(get_verification_service)
):
    """Email a one-time code to a company address"""
    return service.send_code(profile, body.email)


@router.post("/verify", response_model=VerifyCodeResponse)
async def verify_email_code(
    body: VerifyCodeRequest,
    profile: Dict = Depends(get_current_profile),
    service: VerificationService = Depends(get_verification_service)
):
    """Check the submitted code and mark the company email verified"""
    return service.verify_code(profile["id"], body.code)


@router.get("/codes", response_model=List[PendingCodeResponse])
async def list_pending_codes(
    owner: Dict = Depends(require_owner),
    service: VerificationService = Depends(get_verification_service)
):
    """Outstanding codes with expiry state (owner only)"""
    return service.list_pending_codes()
