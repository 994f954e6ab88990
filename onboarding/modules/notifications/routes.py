from fastapi import APIRouter, Depends, HTTPException
from onboarding.modules.notifications.schemas import EmailNotificationRequest, EmailNotificationResponse
from onboarding.modules.notifications.service import (
    EmailService, EmailNotConfigured, EmailDeliveryError, get_email_service
)
from onboarding.modules.notifications.templates import render_template
from onboarding.core.dependencies import require_owner
from typing import Dict

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/email", response_model=EmailNotificationResponse)
async def send_email_notification(
    request: EmailNotificationRequest,
    owner: Dict = Depends(require_owner),
    service: EmailService = Depends(get_email_service)
):
    """Send raw HTML or a named template (owner only)"""
    if request.html:
        html = request.html
    elif request.type == "verification_code":
        data = request.data or {}
        if not data.get("code") or not data.get("email"):
            raise HTTPException(status_code=400, detail="verification code and email required")
        _, html = render_template(
            "verification_code", code=data["code"], email=data["email"],
            ttl_minutes=data.get("ttl_minutes", 10),
        )
    else:
        raise HTTPException(status_code=400, detail="unsupported email type")

    try:
        message_id = service.send(request.to, request.subject, html)
    except EmailNotConfigured as e:
        raise HTTPException(status_code=503, detail=str(e))
    except EmailDeliveryError as e:
        raise HTTPException(status_code=502, detail=f"Email send failed: {e}")
    return EmailNotificationResponse(id=message_id)
