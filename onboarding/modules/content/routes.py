from fastapi import APIRouter, Depends
from onboarding.modules.content.schemas import WelcomeTextResponse, ProcessOverviewResponse
from onboarding.modules.content.service import ContentService, get_content_service

router = APIRouter(prefix="/content", tags=["content"])


@router.get("/welcome", response_model=WelcomeTextResponse, response_model_by_alias=True)
async def get_welcome_text(service: ContentService = Depends(get_content_service)):
    """Home page welcome text (markdown)"""
    return WelcomeTextResponse(welcome_text=service.get_welcome_text())


@router.get("/process-overview", response_model=ProcessOverviewResponse)
async def get_process_overview(service: ContentService = Depends(get_content_service)):
    return ProcessOverviewResponse(steps=service.get_process_steps())
