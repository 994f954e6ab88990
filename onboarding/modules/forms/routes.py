from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.forms.schemas import (
    FormCreate, FormUpdate, FormResponse, FormDashboardItem, FormWithQuestionsResponse,
    QuestionCreate, QuestionUpdate, QuestionResponse, FormSubmitRequest, FormSubmitResponse,
    SubmissionResponse
)
from onboarding.modules.forms.service import FormService
from onboarding.core.dependencies import get_optional_user, require_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/forms", tags=["forms"])
public_router = APIRouter(prefix="/f", tags=["forms"])


def get_form_service(supabase: Client = Depends(get_supabase)) -> FormService:
    return FormService(supabase)


@router.get("", response_model=List[FormDashboardItem])
async def list_forms(
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.list_forms(owner["id"])


@router.post("", response_model=FormResponse, status_code=201)
async def create_form(
    data: FormCreate,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.create_form(data, owner["id"])


@router.get("/{form_id}", response_model=FormWithQuestionsResponse)
async def get_form(
    form_id: str,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.get_form(form_id, owner["id"])


@router.patch("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    updates: FormUpdate,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.update_form(form_id, owner["id"], updates)


@router.delete("/{form_id}", status_code=204)
async def delete_form(
    form_id: str,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    service.delete_form(form_id, owner["id"])
    return None


@router.post("/{form_id}/duplicate", response_model=FormResponse, status_code=201)
async def duplicate_form(
    form_id: str,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.duplicate_form(form_id, owner["id"])


@router.post("/{form_id}/questions", response_model=QuestionResponse, status_code=201)
async def add_question(
    form_id: str,
    data: QuestionCreate,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.add_question(form_id, owner["id"], data)


@router.patch("/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: str,
    updates: QuestionUpdate,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.update_question(question_id, owner["id"], updates)


@router.delete("/questions/{question_id}", status_code=204)
async def delete_question(
    question_id: str,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    service.delete_question(question_id, owner["id"])
    return None


@router.get("/{form_id}/responses", response_model=List[SubmissionResponse])
async def list_responses(
    form_id: str,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    return service.list_responses(form_id, owner["id"])


@router.get("/{form_id}/responses/export")
async def export_responses(
    form_id: str,
    owner: Dict = Depends(require_owner),
    service: FormService = Depends(get_form_service)
):
    """Responses as a CSV download"""
    content = service.export_responses_csv(form_id, owner["id"])
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="responses.csv"'},
    )


@public_router.get("/{slug}", response_model=FormWithQuestionsResponse)
async def get_public_form(
    slug: str,
    user: Optional[dict] = Depends(get_optional_user),
    service: FormService = Depends(get_form_service)
):
    return service.get_public_form(slug, user)


@public_router.post("/{slug}/submit", response_model=FormSubmitResponse, status_code=201)
async def submit_form(
    slug: str,
    body: FormSubmitRequest,
    request: Request,
    user: Optional[dict] = Depends(get_optional_user),
    service: FormService = Depends(get_form_service)
):
    ip = request.client.host if request.client else "0.0.0.0"
    return service.submit(slug, body, user, ip, request.headers.get("user-agent"))
