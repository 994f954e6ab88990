from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.checklists.catalogue import ONBOARDING_CHECKLIST
from onboarding.modules.checklists.schemas import (
    ChecklistItemResponse, ChecklistStepUpdate, ChecklistStatusResponse, ChecklistProgressResponse,
    DynamicChecklistCreate, DynamicChecklistUpdate, DynamicChecklistResponse,
    ChecklistWithAssignmentsResponse, AssignmentCreate, AssignmentUpdate, AssignmentResponse
)
from onboarding.modules.checklists.service import ChecklistService
from onboarding.core.dependencies import get_current_profile, require_owner, is_owner
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/checklist", tags=["checklist"])


def get_checklist_service(supabase: Client = Depends(get_supabase)) -> ChecklistService:
    return ChecklistService(supabase)


@router.get("", response_model=List[ChecklistItemResponse])
async def get_catalogue():
    """The onboarding steps every developer completes"""
    return ONBOARDING_CHECKLIST


@router.get("/status", response_model=List[ChecklistStatusResponse])
async def get_my_status(
    profile: Dict = Depends(get_current_profile),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.get_status(profile["id"])


@router.put("/status/{step}", response_model=ChecklistStatusResponse)
async def update_my_step(
    step: str,
    body: ChecklistStepUpdate,
    profile: Dict = Depends(get_current_profile),
    service: ChecklistService = Depends(get_checklist_service)
):
    """Mark a step done or not done"""
    return service.update_step(profile["id"], step, body.completed)


@router.get("/progress", response_model=ChecklistProgressResponse)
async def get_my_progress(
    profile: Dict = Depends(get_current_profile),
    service: ChecklistService = Depends(get_checklist_service)
):
    """Completion counts; is_complete gates the rest of the wizard"""
    return service.get_progress(profile["id"])


@router.get("/statuses", response_model=List[ChecklistStatusResponse])
async def get_all_statuses(
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.get_all_statuses()


@router.post("/dynamic", response_model=DynamicChecklistResponse, status_code=201)
async def create_dynamic_checklist(
    data: DynamicChecklistCreate,
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.create_checklist(data, owner["id"])


@router.get("/dynamic", response_model=List[ChecklistWithAssignmentsResponse])
async def list_dynamic_checklists(
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.list_checklists()


@router.patch("/dynamic/{checklist_id}", response_model=DynamicChecklistResponse)
async def update_dynamic_checklist(
    checklist_id: str,
    updates: DynamicChecklistUpdate,
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.update_checklist(checklist_id, updates)


@router.delete("/dynamic/{checklist_id}", status_code=204)
async def delete_dynamic_checklist(
    checklist_id: str,
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    service.delete_checklist(checklist_id)
    return None


@router.post("/assignments", response_model=AssignmentResponse, status_code=201)
async def assign_checklist(
    data: AssignmentCreate,
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.assign(data, owner["id"])


@router.get("/assignments/me", response_model=List[AssignmentResponse])
async def list_my_assignments(
    profile: Dict = Depends(get_current_profile),
    service: ChecklistService = Depends(get_checklist_service)
):
    return service.list_user_assignments(profile["id"])


@router.patch("/assignments/{assignment_id}", response_model=AssignmentResponse)
async def update_assignment(
    assignment_id: str,
    updates: AssignmentUpdate,
    profile: Dict = Depends(get_current_profile),
    service: ChecklistService = Depends(get_checklist_service)
):
    """Complete/uncomplete an assignment; owners may update anyone's"""
    return service.update_assignment(assignment_id, updates, profile["id"], is_owner(profile))


@router.delete("/assignments/{assignment_id}", status_code=204)
async def delete_assignment(
    assignment_id: str,
    owner: Dict = Depends(require_owner),
    service: ChecklistService = Depends(get_checklist_service)
):
    service.delete_assignment(assignment_id)
    return None
