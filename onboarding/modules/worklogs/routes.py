from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.worklogs.schemas import WorklogCreate, WorklogUpdate, WorklogResponse
from onboarding.modules.worklogs.service import WorklogService
from onboarding.core.dependencies import get_current_profile
from supabase import Client
from typing import List, Dict, Optional
from datetime import date

router = APIRouter(prefix="/worklogs", tags=["worklogs"])


def get_worklog_service(supabase: Client = Depends(get_supabase)) -> WorklogService:
    return WorklogService(supabase)


@router.get("", response_model=List[WorklogResponse])
async def list_worklogs(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    profile: Dict = Depends(get_current_profile),
    service: WorklogService = Depends(get_worklog_service)
):
    return service.list_worklogs(profile["id"], start_date, end_date)


@router.post("", response_model=WorklogResponse, status_code=201)
async def create_worklog(
    data: WorklogCreate,
    profile: Dict = Depends(get_current_profile),
    service: WorklogService = Depends(get_worklog_service)
):
    return service.create_worklog(data, profile["id"])


@router.patch("/{worklog_id}", response_model=WorklogResponse)
async def update_worklog(
    worklog_id: str,
    updates: WorklogUpdate,
    profile: Dict = Depends(get_current_profile),
    service: WorklogService = Depends(get_worklog_service)
):
    return service.update_worklog(worklog_id, profile["id"], updates)


@router.delete("/{worklog_id}", status_code=204)
async def delete_worklog(
    worklog_id: str,
    profile: Dict = Depends(get_current_profile),
    service: WorklogService = Depends(get_worklog_service)
):
    service.delete_worklog(worklog_id, profile["id"])
    return None
