from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.performance.schemas import (
    PerformanceGoalCreate, PerformanceGoalUpdate, PerformanceGoalResponse, PerformanceGoalWithUserResponse
)
from onboarding.modules.performance.service import PerformanceService
from onboarding.core.dependencies import get_current_profile, require_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/performance", tags=["performance"])


def get_performance_service(supabase: Client = Depends(get_supabase)) -> PerformanceService:
    return PerformanceService(supabase)


@router.get("/me", response_model=List[PerformanceGoalResponse])
async def list_my_goals(
    profile: Dict = Depends(get_current_profile),
    service: PerformanceService = Depends(get_performance_service)
):
    return service.list_user_goals(profile["id"])


@router.get("/me/current", response_model=Optional[PerformanceGoalResponse])
async def get_my_current_goal(
    profile: Dict = Depends(get_current_profile),
    service: PerformanceService = Depends(get_performance_service)
):
    """Goal for the current month, or null"""
    return service.get_current_goal(profile["id"])


@router.get("", response_model=List[PerformanceGoalWithUserResponse])
async def list_all_goals(
    month_year: Optional[str] = None,
    owner: Dict = Depends(require_owner),
    service: PerformanceService = Depends(get_performance_service)
):
    return service.list_all_goals(month_year)


@router.post("", response_model=PerformanceGoalResponse, status_code=201)
async def create_goal(
    data: PerformanceGoalCreate,
    owner: Dict = Depends(require_owner),
    service: PerformanceService = Depends(get_performance_service)
):
    return service.create_goal(data, owner["id"])


@router.patch("/{goal_id}", response_model=PerformanceGoalResponse)
async def update_goal(
    goal_id: str,
    updates: PerformanceGoalUpdate,
    owner: Dict = Depends(require_owner),
    service: PerformanceService = Depends(get_performance_service)
):
    return service.update_goal(goal_id, updates)


@router.delete("/{goal_id}", status_code=204)
async def delete_goal(
    goal_id: str,
    owner: Dict = Depends(require_owner),
    service: PerformanceService = Depends(get_performance_service)
):
    service.delete_goal(goal_id)
    return None
