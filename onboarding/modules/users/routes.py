from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.users.schemas import (
    UserResponse, UserUpdate, BioUpdate, UserFlagsUpdate, PointsAdjustment
)
from onboarding.modules.users.service import UserService
from onboarding.core.dependencies import get_current_profile, require_owner
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=UserResponse)
async def get_my_profile(profile: Dict = Depends(get_current_profile)):
    """Profile of the signed-in user"""
    return UserResponse(**profile)


@router.patch("/me", response_model=UserResponse)
async def update_my_profile(
    user_data: UserUpdate,
    profile: Dict = Depends(get_current_profile),
    service: UserService = Depends(get_user_service)
):
    """Update profile/settings fields"""
    return service.update_user(profile["id"], user_data)


@router.put("/me/bio", response_model=UserResponse)
async def update_my_bio(
    bio: BioUpdate,
    profile: Dict = Depends(get_current_profile),
    service: UserService = Depends(get_user_service)
):
    """Wizard step 1: first and last name"""
    return service.update_bio(profile["id"], bio)


@router.get("", response_model=List[UserResponse])
async def list_users(
    owner: Dict = Depends(require_owner),
    service: UserService = Depends(get_user_service)
):
    """List all users (owner only)"""
    return service.list_users()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    owner: Dict = Depends(require_owner),
    service: UserService = Depends(get_user_service)
):
    """Get user by ID (owner only)"""
    return service.get_user_by_id(user_id)


@router.patch("/{user_id}/flags", response_model=UserResponse)
async def update_user_flags(
    user_id: str,
    flags: UserFlagsUpdate,
    owner: Dict = Depends(require_owner),
    service: UserService = Depends(get_user_service)
):
    """Set owner/store flags, role or department (owner only)"""
    return service.update_flags(user_id, flags)


@router.post("/{user_id}/points", response_model=UserResponse)
async def adjust_user_points(
    user_id: str,
    adjustment: PointsAdjustment,
    owner: Dict = Depends(require_owner),
    service: UserService = Depends(get_user_service)
):
    """Add or remove store points (owner only); balance floors at zero"""
    return service.adjust_points(user_id, adjustment.delta)
