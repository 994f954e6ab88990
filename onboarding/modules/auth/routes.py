from fastapi import APIRouter, Depends, HTTPException
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.auth.schemas import OAuthUrlResponse, TokenResponse, CurrentUserResponse
from onboarding.modules.auth.service import AuthService, github_username_from_metadata
from onboarding.modules.users.service import UserService
from onboarding.core.dependencies import (
    get_auth_service, get_bearer_token, get_current_user, get_current_profile
)
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/github", response_model=OAuthUrlResponse)
async def github_sign_in(
    redirect_to: Optional[str] = None,
    service: AuthService = Depends(get_auth_service)
):
    """Start GitHub OAuth sign-in"""
    return OAuthUrlResponse(url=service.get_github_sign_in_url(redirect_to))


@router.get("/callback", response_model=TokenResponse)
async def auth_callback(
    code: Optional[str] = None,
    service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase)
):
    """Exchange the OAuth code for a session and provision the profile on first sign-in"""
    if not code:
        raise HTTPException(status_code=400, detail="Missing OAuth code")
    session = service.exchange_code(code)
    user = session["user"]
    users = UserService(supabase)
    is_new_user = users.find_profile(user["id"]) is None
    profile = users.ensure_profile(user["id"], github_username_from_metadata(user["user_metadata"]))
    return TokenResponse(
        access_token=session["access_token"],
        refresh_token=session["refresh_token"],
        expires_in=session["expires_in"],
        user_id=user["id"],
        github_username=profile["github_username"],
        is_new_user=is_new_user,
    )


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    profile: Dict = Depends(get_current_profile)
):
    """Current authenticated user and their profile"""
    return CurrentUserResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        user_metadata=current_user.get("user_metadata") or {},
        profile=profile,
    )


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_bearer_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}
