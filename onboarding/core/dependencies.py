"""
Core dependencies for route protection.

Every owner-only route depends on ``require_owner`` instead of repeating the
session lookup and ``is_owner`` query inline.
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.auth.service import AuthService, github_username_from_metadata
from onboarding.modules.users.service import UserService
from supabase import Client
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache so the profile is fetched once per request."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[dict]:
    """Current user when a valid token is sent, otherwise None (public routes)."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def get_current_profile(
    request: Request,
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
) -> dict:
    """Profile row of the signed-in user, provisioned on first use."""
    cache = _get_request_cache(request)
    if "profile" in cache:
        return cache["profile"]
    profile = UserService(supabase).ensure_profile(
        user_data["id"],
        github_username_from_metadata(user_data.get("user_metadata")),
    )
    cache["profile"] = profile
    return profile


def is_owner(profile: Optional[dict]) -> bool:
    return bool(profile and profile.get("is_owner"))


def require_owner(profile: dict = Depends(get_current_profile)) -> dict:
    """Dependency that rejects non-owners with 403"""
    if not is_owner(profile):
        logger.warning(f"Owner route denied for user {profile.get('id')}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Owner privileges required"
        )
    return profile
