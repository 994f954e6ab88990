from pydantic import BaseModel
from typing import Optional, Dict, Any


class OAuthUrlResponse(BaseModel):
    url: str
    provider: str = "github"


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: str
    github_username: str
    is_new_user: bool = False


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    profile: Dict[str, Any]
