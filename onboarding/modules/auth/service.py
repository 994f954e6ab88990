import hashlib
import time
from supabase import Client
from onboarding.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


def github_username_from_metadata(user_metadata: Dict[str, Any]) -> str:
    """GitHub login as reported by the OAuth identity, or a placeholder."""
    metadata = user_metadata or {}
    return (
        metadata.get("user_name")
        or metadata.get("preferred_username")
        or metadata.get("login")
        or "github-user"
    )


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_github_sign_in_url(self, redirect_to: str = None) -> str:
        """Build the GitHub OAuth authorize URL (PKCE verifier is kept by the client)"""
        try:
            response = self.supabase.auth.sign_in_with_oauth({
                "provider": "github",
                "options": {"redirect_to": redirect_to or settings.oauth_redirect_url}
            })
            return response.url
        except Exception as e:
            logger.error(f"Failed to build GitHub sign-in URL: {e}")
            raise HTTPException(status_code=500, detail="Failed to start GitHub sign-in")

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """Exchange the OAuth callback code for a session"""
        try:
            auth_response = self.supabase.auth.exchange_code_for_session({
                "auth_code": code,
                "redirect_to": settings.oauth_redirect_url,
            })
        except Exception as e:
            logger.error(f"Auth callback error: {e}")
            raise HTTPException(status_code=401, detail="auth_callback_failed")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="auth_callback_failed")

        user = auth_response.user
        session = auth_response.session
        logger.info(f"Auth callback success for user: {user.email}")
        return {
            "user": self._user_to_dict(user),
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_in": session.expires_in,
        }

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user_data = self._user_to_dict(user_response.user)
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Tokens are stateless JWTs; this only drops the client-side session
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    @staticmethod
    def _user_to_dict(user) -> Dict[str, Any]:
        return {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
            "created_at": user.created_at,
            "updated_at": user.updated_at
        }
