from supabase import Client
from onboarding.modules.users.schemas import (
    UserResponse, UserUpdate, BioUpdate, UserFlagsUpdate
)
from onboarding.core.errors import raise_db_error
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from onboarding.core.clock import utc_now_iso
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Raw profile row or None"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
            return result.data if result else None
        except Exception as e:
            raise_db_error(e, "Failed to fetch user profile")

    def ensure_profile(self, user_id: str, github_username: str) -> Dict[str, Any]:
        """Return the profile for user_id, creating it on first sign-in."""
        existing = self.find_profile(user_id)
        if existing:
            return existing
        try:
            now = utc_now_iso()
            result = self.supabase.table("users").insert({
                "id": user_id,
                "github_username": github_username or "github-user",
                "is_owner": False,
                "is_verified": False,
                "is_store_user": False,
                "store_points": 0,
                "created_at": now,
                "updated_at": now,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create user profile")
            logger.info(f"Provisioned profile for {github_username} ({user_id})")
            return result.data[0]
        except Exception as e:
            raise_db_error(e, "Failed to create user profile")

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        profile = self.find_profile(user_id)
        if not profile:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**profile)

    def _write_profile(self, user_id: str, update_data: Dict[str, Any]) -> UserResponse:
        """Update the row, inserting it when the user has no profile yet"""
        try:
            update_data = {**update_data, "updated_at": utc_now_iso()}
            if not self.find_profile(user_id):
                result = self.supabase.table("users").insert({
                    "id": user_id,
                    "github_username": "github-user",
                    **update_data,
                    "created_at": update_data["updated_at"],
                }).execute()
            else:
                result = self.supabase.table("users")\
                    .update(update_data)\
                    .eq("id", user_id)\
                    .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            return UserResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update profile")

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update the editable profile/settings fields"""
        return self._write_profile(user_id, user_data.model_dump(exclude_none=True))

    def update_bio(self, user_id: str, bio: BioUpdate) -> UserResponse:
        return self._write_profile(user_id, {
            "first_name": bio.first_name,
            "last_name": bio.last_name,
        })

    def update_flags(self, user_id: str, flags: UserFlagsUpdate) -> UserResponse:
        """Owner-only fields"""
        update_data = flags.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        self.get_user_by_id(user_id)
        return self._write_profile(user_id, update_data)

    def list_users(self) -> List[UserResponse]:
        """All profiles, newest first"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            return [UserResponse(**user) for user in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch users")

    def get_user_summaries(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """Map user id -> display fields for joining onto tickets and goals"""
        ids = list({uid for uid in user_ids if uid})
        if not ids:
            return {}
        try:
            result = self.supabase.table("users")\
                .select("id, first_name, last_name, github_username, department")\
                .in_("id", ids)\
                .execute()
            return {
                u["id"]: {
                    "id": u["id"],
                    "first_name": u.get("first_name"),
                    "last_name": u.get("last_name"),
                    "github_username": u.get("github_username"),
                    "department": u.get("department"),
                }
                for u in result.data or []
            }
        except Exception as e:
            raise_db_error(e, "Failed to fetch users")

    def adjust_points(self, user_id: str, delta: int) -> UserResponse:
        """Add delta to the store balance; the balance never drops below zero."""
        current = self.get_user_by_id(user_id)
        next_points = max(0, (current.store_points or 0) + delta)
        try:
            result = self.supabase.table("users")\
                .update({"store_points": next_points, "updated_at": utc_now_iso()})\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            logger.info(f"Adjusted points for {user_id} by {delta}: {current.store_points} -> {next_points}")
            return UserResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to adjust points")
