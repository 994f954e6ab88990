from supabase import Client
from onboarding.modules.performance.metrics import calculate_performance_percentage, get_current_month_year
from onboarding.modules.performance.schemas import (
    PerformanceGoalCreate, PerformanceGoalUpdate, PerformanceGoalResponse, PerformanceGoalWithUserResponse
)
from onboarding.modules.users.schemas import UserSummary
from onboarding.modules.users.service import UserService
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _with_percentage(goal: Dict[str, Any]) -> Dict[str, Any]:
    return {
        **goal,
        "monthly_checklist": goal.get("monthly_checklist") or [],
        "percentage": calculate_performance_percentage(
            goal.get("completed_hours") or 0,
            goal.get("target_hours") or 0,
            goal.get("completed_story_points") or 0,
            goal.get("target_story_points") or 0,
        ),
    }


class PerformanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_goal(self, data: PerformanceGoalCreate, created_by: str) -> PerformanceGoalResponse:
        try:
            existing = self.supabase.table("performance_goals")\
                .select("id")\
                .eq("user_id", data.user_id)\
                .eq("month_year", data.month_year)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="A goal already exists for this user and month")
            result = self.supabase.table("performance_goals").insert({
                "user_id": data.user_id,
                "month_year": data.month_year,
                "target_hours": data.target_hours,
                "target_story_points": data.target_story_points,
                "completed_hours": 0,
                "completed_story_points": 0,
                "monthly_checklist": data.monthly_checklist,
                "created_by": created_by,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create performance goal")
            return PerformanceGoalResponse(**_with_percentage(result.data[0]))
        except Exception as e:
            raise_db_error(e, "Failed to create performance goal")

    def list_user_goals(self, user_id: str) -> List[PerformanceGoalResponse]:
        try:
            result = self.supabase.table("performance_goals")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("month_year", desc=True)\
                .execute()
            return [PerformanceGoalResponse(**_with_percentage(g)) for g in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch performance goals")

    def get_current_goal(self, user_id: str) -> Optional[PerformanceGoalResponse]:
        month_year = get_current_month_year()
        for goal in self.list_user_goals(user_id):
            if goal.month_year == month_year:
                return goal
        return None

    def list_all_goals(self, month_year: Optional[str] = None) -> List[PerformanceGoalWithUserResponse]:
        """Every goal with the user's record joined on"""
        try:
            query = self.supabase.table("performance_goals").select("*")
            if month_year:
                query = query.eq("month_year", month_year)
            goals = query.order("month_year", desc=True).execute().data or []
        except Exception as e:
            raise_db_error(e, "Failed to fetch performance goals")

        users = UserService(self.supabase).get_user_summaries([g["user_id"] for g in goals])
        return [
            PerformanceGoalWithUserResponse(
                **_with_percentage(g),
                user=UserSummary(**users.get(g["user_id"], {"id": g["user_id"]})),
            )
            for g in goals
        ]

    def update_goal(self, goal_id: str, updates: PerformanceGoalUpdate) -> PerformanceGoalResponse:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("performance_goals")\
                .update(update_data)\
                .eq("id", goal_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Performance goal not found")
            return PerformanceGoalResponse(**_with_percentage(result.data[0]))
        except Exception as e:
            raise_db_error(e, "Failed to update performance goal")

    def delete_goal(self, goal_id: str) -> None:
        try:
            result = self.supabase.table("performance_goals")\
                .delete()\
                .eq("id", goal_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Performance goal not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete performance goal")
