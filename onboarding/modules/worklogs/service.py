from supabase import Client
from onboarding.modules.worklogs.schemas import WorklogCreate, WorklogUpdate, WorklogResponse
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from typing import List, Optional
from datetime import date
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class WorklogService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_worklog(self, data: WorklogCreate, user_id: str) -> WorklogResponse:
        try:
            result = self.supabase.table("worklogs").insert({
                **data.model_dump(mode="json"),
                "user_id": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create worklog")
            return WorklogResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create worklog")

    def list_worklogs(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[WorklogResponse]:
        """Own entries, newest day first, optionally within [start_date, end_date]"""
        try:
            query = self.supabase.table("worklogs").select("*").eq("user_id", user_id)
            if start_date:
                query = query.gte("date", start_date.isoformat())
            if end_date:
                query = query.lte("date", end_date.isoformat())
            result = query.order("date", desc=True).execute()
            return [WorklogResponse(**w) for w in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to load worklogs")

    def update_worklog(self, worklog_id: str, user_id: str, updates: WorklogUpdate) -> WorklogResponse:
        update_data = updates.model_dump(exclude_none=True, mode="json")
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            # Filtering on user_id makes someone else's entry indistinguishable from a missing one
            result = self.supabase.table("worklogs")\
                .update(update_data)\
                .eq("id", worklog_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Worklog not found")
            return WorklogResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to save worklog")

    def delete_worklog(self, worklog_id: str, user_id: str) -> None:
        try:
            result = self.supabase.table("worklogs")\
                .delete()\
                .eq("id", worklog_id)\
                .eq("user_id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Worklog not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete worklog")
