from supabase import Client
from onboarding.modules.checklists.catalogue import ONBOARDING_CHECKLIST, STEP_IDS, REQUIRED_STEP_IDS
from onboarding.modules.checklists.schemas import (
    ChecklistStatusResponse, ChecklistProgressResponse,
    DynamicChecklistCreate, DynamicChecklistUpdate, DynamicChecklistResponse,
    AssignmentCreate, AssignmentUpdate, AssignmentResponse, ChecklistWithAssignmentsResponse
)
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from typing import Dict, Iterable, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def compute_progress(completed_steps: Iterable[str]) -> ChecklistProgressResponse:
    """Progress over the fixed catalogue; unknown step names are ignored."""
    done = set(completed_steps) & STEP_IDS
    required_done = done & REQUIRED_STEP_IDS
    total = len(ONBOARDING_CHECKLIST)
    return ChecklistProgressResponse(
        total=total,
        completed=len(done),
        required_total=len(REQUIRED_STEP_IDS),
        required_completed=len(required_done),
        percentage=round(len(done) / total * 100, 1) if total else 0.0,
        is_complete=required_done == REQUIRED_STEP_IDS,
    )


class ChecklistService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Onboarding steps

    def get_status(self, user_id: str) -> List[ChecklistStatusResponse]:
        try:
            result = self.supabase.table("checklist_status")\
                .select("*")\
                .eq("user_id", user_id)\
                .execute()
            return [ChecklistStatusResponse(**row) for row in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch checklist status")

    def get_all_statuses(self) -> List[ChecklistStatusResponse]:
        try:
            result = self.supabase.table("checklist_status").select("*").execute()
            return [ChecklistStatusResponse(**row) for row in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch checklist statuses")

    def update_step(self, user_id: str, step: str, completed: bool) -> ChecklistStatusResponse:
        if step not in STEP_IDS:
            raise HTTPException(status_code=404, detail=f"Unknown checklist step: {step}")
        now = utc_now_iso()
        try:
            result = self.supabase.table("checklist_status")\
                .upsert({
                    "user_id": user_id,
                    "step_name": step,
                    "completed": completed,
                    "completed_at": now if completed else None,
                    "updated_at": now,
                }, on_conflict="user_id,step_name")\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update checklist step")
            return ChecklistStatusResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update checklist step")

    def get_progress(self, user_id: str) -> ChecklistProgressResponse:
        statuses = self.get_status(user_id)
        return compute_progress(s.step_name for s in statuses if s.completed)

    # Dynamic checklists

    def create_checklist(self, data: DynamicChecklistCreate, user_id: str) -> DynamicChecklistResponse:
        try:
            result = self.supabase.table("dynamic_checklists").insert({
                "title": data.title,
                "description": data.description or None,
                "category": data.category,
                "is_global": data.is_global,
                "is_active": True,
                "created_by": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create checklist")
            return DynamicChecklistResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create checklist")

    def _get_checklist(self, checklist_id: str) -> Optional[dict]:
        result = self.supabase.table("dynamic_checklists")\
            .select("*")\
            .eq("id", checklist_id)\
            .maybe_single()\
            .execute()
        return result.data if result else None

    def list_checklists(self) -> List[ChecklistWithAssignmentsResponse]:
        """All checklists, newest first, each with its assignments"""
        try:
            checklists = self.supabase.table("dynamic_checklists")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute().data or []
            if not checklists:
                return []
            assignments = self.supabase.table("user_checklist_assignments")\
                .select("*")\
                .in_("checklist_id", [c["id"] for c in checklists])\
                .execute().data or []
        except Exception as e:
            raise_db_error(e, "Failed to fetch checklists")

        by_checklist: Dict[str, List[dict]] = {}
        for a in assignments:
            by_checklist.setdefault(a["checklist_id"], []).append(a)
        return [
            ChecklistWithAssignmentsResponse(
                **c,
                assignments=[AssignmentResponse(**a) for a in by_checklist.get(c["id"], [])],
            )
            for c in checklists
        ]

    def update_checklist(self, checklist_id: str, updates: DynamicChecklistUpdate) -> DynamicChecklistResponse:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("dynamic_checklists")\
                .update(update_data)\
                .eq("id", checklist_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Checklist not found")
            return DynamicChecklistResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update checklist")

    def delete_checklist(self, checklist_id: str) -> None:
        try:
            # Assignments go with the checklist
            self.supabase.table("user_checklist_assignments")\
                .delete()\
                .eq("checklist_id", checklist_id)\
                .execute()
            result = self.supabase.table("dynamic_checklists")\
                .delete()\
                .eq("id", checklist_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Checklist not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete checklist")

    # Assignments

    def _with_checklist(self, assignment: dict) -> AssignmentResponse:
        checklist = self._get_checklist(assignment["checklist_id"])
        return AssignmentResponse(
            **assignment,
            checklist=DynamicChecklistResponse(**checklist) if checklist else None,
        )

    def assign(self, data: AssignmentCreate, assigned_by: str) -> AssignmentResponse:
        try:
            if not self._get_checklist(data.checklist_id):
                raise HTTPException(status_code=404, detail="Checklist not found")
            existing = self.supabase.table("user_checklist_assignments")\
                .select("id")\
                .eq("user_id", data.user_id)\
                .eq("checklist_id", data.checklist_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="Checklist already assigned to this user")
            result = self.supabase.table("user_checklist_assignments").insert({
                "user_id": data.user_id,
                "checklist_id": data.checklist_id,
                "assigned_by": assigned_by,
                "assigned_at": utc_now_iso(),
                "is_required": data.is_required,
                "due_date": data.due_date.isoformat() if data.due_date else None,
                "notes": data.notes or None,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to assign checklist")
            return self._with_checklist(result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to assign checklist")

    def list_user_assignments(self, user_id: str) -> List[AssignmentResponse]:
        """Assignments for a user, newest first, with the checklist merged in"""
        try:
            assignments = self.supabase.table("user_checklist_assignments")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("assigned_at", desc=True)\
                .execute().data or []
            if not assignments:
                return []
            checklists = self.supabase.table("dynamic_checklists")\
                .select("*")\
                .in_("id", list({a["checklist_id"] for a in assignments}))\
                .execute().data or []
        except Exception as e:
            raise_db_error(e, "Failed to fetch assignments")

        by_id = {c["id"]: c for c in checklists}
        return [
            AssignmentResponse(
                **a,
                checklist=DynamicChecklistResponse(**by_id[a["checklist_id"]]) if a["checklist_id"] in by_id else None,
            )
            for a in assignments
        ]

    def update_assignment(self, assignment_id: str, updates: AssignmentUpdate,
                          user_id: str, is_owner: bool = False) -> AssignmentResponse:
        try:
            result = self.supabase.table("user_checklist_assignments")\
                .select("*")\
                .eq("id", assignment_id)\
                .maybe_single()\
                .execute()
            assignment = result.data if result else None
            if not assignment or (assignment["user_id"] != user_id and not is_owner):
                raise HTTPException(status_code=404, detail="Assignment not found")

            update_data = {}
            if updates.completed is not None:
                update_data["completed_at"] = utc_now_iso() if updates.completed else None
            if updates.notes is not None:
                update_data["notes"] = updates.notes or None
            if not update_data:
                raise HTTPException(status_code=400, detail="No fields to update")

            result = self.supabase.table("user_checklist_assignments")\
                .update(update_data)\
                .eq("id", assignment_id)\
                .execute()
            return self._with_checklist(result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update assignment")

    def delete_assignment(self, assignment_id: str) -> None:
        try:
            result = self.supabase.table("user_checklist_assignments")\
                .delete()\
                .eq("id", assignment_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Assignment not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete assignment")
