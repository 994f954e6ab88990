from supabase import Client
from onboarding.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketResponse, TicketWithUserResponse
)
from onboarding.modules.users.schemas import UserSummary
from onboarding.modules.users.service import UserService
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

_FINISHED = ("resolved", "closed")


def resolved_at_for(new_status: str, current_resolved_at: Optional[str], now: str) -> Optional[str]:
    """resolved_at after a status change: stamped on resolve, kept on close, cleared on reopen."""
    if new_status == "resolved":
        return now
    if new_status == "closed":
        return current_resolved_at or now
    return None


class TicketService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_ticket(self, data: TicketCreate, user_id: str) -> TicketResponse:
        try:
            now = utc_now_iso()
            result = self.supabase.table("tickets").insert({
                "user_id": user_id,
                "title": data.title,
                "description": data.description,
                "category": data.category,
                "priority": data.priority,
                "status": "open",
                "created_at": now,
                "updated_at": now,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create ticket")
            logger.info(f"Ticket {result.data[0]['id']} opened by {user_id}")
            return TicketResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create ticket")

    def list_user_tickets(self, user_id: str) -> List[TicketResponse]:
        try:
            result = self.supabase.table("tickets")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return [TicketResponse(**t) for t in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch tickets")

    def list_all_tickets(self, status: Optional[str] = None) -> List[TicketWithUserResponse]:
        """All tickets with the submitter's user record joined on"""
        try:
            query = self.supabase.table("tickets").select("*")
            if status:
                query = query.eq("status", status)
            tickets = query.order("created_at", desc=True).execute().data or []
        except Exception as e:
            raise_db_error(e, "Failed to fetch tickets")

        users = UserService(self.supabase).get_user_summaries([t["user_id"] for t in tickets])
        return [
            TicketWithUserResponse(
                **t,
                user=UserSummary(**users.get(t["user_id"], {"id": t["user_id"]})),
            )
            for t in tickets
        ]

    def get_ticket(self, ticket_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("tickets")\
                .select("*")\
                .eq("id", ticket_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch ticket")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Ticket not found")
        return result.data

    def update_ticket(self, ticket_id: str, updates: TicketUpdate) -> TicketResponse:
        update_data = updates.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        current = self.get_ticket(ticket_id)
        now = utc_now_iso()
        new_status = update_data.get("status")
        if new_status and new_status != current["status"]:
            update_data["resolved_at"] = resolved_at_for(new_status, current.get("resolved_at"), now)
        update_data["updated_at"] = now
        try:
            result = self.supabase.table("tickets")\
                .update(update_data)\
                .eq("id", ticket_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Ticket not found")
            if new_status in _FINISHED:
                logger.info(f"Ticket {ticket_id} {new_status}")
            return TicketResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update ticket")

    def delete_ticket(self, ticket_id: str) -> None:
        try:
            result = self.supabase.table("tickets")\
                .delete()\
                .eq("id", ticket_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Ticket not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete ticket")
