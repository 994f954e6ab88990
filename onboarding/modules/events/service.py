from supabase import Client
from onboarding.modules.events.captcha import verify_recaptcha
from onboarding.modules.events.schemas import (
    EventCreate, EventUpdate, EventResponse, EventWithCountResponse,
    EventRegistrationRequest, EventRegistrationResponse, ParticipantResponse, TicketView
)
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from onboarding.core.validation import is_valid_email
from postgrest.exceptions import APIError
from typing import Any, Callable, Dict, List, Optional
from collections import Counter
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def _first(data: Any) -> Optional[Dict[str, Any]]:
    """Database functions may return a single row or a one-element list"""
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


class EventService:
    def __init__(self, supabase: Client, captcha: Callable[[Optional[str]], bool] = verify_recaptcha):
        self.supabase = supabase
        self.captcha = captcha

    # Public

    def list_published_events(self) -> List[EventResponse]:
        """Published, active events that have not started yet, soonest first"""
        try:
            result = self.supabase.table("events")\
                .select("*")\
                .eq("is_published", True)\
                .eq("is_active", True)\
                .gte("event_date", utc_now_iso())\
                .order("event_date")\
                .execute()
            return [EventResponse(**e) for e in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch events")

    def get_published_event(self, event_id: str) -> EventResponse:
        try:
            result = self.supabase.table("events")\
                .select("*")\
                .eq("id", event_id)\
                .eq("is_published", True)\
                .eq("is_active", True)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Event not found", status_code=404)
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Event not found")
        return EventResponse(**result.data)

    def register(self, data: EventRegistrationRequest) -> EventRegistrationResponse:
        if not data.event_id or not data.full_name.strip() or not data.email or not data.gdpr_consent:
            raise HTTPException(
                status_code=400,
                detail="Event ID, full name, email, and GDPR consent are required"
            )
        if not is_valid_email(data.email):
            raise HTTPException(status_code=400, detail="Invalid email format")
        if not self.captcha(data.recaptcha_token):
            raise HTTPException(status_code=400, detail="reCAPTCHA verification failed")

        try:
            result = self.supabase.rpc("register_for_event", {
                "p_event_id": data.event_id,
                "p_full_name": data.full_name.strip(),
                "p_email": data.email.strip(),
                "p_title": data.title or None,
                "p_company": data.company or None,
                "p_gdpr_consent": data.gdpr_consent,
            }).execute()
        except APIError as e:
            # The function raises for full or closed events; its message is user facing
            logger.warning(f"Registration for event {data.event_id} rejected: {e.message}")
            raise HTTPException(status_code=400, detail=e.message or "Registration failed")
        except Exception as e:
            raise_db_error(e, "Registration failed")

        registration = _first(result.data)
        if not registration:
            raise HTTPException(status_code=500, detail="Registration failed")
        logger.info(f"Registered {data.email} for event {data.event_id} ({registration.get('reference_number')})")
        return EventRegistrationResponse(registration=registration)

    def get_ticket_by_reference(self, reference_number: str) -> TicketView:
        try:
            result = self.supabase.rpc("get_participant_by_reference", {
                "p_reference_number": reference_number
            }).execute()
        except Exception as e:
            raise_db_error(e, "Participant not found", status_code=404)
        participant = _first(result.data)
        if not participant:
            raise HTTPException(status_code=404, detail="Participant not found")
        return TicketView(**participant)

    def get_tickets_by_email(self, email: str) -> List[TicketView]:
        if not email:
            raise HTTPException(status_code=400, detail="Email is required")
        if not is_valid_email(email):
            raise HTTPException(status_code=400, detail="Invalid email format")
        try:
            result = self.supabase.rpc("get_participants_by_email", {"p_email": email}).execute()
            return [TicketView(**p) for p in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch participants")

    # Owner

    def list_all_events(self) -> List[EventWithCountResponse]:
        """Every event, newest first, with its registration count"""
        try:
            events = self.supabase.table("events")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute().data or []
            counts: Counter = Counter()
            if events:
                participants = self.supabase.table("event_participants")\
                    .select("event_id")\
                    .in_("event_id", [e["id"] for e in events])\
                    .execute().data or []
                counts.update(p["event_id"] for p in participants)
            return [EventWithCountResponse(**e, participant_count=counts[e["id"]]) for e in events]
        except Exception as e:
            raise_db_error(e, "Failed to fetch events")

    def create_event(self, data: EventCreate, created_by: str) -> EventResponse:
        if not data.title.strip() or data.event_date is None:
            raise HTTPException(status_code=400, detail="Title and event date are required")
        try:
            result = self.supabase.table("events").insert({
                "title": data.title.strip(),
                "description": data.description or None,
                "event_date": data.event_date.isoformat(),
                "location": data.location or None,
                "max_participants": data.max_participants or None,
                "is_published": data.is_published,
                "is_active": True,
                "created_by": created_by,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create event")
            logger.info(f"Event created: {result.data[0]['id']}")
            return EventResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create event")

    def update_event(self, event_id: str, updates: EventUpdate) -> EventResponse:
        update_data = updates.model_dump(exclude_unset=True, mode="json")
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("events")\
                .update(update_data)\
                .eq("id", event_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Event not found")
            return EventResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update event")

    def delete_event(self, event_id: str) -> None:
        """Delete an event; participants go with it through the foreign key cascade"""
        try:
            result = self.supabase.table("events")\
                .delete()\
                .eq("id", event_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Event not found")
            logger.info(f"Event deleted: {event_id}")
        except Exception as e:
            raise_db_error(e, "Failed to delete event")

    def list_participants(self, event_id: str) -> List[ParticipantResponse]:
        try:
            result = self.supabase.table("event_participants")\
                .select("*")\
                .eq("event_id", event_id)\
                .order("registration_date", desc=True)\
                .execute()
            return [ParticipantResponse(**p) for p in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch participants")
