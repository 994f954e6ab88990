from fastapi import APIRouter, Depends, Request
from onboarding.config.settings import settings
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.events.schemas import (
    EventCreate, EventUpdate, EventResponse, EventWithCountResponse,
    EventRegistrationRequest, EventRegistrationResponse, ParticipantEmailLookup,
    ParticipantResponse, TicketView
)
from onboarding.modules.events.service import EventService
from onboarding.core.dependencies import require_owner
from onboarding.core.rate_limit import limiter
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(supabase: Client = Depends(get_supabase)) -> EventService:
    return EventService(supabase)


@router.get("", response_model=List[EventResponse])
async def list_events(service: EventService = Depends(get_event_service)):
    """Upcoming published events (public)"""
    return service.list_published_events()


@router.get("/owner", response_model=List[EventWithCountResponse])
async def list_all_events(
    owner: Dict = Depends(require_owner),
    service: EventService = Depends(get_event_service)
):
    return service.list_all_events()


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    owner: Dict = Depends(require_owner),
    service: EventService = Depends(get_event_service)
):
    return service.create_event(data, owner["id"])


@router.post("/register", response_model=EventRegistrationResponse, status_code=201)
@limiter.limit(settings.registration_rate_limit)
async def register_for_event(
    request: Request,
    data: EventRegistrationRequest,
    service: EventService = Depends(get_event_service)
):
    """Public registration; returns the participant row with its reference number"""
    return service.register(data)


@router.get("/participants/reference/{reference_number}", response_model=TicketView)
async def get_ticket_by_reference(
    reference_number: str,
    service: EventService = Depends(get_event_service)
):
    return service.get_ticket_by_reference(reference_number)


@router.post("/participants/email", response_model=List[TicketView])
async def get_tickets_by_email(
    body: ParticipantEmailLookup,
    service: EventService = Depends(get_event_service)
):
    return service.get_tickets_by_email(body.email.strip())


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, service: EventService = Depends(get_event_service)):
    return service.get_published_event(event_id)


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    updates: EventUpdate,
    owner: Dict = Depends(require_owner),
    service: EventService = Depends(get_event_service)
):
    return service.update_event(event_id, updates)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    owner: Dict = Depends(require_owner),
    service: EventService = Depends(get_event_service)
):
    service.delete_event(event_id)
    return None


@router.get("/{event_id}/participants", response_model=List[ParticipantResponse])
async def list_participants(
    event_id: str,
    owner: Dict = Depends(require_owner),
    service: EventService = Depends(get_event_service)
):
    return service.list_participants(event_id)
