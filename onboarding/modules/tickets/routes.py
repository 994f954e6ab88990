from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketResponse, TicketWithUserResponse, TicketStatus
)
from onboarding.modules.tickets.service import TicketService
from onboarding.core.dependencies import get_current_profile, require_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/tickets", tags=["tickets"])


def get_ticket_service(supabase: Client = Depends(get_supabase)) -> TicketService:
    return TicketService(supabase)


@router.post("", response_model=TicketResponse, status_code=201)
async def create_ticket(
    data: TicketCreate,
    profile: Dict = Depends(get_current_profile),
    service: TicketService = Depends(get_ticket_service)
):
    """Open a support ticket"""
    return service.create_ticket(data, profile["id"])


@router.get("/me", response_model=List[TicketResponse])
async def list_my_tickets(
    profile: Dict = Depends(get_current_profile),
    service: TicketService = Depends(get_ticket_service)
):
    return service.list_user_tickets(profile["id"])


@router.get("", response_model=List[TicketWithUserResponse])
async def list_all_tickets(
    status: Optional[TicketStatus] = None,
    owner: Dict = Depends(require_owner),
    service: TicketService = Depends(get_ticket_service)
):
    """All tickets with submitter details (owner only)"""
    return service.list_all_tickets(status)


@router.patch("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(
    ticket_id: str,
    updates: TicketUpdate,
    owner: Dict = Depends(require_owner),
    service: TicketService = Depends(get_ticket_service)
):
    """Change status, priority, assignee or resolution notes (owner only)"""
    return service.update_ticket(ticket_id, updates)


@router.delete("/{ticket_id}", status_code=204)
async def delete_ticket(
    ticket_id: str,
    owner: Dict = Depends(require_owner),
    service: TicketService = Depends(get_ticket_service)
):
    service.delete_ticket(ticket_id)
    return None
