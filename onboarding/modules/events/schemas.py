from pydantic import BaseModel, field_validator
from typing import Optional, Dict, Any
from datetime import datetime


class EventCreate(BaseModel):
    title: str = ""
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    is_published: bool = False


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    is_published: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be empty")
        return value


class EventResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    event_date: datetime
    location: Optional[str] = None
    max_participants: Optional[int] = None
    is_published: bool = False
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EventWithCountResponse(EventResponse):
    participant_count: int = 0


class EventRegistrationRequest(BaseModel):
    # Required fields are checked by the service so the error names all of them
    event_id: str = ""
    full_name: str = ""
    email: str = ""
    title: Optional[str] = None
    company: Optional[str] = None
    gdpr_consent: bool = False
    recaptcha_token: Optional[str] = None


class EventRegistrationResponse(BaseModel):
    registration: Dict[str, Any]
    success: bool = True


class ParticipantEmailLookup(BaseModel):
    email: str = ""


class ParticipantResponse(BaseModel):
    id: str
    event_id: str
    reference_number: str
    full_name: str
    email: str
    title: Optional[str] = None
    company: Optional[str] = None
    gdpr_consent: bool = False
    registration_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class TicketView(BaseModel):
    """Registration joined with its event, as shown on the printable ticket"""
    participant_id: str
    reference_number: str
    full_name: str
    email: str
    title: Optional[str] = None
    company: Optional[str] = None
    event_id: str
    event_title: str
    event_date: datetime
    event_location: Optional[str] = None
    registration_date: Optional[datetime] = None
