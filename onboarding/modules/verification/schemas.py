from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime


class SendCodeRequest(BaseModel):
    email: EmailStr


class SendCodeResponse(BaseModel):
    success: bool = True
    message: str
    expires_at: datetime
    code: Optional[str] = None  # set in development when email is not configured


class VerifyCodeRequest(BaseModel):
    code: str


class VerifyCodeResponse(BaseModel):
    success: bool = True
    message: str
    master_email: str


class PendingCodeResponse(BaseModel):
    id: str
    github_username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    verification_code: str
    verification_email: Optional[str] = None
    verification_expires: Optional[datetime] = None
    is_expired: bool
    time_remaining: int
