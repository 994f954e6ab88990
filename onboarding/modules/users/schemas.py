from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime

from onboarding.core.validation import is_valid_name, is_valid_text


class UserResponse(BaseModel):
    id: str
    github_username: str
    master_email: Optional[str] = None
    personal_email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    is_verified: bool = False
    is_owner: bool = False
    is_store_user: bool = False
    store_points: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    github_username: Optional[str] = None
    department: Optional[str] = None


class BioUpdate(BaseModel):
    first_name: str
    last_name: str

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        if not is_valid_name(value):
            raise ValueError("may only contain letters, spaces, hyphens and apostrophes")
        return value


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    personal_email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_name(value):
            raise ValueError("may only contain letters, spaces, hyphens and apostrophes")
        return value

    @field_validator("department")
    @classmethod
    def validate_department(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not is_valid_text(value):
            raise ValueError("contains unsupported characters")
        return value


class UserFlagsUpdate(BaseModel):
    is_owner: Optional[bool] = None
    is_store_user: Optional[bool] = None
    role: Optional[str] = None
    department: Optional[str] = None


class PointsAdjustment(BaseModel):
    delta: int
