from pydantic import BaseModel, Field, field_validator
from typing import Optional
import datetime as dt


class WorklogCreate(BaseModel):
    title: str
    description: Optional[str] = None
    date: dt.date
    hours: float = Field(gt=0, le=24)
    project: Optional[str] = None
    category: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class WorklogUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    hours: Optional[float] = Field(default=None, gt=0, le=24)
    project: Optional[str] = None
    category: Optional[str] = None


class WorklogResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    date: dt.date
    hours: float
    project: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
