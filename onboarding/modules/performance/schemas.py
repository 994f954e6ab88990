from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from onboarding.modules.users.schemas import UserSummary

MONTH_YEAR_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class PerformanceGoalCreate(BaseModel):
    user_id: str
    month_year: str = Field(pattern=MONTH_YEAR_PATTERN)
    target_hours: float = Field(default=0, ge=0)
    target_story_points: float = Field(default=0, ge=0)
    monthly_checklist: List[Dict[str, Any]] = []


class PerformanceGoalUpdate(BaseModel):
    target_hours: Optional[float] = Field(default=None, ge=0)
    target_story_points: Optional[float] = Field(default=None, ge=0)
    completed_hours: Optional[float] = Field(default=None, ge=0)
    completed_story_points: Optional[float] = Field(default=None, ge=0)
    monthly_checklist: Optional[List[Dict[str, Any]]] = None


class PerformanceGoalResponse(BaseModel):
    id: str
    user_id: str
    month_year: str
    target_hours: float = 0
    target_story_points: float = 0
    completed_hours: float = 0
    completed_story_points: float = 0
    monthly_checklist: List[Dict[str, Any]] = []
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    percentage: float = 0

    class Config:
        from_attributes = True


class PerformanceGoalWithUserResponse(PerformanceGoalResponse):
    user: UserSummary
