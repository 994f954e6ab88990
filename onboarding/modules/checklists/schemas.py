from pydantic import BaseModel, field_validator
from typing import Optional, List, Literal
from datetime import datetime, date


class ChecklistItemResponse(BaseModel):
    id: str
    title: str
    description: str
    category: Literal["setup", "access", "training", "integration"]
    required: bool
    estimated_time: Optional[str] = None


class ChecklistStepUpdate(BaseModel):
    completed: bool


class ChecklistStatusResponse(BaseModel):
    user_id: str
    step_name: str
    completed: bool
    completed_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ChecklistProgressResponse(BaseModel):
    total: int
    completed: int
    required_total: int
    required_completed: int
    percentage: float
    is_complete: bool


class DynamicChecklistCreate(BaseModel):
    title: str
    description: Optional[str] = None
    category: str
    is_global: bool = False

    @field_validator("title", "category")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()


class DynamicChecklistUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_global: Optional[bool] = None
    is_active: Optional[bool] = None


class DynamicChecklistResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    category: str
    is_global: bool = False
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AssignmentCreate(BaseModel):
    user_id: str
    checklist_id: str
    is_required: bool = False
    due_date: Optional[date] = None
    notes: Optional[str] = None


class AssignmentUpdate(BaseModel):
    completed: Optional[bool] = None
    notes: Optional[str] = None


class AssignmentResponse(BaseModel):
    id: str
    user_id: str
    checklist_id: str
    assigned_by: Optional[str] = None
    assigned_at: Optional[datetime] = None
    is_required: bool = False
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    checklist: Optional[DynamicChecklistResponse] = None


class ChecklistWithAssignmentsResponse(DynamicChecklistResponse):
    assignments: List[AssignmentResponse] = []
