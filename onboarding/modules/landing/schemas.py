from pydantic import BaseModel, field_validator
from typing import Optional, Literal, List, Dict, Any
from datetime import datetime

SectionType = Literal["hero", "welcome", "features", "process", "cta", "info", "custom"]
PropertyType = Literal["text", "number", "boolean", "url", "email", "color", "image"]


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


# Pages

class LandingPageCreate(BaseModel):
    title: str
    subtitle: str
    is_active: bool = False

    @field_validator("title", "subtitle")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class LandingPageUpdate(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None


class LandingPageResponse(BaseModel):
    id: str
    title: str
    subtitle: str
    is_active: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Sections

class SectionCreate(BaseModel):
    landing_page_id: str
    section_type: SectionType
    title: str
    content: Dict[str, Any] = {}
    order_index: int = 0
    is_visible: bool = True

    @field_validator("title")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class SectionUpdate(BaseModel):
    section_type: Optional[SectionType] = None
    title: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    order_index: Optional[int] = None
    is_visible: Optional[bool] = None


class SectionResponse(BaseModel):
    id: str
    landing_page_id: str
    section_type: SectionType
    title: str
    content: Dict[str, Any] = {}
    order_index: int = 0
    is_visible: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LandingPageWithSectionsResponse(LandingPageResponse):
    sections: List[SectionResponse] = []


class OrderItem(BaseModel):
    id: str
    order_index: int


class ReorderRequest(BaseModel):
    items: List[OrderItem]


# Components

class ComponentCreate(BaseModel):
    landing_page_id: str
    component_type: str
    component_name: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    order_index: int = 0
    is_visible: bool = True
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    animation_type: str = "none"
    properties: Dict[str, Any] = {}

    @field_validator("component_type", "component_name")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class ComponentUpdate(BaseModel):
    component_type: Optional[str] = None
    component_name: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    order_index: Optional[int] = None
    is_visible: Optional[bool] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    animation_type: Optional[str] = None
    # Replaces every stored property when sent
    properties: Optional[Dict[str, Any]] = None


class ComponentResponse(BaseModel):
    id: str
    landing_page_id: str
    component_type: str
    component_name: str
    component_slug: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    content: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    order_index: int = 0
    is_visible: bool = True
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    animation_type: Optional[str] = None
    properties: Dict[str, Optional[str]] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Templates

class TemplateCreate(BaseModel):
    template_name: str
    template_description: Optional[str] = None
    component_type: str
    template_data: Dict[str, Any] = {}
    is_global: bool = False

    @field_validator("template_name", "component_type")
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)


class TemplateResponse(BaseModel):
    id: str
    template_name: str
    template_description: Optional[str] = None
    component_type: str
    template_data: Dict[str, Any] = {}
    is_global: bool = False
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
