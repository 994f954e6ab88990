from fastapi import APIRouter, Depends
from onboarding.database.supabase_client import get_supabase
from onboarding.modules.landing.schemas import (
    LandingPageCreate, LandingPageUpdate, LandingPageResponse, LandingPageWithSectionsResponse,
    SectionCreate, SectionUpdate, SectionResponse, ReorderRequest,
    ComponentCreate, ComponentUpdate, ComponentResponse, TemplateCreate, TemplateResponse
)
from onboarding.modules.landing.service import LandingService
from onboarding.core.dependencies import require_owner
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/landing", tags=["landing"])


def get_landing_service(supabase: Client = Depends(get_supabase)) -> LandingService:
    return LandingService(supabase)


@router.get("", response_model=Optional[LandingPageWithSectionsResponse])
async def get_active_landing_page(service: LandingService = Depends(get_landing_service)):
    """Active landing page with visible sections, or null (public)"""
    return service.get_active_page()


# Pages

@router.get("/pages", response_model=List[LandingPageResponse])
async def list_landing_pages(
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.list_pages()


@router.post("/pages", response_model=LandingPageResponse, status_code=201)
async def create_landing_page(
    data: LandingPageCreate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.create_page(data)


@router.get("/pages/{page_id}", response_model=LandingPageWithSectionsResponse)
async def get_landing_page(
    page_id: str,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.get_page(page_id)


@router.patch("/pages/{page_id}", response_model=LandingPageResponse)
async def update_landing_page(
    page_id: str,
    updates: LandingPageUpdate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.update_page(page_id, updates)


@router.delete("/pages/{page_id}", status_code=204)
async def delete_landing_page(
    page_id: str,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    service.delete_page(page_id)
    return None


@router.post("/pages/{page_id}/activate", response_model=LandingPageResponse)
async def set_active_landing_page(
    page_id: str,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    """Make this the only active landing page"""
    return service.set_active_page(page_id)


@router.get("/pages/{page_id}/components", response_model=List[ComponentResponse])
async def list_components(page_id: str, service: LandingService = Depends(get_landing_service)):
    return service.list_components(page_id)


# Sections

@router.post("/sections", response_model=SectionResponse, status_code=201)
async def create_section(
    data: SectionCreate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.create_section(data)


@router.put("/sections/reorder", status_code=204)
async def reorder_sections(
    body: ReorderRequest,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    service.reorder_sections(body.items)
    return None


@router.patch("/sections/{section_id}", response_model=SectionResponse)
async def update_section(
    section_id: str,
    updates: SectionUpdate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.update_section(section_id, updates)


@router.delete("/sections/{section_id}", status_code=204)
async def delete_section(
    section_id: str,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    service.delete_section(section_id)
    return None


# Components

@router.post("/components", response_model=ComponentResponse, status_code=201)
async def create_component(
    data: ComponentCreate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.create_component(data)


@router.put("/components/reorder", status_code=204)
async def reorder_components(
    body: ReorderRequest,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    service.reorder_components(body.items)
    return None


@router.patch("/components/{component_id}", response_model=ComponentResponse)
async def update_component(
    component_id: str,
    updates: ComponentUpdate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.update_component(component_id, updates)


@router.delete("/components/{component_id}", status_code=204)
async def delete_component(
    component_id: str,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    service.delete_component(component_id)
    return None


# Templates

@router.get("/templates", response_model=List[TemplateResponse])
async def list_templates(
    component_type: Optional[str] = None,
    service: LandingService = Depends(get_landing_service)
):
    return service.list_templates(component_type)


@router.post("/templates", response_model=TemplateResponse, status_code=201)
async def create_template(
    data: TemplateCreate,
    owner: Dict = Depends(require_owner),
    service: LandingService = Depends(get_landing_service)
):
    return service.create_template(data, owner["id"])
