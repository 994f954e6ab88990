from supabase import Client
from onboarding.modules.landing.schemas import (
    LandingPageCreate, LandingPageUpdate, LandingPageResponse, LandingPageWithSectionsResponse,
    SectionCreate, SectionUpdate, SectionResponse, OrderItem,
    ComponentCreate, ComponentUpdate, ComponentResponse, TemplateCreate, TemplateResponse
)
from onboarding.core.clock import utc_now_iso
from onboarding.core.errors import raise_db_error
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging
import re

logger = logging.getLogger(__name__)

# Matches every row; used to update the whole landing_pages table
_ALL_ROWS_SENTINEL = "00000000-0000-0000-0000-000000000000"


def component_slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())


def infer_property_type(key: str, value: Any) -> str:
    """Guess a property's type from its value, then from its key"""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if "url" in key or "link" in key:
        return "url"
    if "email" in key:
        return "email"
    if "color" in key:
        return "color"
    if "image" in key:
        return "image"
    return "text"


def property_value_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_properties(rows: List[Dict[str, Any]]) -> Dict[str, Optional[str]]:
    return {row["property_key"]: row.get("property_value") for row in rows}


class LandingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Pages

    def _sections(self, page_id: str, visible_only: bool = False) -> List[SectionResponse]:
        query = self.supabase.table("landing_sections")\
            .select("*")\
            .eq("landing_page_id", page_id)
        if visible_only:
            query = query.eq("is_visible", True)
        result = query.order("order_index").execute()
        return [SectionResponse(**s) for s in result.data or []]

    def get_active_page(self) -> Optional[LandingPageWithSectionsResponse]:
        """The active page with its visible sections, or None"""
        try:
            result = self.supabase.table("landing_pages")\
                .select("*")\
                .eq("is_active", True)\
                .limit(1)\
                .execute()
            if not result.data:
                return None
            page = result.data[0]
            return LandingPageWithSectionsResponse(**page, sections=self._sections(page["id"], visible_only=True))
        except Exception as e:
            raise_db_error(e, "Failed to fetch landing page")

    def list_pages(self) -> List[LandingPageResponse]:
        try:
            result = self.supabase.table("landing_pages")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            return [LandingPageResponse(**p) for p in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch landing pages")

    def _get_page_row(self, page_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("landing_pages")\
                .select("*")\
                .eq("id", page_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise_db_error(e, "Failed to fetch landing page")
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Landing page not found")
        return result.data

    def get_page(self, page_id: str) -> LandingPageWithSectionsResponse:
        """A page with all of its sections, hidden ones included"""
        page = self._get_page_row(page_id)
        try:
            return LandingPageWithSectionsResponse(**page, sections=self._sections(page_id))
        except Exception as e:
            raise_db_error(e, "Failed to fetch landing sections")

    def create_page(self, data: LandingPageCreate) -> LandingPageResponse:
        try:
            result = self.supabase.table("landing_pages").insert({
                "title": data.title,
                "subtitle": data.subtitle,
                "is_active": False,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create landing page")
            page = result.data[0]
        except Exception as e:
            raise_db_error(e, "Failed to create landing page")
        if data.is_active:
            self.set_active_page(page["id"])
            page = {**page, "is_active": True}
        return LandingPageResponse(**page)

    def update_page(self, page_id: str, updates: LandingPageUpdate) -> LandingPageResponse:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("landing_pages")\
                .update(update_data)\
                .eq("id", page_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Landing page not found")
            return LandingPageResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update landing page")

    def delete_page(self, page_id: str) -> None:
        """Delete a page after its sections"""
        self._get_page_row(page_id)
        try:
            self.supabase.table("landing_sections")\
                .delete()\
                .eq("landing_page_id", page_id)\
                .execute()
            self.supabase.table("landing_pages")\
                .delete()\
                .eq("id", page_id)\
                .execute()
            logger.info(f"Landing page deleted: {page_id}")
        except Exception as e:
            raise_db_error(e, "Failed to delete landing page")

    def set_active_page(self, page_id: str) -> LandingPageResponse:
        """Deactivate every page, then activate page_id. Safe to repeat."""
        self._get_page_row(page_id)
        now = utc_now_iso()
        try:
            self.supabase.table("landing_pages")\
                .update({"is_active": False, "updated_at": now})\
                .neq("id", _ALL_ROWS_SENTINEL)\
                .execute()
            result = self.supabase.table("landing_pages")\
                .update({"is_active": True, "updated_at": now})\
                .eq("id", page_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Landing page not found")
            logger.info(f"Active landing page set to {page_id}")
            return LandingPageResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to set active landing page")

    # Sections

    def create_section(self, data: SectionCreate) -> SectionResponse:
        self._get_page_row(data.landing_page_id)
        try:
            result = self.supabase.table("landing_sections").insert(data.model_dump()).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create landing section")
            return SectionResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create landing section")

    def update_section(self, section_id: str, updates: SectionUpdate) -> SectionResponse:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("landing_sections")\
                .update(update_data)\
                .eq("id", section_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Landing section not found")
            return SectionResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to update landing section")

    def delete_section(self, section_id: str) -> None:
        try:
            result = self.supabase.table("landing_sections")\
                .delete()\
                .eq("id", section_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Landing section not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete landing section")

    def _reorder(self, table: str, items: List[OrderItem]) -> None:
        # One update per row; a failure part way leaves earlier rows reordered
        try:
            for item in items:
                self.supabase.table(table)\
                    .update({"order_index": item.order_index})\
                    .eq("id", item.id)\
                    .execute()
        except Exception as e:
            raise_db_error(e, "Failed to reorder")

    def reorder_sections(self, items: List[OrderItem]) -> None:
        self._reorder("landing_sections", items)

    # Components

    def list_components(self, page_id: str) -> List[ComponentResponse]:
        """Components in order, each with its properties as a key/value map"""
        try:
            components = self.supabase.table("landing_components")\
                .select("*")\
                .eq("landing_page_id", page_id)\
                .order("order_index")\
                .execute().data or []
            properties: Dict[str, List[Dict[str, Any]]] = {}
            if components:
                rows = self.supabase.table("component_properties")\
                    .select("*")\
                    .in_("component_id", [c["id"] for c in components])\
                    .execute().data or []
                for row in rows:
                    properties.setdefault(row["component_id"], []).append(row)
            return [
                ComponentResponse(**c, properties=flatten_properties(properties.get(c["id"], [])))
                for c in components
            ]
        except Exception as e:
            raise_db_error(e, "Failed to fetch components")

    def _insert_properties(self, component_id: str, properties: Dict[str, Any]) -> Dict[str, str]:
        """Store properties; a failure is logged and the component is kept"""
        if not properties:
            return {}
        rows = [
            {
                "component_id": component_id,
                "property_key": key,
                "property_value": property_value_text(value),
                "property_type": infer_property_type(key, value),
            }
            for key, value in properties.items()
        ]
        try:
            self.supabase.table("component_properties").insert(rows).execute()
        except Exception as e:
            logger.error(f"Error creating component properties for {component_id}: {e}")
            return {}
        return {row["property_key"]: row["property_value"] for row in rows}

    def create_component(self, data: ComponentCreate) -> ComponentResponse:
        component_data = data.model_dump(exclude={"properties"})
        component_data["component_slug"] = component_slug(data.component_name)
        try:
            result = self.supabase.table("landing_components").insert(component_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create component")
            component = result.data[0]
        except Exception as e:
            raise_db_error(e, "Failed to create component")
        stored = self._insert_properties(component["id"], data.properties)
        return ComponentResponse(**component, properties=stored)

    def update_component(self, component_id: str, updates: ComponentUpdate) -> ComponentResponse:
        update_data = updates.model_dump(exclude_none=True, exclude={"properties"})
        if not update_data and updates.properties is None:
            raise HTTPException(status_code=400, detail="No fields to update")
        if "component_name" in update_data:
            update_data["component_slug"] = component_slug(update_data["component_name"])
        update_data["updated_at"] = utc_now_iso()
        try:
            result = self.supabase.table("landing_components")\
                .update(update_data)\
                .eq("id", component_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Component not found")
            component = result.data[0]
            if updates.properties is not None:
                self.supabase.table("component_properties")\
                    .delete()\
                    .eq("component_id", component_id)\
                    .execute()
                stored = self._insert_properties(component_id, updates.properties)
            else:
                rows = self.supabase.table("component_properties")\
                    .select("*")\
                    .eq("component_id", component_id)\
                    .execute().data or []
                stored = flatten_properties(rows)
            return ComponentResponse(**component, properties=stored)
        except Exception as e:
            raise_db_error(e, "Failed to update component")

    def delete_component(self, component_id: str) -> None:
        try:
            self.supabase.table("component_properties")\
                .delete()\
                .eq("component_id", component_id)\
                .execute()
            result = self.supabase.table("landing_components")\
                .delete()\
                .eq("id", component_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Component not found")
        except Exception as e:
            raise_db_error(e, "Failed to delete component")

    def reorder_components(self, items: List[OrderItem]) -> None:
        self._reorder("landing_components", items)

    # Templates

    def list_templates(self, component_type: Optional[str] = None) -> List[TemplateResponse]:
        try:
            query = self.supabase.table("component_templates")\
                .select("*")\
                .eq("is_global", True)
            if component_type:
                query = query.eq("component_type", component_type)
            result = query.order("template_name").execute()
            return [TemplateResponse(**t) for t in result.data or []]
        except Exception as e:
            raise_db_error(e, "Failed to fetch templates")

    def create_template(self, data: TemplateCreate, created_by: str) -> TemplateResponse:
        try:
            result = self.supabase.table("component_templates").insert({
                **data.model_dump(),
                "created_by": created_by,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create template")
            return TemplateResponse(**result.data[0])
        except Exception as e:
            raise_db_error(e, "Failed to create template")
