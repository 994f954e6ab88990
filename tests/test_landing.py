"""
Tests for landing pages, sections, components and templates.
"""

from onboarding.modules.landing.service import component_slug, infer_property_type, property_value_text


def _page(fake_db, title="Welcome aboard", is_active=False):
    return fake_db.seed("landing_pages", {"title": title, "subtitle": "Start here", "is_active": is_active})[0]


def _section(fake_db, page_id, title, order_index, is_visible=True):
    return fake_db.seed("landing_sections", {
        "landing_page_id": page_id,
        "section_type": "info",
        "title": title,
        "content": {},
        "order_index": order_index,
        "is_visible": is_visible,
    })[0]


# =============================================================================
# Helpers
# =============================================================================


class TestPropertyHelpers:

    def test_component_slug(self):
        assert component_slug("Hero Banner #1") == "hero-banner--1"

    def test_infer_property_type(self):
        assert infer_property_type("show_logo", True) == "boolean"
        assert infer_property_type("columns", 3) == "number"
        assert infer_property_type("button_link", "https://example.com") == "url"
        assert infer_property_type("contact_email", "hr@example.com") == "email"
        assert infer_property_type("text_color", "#fff") == "color"
        assert infer_property_type("hero_image", "hero.png") == "image"
        assert infer_property_type("caption", "Hello") == "text"

    def test_property_value_text(self):
        assert property_value_text(False) == "false"
        assert property_value_text(12) == "12"


# =============================================================================
# Pages
# =============================================================================


class TestActivePage:

    def test_no_active_page_returns_null(self, client, fake_db):
        _page(fake_db)
        response = client.get("/api/landing")
        assert response.status_code == 200
        assert response.json() is None

    def test_public_page_has_only_visible_sections_in_order(self, client, fake_db):
        page = _page(fake_db, is_active=True)
        _section(fake_db, page["id"], "Second", 2)
        _section(fake_db, page["id"], "Hidden", 1, is_visible=False)
        _section(fake_db, page["id"], "First", 0)

        body = client.get("/api/landing").json()

        assert body["id"] == page["id"]
        assert [s["title"] for s in body["sections"]] == ["First", "Second"]

    def test_set_active_twice_leaves_one_active(self, client, fake_db, owner_headers):
        first = _page(fake_db, "First", is_active=True)
        second = _page(fake_db, "Second")

        for _ in range(2):
            response = client.post(f"/api/landing/pages/{second['id']}/activate", headers=owner_headers)
            assert response.status_code == 200

        active = [p["id"] for p in fake_db.rows("landing_pages") if p["is_active"]]
        assert active == [second["id"]]
        assert first["id"] not in active

    def test_activate_unknown_page(self, client, fake_db, owner_headers):
        page = _page(fake_db, is_active=True)
        response = client.post("/api/landing/pages/missing/activate", headers=owner_headers)
        assert response.status_code == 404
        assert fake_db.rows("landing_pages")[0]["id"] == page["id"]
        assert fake_db.rows("landing_pages")[0]["is_active"] is True

    def test_create_active_page_deactivates_others(self, client, fake_db, owner_headers):
        old = _page(fake_db, is_active=True)

        response = client.post(
            "/api/landing/pages",
            json={"title": "New intro", "subtitle": "Hello", "is_active": True},
            headers=owner_headers,
        )

        assert response.status_code == 201
        assert response.json()["is_active"] is True
        assert [p["id"] for p in fake_db.rows("landing_pages") if p["is_active"]] == [response.json()["id"]]
        assert old["id"] != response.json()["id"]

    def test_owner_sees_hidden_sections(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        _section(fake_db, page["id"], "Hidden", 0, is_visible=False)
        body = client.get(f"/api/landing/pages/{page['id']}", headers=owner_headers).json()
        assert [s["title"] for s in body["sections"]] == ["Hidden"]

    def test_delete_page_removes_sections(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        other = _page(fake_db, "Other")
        _section(fake_db, page["id"], "Gone", 0)
        _section(fake_db, other["id"], "Kept", 0)

        response = client.delete(f"/api/landing/pages/{page['id']}", headers=owner_headers)

        assert response.status_code == 204
        assert [p["id"] for p in fake_db.rows("landing_pages")] == [other["id"]]
        assert [s["title"] for s in fake_db.rows("landing_sections")] == ["Kept"]

    def test_pages_are_owner_only(self, client, user_headers):
        assert client.get("/api/landing/pages", headers=user_headers).status_code == 403


# =============================================================================
# Sections
# =============================================================================


class TestSections:

    def test_create_section_for_missing_page(self, client, owner_headers):
        response = client.post(
            "/api/landing/sections",
            json={"landing_page_id": "missing", "section_type": "hero", "title": "Hi"},
            headers=owner_headers,
        )
        assert response.status_code == 404

    def test_unknown_section_type(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        response = client.post(
            "/api/landing/sections",
            json={"landing_page_id": page["id"], "section_type": "carousel", "title": "Hi"},
            headers=owner_headers,
        )
        assert response.status_code == 400

    def test_reorder(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        a = _section(fake_db, page["id"], "A", 0)
        b = _section(fake_db, page["id"], "B", 1)

        response = client.put(
            "/api/landing/sections/reorder",
            json={"items": [{"id": a["id"], "order_index": 1}, {"id": b["id"], "order_index": 0}]},
            headers=owner_headers,
        )

        assert response.status_code == 204
        body = client.get(f"/api/landing/pages/{page['id']}", headers=owner_headers).json()
        assert [s["title"] for s in body["sections"]] == ["B", "A"]


# =============================================================================
# Components
# =============================================================================


class TestComponents:

    def test_create_with_properties(self, client, fake_db, owner_headers):
        page = _page(fake_db)

        response = client.post(
            "/api/landing/components",
            json={
                "landing_page_id": page["id"],
                "component_type": "hero",
                "component_name": "Main Hero",
                "properties": {"button_link": "https://example.com", "show_logo": True},
            },
            headers=owner_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["component_slug"] == "main-hero"
        assert body["properties"] == {"button_link": "https://example.com", "show_logo": "true"}
        types = {p["property_key"]: p["property_type"] for p in fake_db.rows("component_properties")}
        assert types == {"button_link": "url", "show_logo": "boolean"}

        listed = client.get(f"/api/landing/pages/{page['id']}/components").json()
        assert listed[0]["properties"]["show_logo"] == "true"

    def test_property_failure_keeps_component(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        fake_db.failing_tables = {"component_properties"}

        response = client.post(
            "/api/landing/components",
            json={
                "landing_page_id": page["id"],
                "component_type": "cta",
                "component_name": "Join",
                "properties": {"label": "Join us"},
            },
            headers=owner_headers,
        )

        assert response.status_code == 201
        assert response.json()["properties"] == {}
        assert len(fake_db.rows("landing_components")) == 1

    def test_update_replaces_properties(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        created = client.post(
            "/api/landing/components",
            json={"landing_page_id": page["id"], "component_type": "info", "component_name": "Info",
                  "properties": {"caption": "Old", "columns": 2}},
            headers=owner_headers,
        ).json()

        response = client.patch(
            f"/api/landing/components/{created['id']}",
            json={"properties": {"caption": "New"}},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert response.json()["properties"] == {"caption": "New"}
        assert len(fake_db.rows("component_properties")) == 1

    def test_delete_component_removes_properties(self, client, fake_db, owner_headers):
        page = _page(fake_db)
        created = client.post(
            "/api/landing/components",
            json={"landing_page_id": page["id"], "component_type": "info", "component_name": "Info",
                  "properties": {"caption": "Bye"}},
            headers=owner_headers,
        ).json()

        assert client.delete(f"/api/landing/components/{created['id']}", headers=owner_headers).status_code == 204
        assert fake_db.rows("component_properties") == []
        assert client.delete(f"/api/landing/components/{created['id']}", headers=owner_headers).status_code == 404


class TestTemplates:

    def test_only_global_templates_listed(self, client, fake_db, owner_headers):
        fake_db.seed(
            "component_templates",
            {"template_name": "Hero B", "component_type": "hero", "template_data": {}, "is_global": True},
            {"template_name": "Hero A", "component_type": "hero", "template_data": {}, "is_global": True},
            {"template_name": "Private", "component_type": "hero", "template_data": {}, "is_global": False},
            {"template_name": "CTA", "component_type": "cta", "template_data": {}, "is_global": True},
        )

        names = [t["template_name"] for t in client.get("/api/landing/templates?component_type=hero").json()]

        assert names == ["Hero A", "Hero B"]
