"""
Tests for the welcome text and process overview content.
"""

from pathlib import Path

import pytest

from onboarding.main import app
from onboarding.modules.content.service import ContentService, get_content_service, parse_process_steps

OVERVIEW = """# Onboarding Process

## STEP 1 - Sign in
→ Sign in with GitHub
→ Your profile is created for you

Some prose that is not an item.

## STEP 2 - Verify
→ Enter your company address
"""


@pytest.fixture
def content_dir(tmp_path):
    (tmp_path / "welcome.md").write_text("\n# Welcome to MasterFabric\n\nGlad you are here.\n", encoding="utf-8")
    (tmp_path / "process-overview.md").write_text(OVERVIEW, encoding="utf-8")
    return tmp_path


@pytest.fixture
def content_client(client, content_dir):
    app.dependency_overrides[get_content_service] = lambda: ContentService(str(content_dir))
    yield client


class TestParseProcessSteps:

    def test_steps_and_items(self):
        steps = parse_process_steps(OVERVIEW)
        assert steps == [
            {"title": "STEP 1 - Sign in", "items": ["Sign in with GitHub", "Your profile is created for you"]},
            {"title": "STEP 2 - Verify", "items": ["Enter your company address"]},
        ]

    def test_items_before_first_step_ignored(self):
        assert parse_process_steps("→ orphan\n## STEP 1 - Only\n") == [{"title": "STEP 1 - Only", "items": []}]

    def test_empty(self):
        assert parse_process_steps("") == []


class TestContentRoutes:

    def test_welcome_text(self, content_client):
        response = content_client.get("/api/content/welcome")
        assert response.status_code == 200
        assert response.json() == {"welcomeText": "# Welcome to MasterFabric\n\nGlad you are here."}

    def test_process_overview(self, content_client):
        body = content_client.get("/api/content/process-overview").json()
        assert [s["title"] for s in body["steps"]] == ["STEP 1 - Sign in", "STEP 2 - Verify"]

    def test_missing_content_is_server_error(self, client, tmp_path):
        app.dependency_overrides[get_content_service] = lambda: ContentService(str(tmp_path / "missing"))
        response = client.get("/api/content/welcome")
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load welcome text"}

    def test_bundled_overview_has_steps(self):
        steps = ContentService(str(Path(__file__).parent.parent / "content")).get_process_steps()
        assert len(steps) == 5
        assert all(step["items"] for step in steps)
