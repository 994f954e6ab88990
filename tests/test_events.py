"""
Tests for events, public registration and tickets.
"""

from datetime import datetime, timedelta, timezone

import httpx
from postgrest.exceptions import APIError

from onboarding.config.settings import settings
from onboarding.modules.events.captcha import verify_recaptcha


def _iso(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _event(fake_db, title="Flutter Meetup", days=7, **overrides):
    values = {
        "title": title,
        "event_date": _iso(days),
        "location": "Istanbul",
        "is_published": True,
        "is_active": True,
    }
    values.update(overrides)
    return fake_db.seed("events", values)[0]


def _registration(**overrides):
    body = {
        "event_id": "evt-1",
        "full_name": "Deniz Kaya",
        "email": "deniz@example.com",
        "gdpr_consent": True,
    }
    body.update(overrides)
    return body


class TestRecaptcha:

    def test_passes_without_secret(self, monkeypatch):
        monkeypatch.setattr(settings, "recaptcha_secret_key", None)
        assert verify_recaptcha("token") is True

    def test_missing_token_fails_when_secret_set(self, monkeypatch):
        monkeypatch.setattr(settings, "recaptcha_secret_key", "secret")
        assert verify_recaptcha(None) is False
        assert verify_recaptcha("") is False

    def test_uses_google_verdict(self, monkeypatch):
        monkeypatch.setattr(settings, "recaptcha_secret_key", "secret")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.content.decode()
            return httpx.Response(200, json={"success": False})

        with httpx.Client(transport=httpx.MockTransport(handler)) as http_client:
            assert verify_recaptcha("token", http_client=http_client) is False
        assert "response=token" in seen["body"]

    def test_network_error_fails_closed(self, monkeypatch):
        monkeypatch.setattr(settings, "recaptcha_secret_key", "secret")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as http_client:
            assert verify_recaptcha("token", http_client=http_client) is False


# =============================================================================
# Public
# =============================================================================


class TestPublicEvents:

    def test_only_upcoming_published_events(self, client, fake_db):
        _event(fake_db, "Later", days=14)
        _event(fake_db, "Sooner", days=2)
        _event(fake_db, "Past", days=-3)
        _event(fake_db, "Draft", is_published=False)
        _event(fake_db, "Cancelled", is_active=False)

        response = client.get("/api/events")

        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["Sooner", "Later"]

    def test_unpublished_event_not_found(self, client, fake_db):
        event = _event(fake_db, is_published=False)
        assert client.get(f"/api/events/{event['id']}").status_code == 404


class TestRegistration:

    def test_missing_fields(self, client):
        response = client.post("/api/events/register", json=_registration(gdpr_consent=False))
        assert response.status_code == 400
        assert response.json()["error"] == "Event ID, full name, email, and GDPR consent are required"

    def test_invalid_email(self, client):
        response = client.post("/api/events/register", json=_registration(email="deniz@"))
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid email format"

    def test_malformed_domain_rejected(self, client, fake_db):
        for email in ("deniz@example..com", "deniz@-example.com"):
            response = client.post("/api/events/register", json=_registration(email=email))
            assert response.status_code == 400
            assert response.json()["error"] == "Invalid email format"
        assert ("register_for_event", "rpc") not in fake_db.calls

    def test_missing_captcha_token_rejected_when_secret_set(self, client, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "recaptcha_secret_key", "secret")

        response = client.post("/api/events/register", json=_registration())

        assert response.status_code == 400
        assert response.json()["error"] == "reCAPTCHA verification failed"
        assert ("register_for_event", "rpc") not in fake_db.calls

    def test_successful_registration(self, client, fake_db):
        calls = []

        def register(params):
            calls.append(params)
            return [{"id": "p-1", "event_id": params["p_event_id"], "reference_number": "EVT-2026-0001"}]

        fake_db.rpc_handlers["register_for_event"] = register

        response = client.post("/api/events/register", json=_registration(full_name="  Deniz Kaya "))

        assert response.status_code == 201
        assert response.json()["success"] is True
        assert response.json()["registration"]["reference_number"] == "EVT-2026-0001"
        assert calls[0]["p_full_name"] == "Deniz Kaya"
        assert calls[0]["p_title"] is None

    def test_database_rejection_is_bad_request(self, client, fake_db):
        def full(params):
            raise APIError({"message": "Event is full", "code": "P0001", "hint": None, "details": None})

        fake_db.rpc_handlers["register_for_event"] = full

        response = client.post("/api/events/register", json=_registration())

        assert response.status_code == 400
        assert response.json()["error"] == "Event is full"


class TestTickets:

    TICKET = {
        "participant_id": "p-1",
        "reference_number": "EVT-2026-0001",
        "full_name": "Deniz Kaya",
        "email": "deniz@example.com",
        "event_id": "evt-1",
        "event_title": "Flutter Meetup",
        "event_date": "2026-11-02T18:00:00+00:00",
    }

    def test_lookup_by_reference(self, client, fake_db):
        fake_db.rpc_handlers["get_participant_by_reference"] = (
            lambda params: [self.TICKET] if params["p_reference_number"] == "EVT-2026-0001" else []
        )

        found = client.get("/api/events/participants/reference/EVT-2026-0001")
        missing = client.get("/api/events/participants/reference/EVT-2026-9999")

        assert found.status_code == 200
        assert found.json()["event_title"] == "Flutter Meetup"
        assert missing.status_code == 404
        assert missing.json()["error"] == "Participant not found"

    def test_lookup_by_email(self, client, fake_db):
        fake_db.rpc_handlers["get_participants_by_email"] = lambda params: [self.TICKET]

        assert client.post("/api/events/participants/email", json={"email": ""}).status_code == 400
        response = client.post("/api/events/participants/email", json={"email": "deniz@example.com"})
        assert [t["reference_number"] for t in response.json()] == ["EVT-2026-0001"]


# =============================================================================
# Owner
# =============================================================================


class TestOwnerEvents:

    def test_list_with_participant_counts(self, client, fake_db, owner_headers):
        busy = _event(fake_db, "Busy")
        quiet = _event(fake_db, "Quiet", is_published=False)
        for i in range(2):
            fake_db.seed("event_participants", {
                "event_id": busy["id"], "reference_number": f"R{i}", "full_name": "X", "email": "x@example.com",
            })

        events = client.get("/api/events/owner", headers=owner_headers).json()

        counts = {e["id"]: e["participant_count"] for e in events}
        assert counts == {busy["id"]: 2, quiet["id"]: 0}

    def test_create_requires_title_and_date(self, client, owner_headers):
        response = client.post("/api/events", json={"title": "No date"}, headers=owner_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Title and event date are required"

    def test_create_update_delete(self, client, fake_db, owner_headers):
        created = client.post(
            "/api/events",
            json={"title": "Hack night", "event_date": _iso(10), "max_participants": 30},
            headers=owner_headers,
        )
        assert created.status_code == 201
        event_id = created.json()["id"]
        assert created.json()["is_published"] is False

        updated = client.patch(f"/api/events/{event_id}", json={"is_published": True}, headers=owner_headers)
        assert updated.json()["is_published"] is True

        assert client.delete(f"/api/events/{event_id}", headers=owner_headers).status_code == 204
        assert fake_db.rows("events") == []

    def test_participants_newest_first(self, client, fake_db, owner_headers):
        event = _event(fake_db)
        fake_db.seed(
            "event_participants",
            {"event_id": event["id"], "reference_number": "A", "full_name": "A", "email": "a@example.com",
             "registration_date": "2026-01-01T00:00:00+00:00"},
            {"event_id": event["id"], "reference_number": "B", "full_name": "B", "email": "b@example.com",
             "registration_date": "2026-02-01T00:00:00+00:00"},
        )

        participants = client.get(f"/api/events/{event['id']}/participants", headers=owner_headers).json()

        assert [p["reference_number"] for p in participants] == ["B", "A"]

    def test_owner_routes_guarded(self, client, user_headers):
        assert client.get("/api/events/owner", headers=user_headers).status_code == 403
