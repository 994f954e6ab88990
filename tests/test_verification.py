"""
Tests for one-time code email verification.
"""

from datetime import datetime, timedelta, timezone

from onboarding.modules.verification.service import (
    VerificationOutcome,
    check_verification_code,
    generate_code,
)
from tests.conftest import RecordingEmailService, USER_ID
from onboarding.modules.notifications.service import get_email_service
from onboarding.main import app

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _user_row(fake_db):
    return next(u for u in fake_db.rows("users") if u["id"] == USER_ID)


# =============================================================================
# Code checking
# =============================================================================


class TestCheckVerificationCode:

    def test_matching_code_before_expiry(self):
        expires = (NOW + timedelta(minutes=5)).isoformat()
        assert check_verification_code("123456", "123456", expires, now=NOW) is VerificationOutcome.OK

    def test_expired_code_is_rejected_even_when_correct(self):
        expires = (NOW - timedelta(seconds=1)).isoformat()
        assert check_verification_code("123456", "123456", expires, now=NOW) is VerificationOutcome.EXPIRED

    def test_no_stored_code(self):
        assert check_verification_code(None, "123456", NOW.isoformat(), now=NOW) is VerificationOutcome.MISSING

    def test_no_expiry(self):
        assert check_verification_code("123456", "123456", None, now=NOW) is VerificationOutcome.MISSING

    def test_wrong_code(self):
        expires = (NOW + timedelta(minutes=5)).isoformat()
        assert check_verification_code("123456", "654321", expires, now=NOW) is VerificationOutcome.INVALID

    def test_zulu_timestamps(self):
        assert check_verification_code("123456", "123456", "2025-03-01T12:05:00Z", now=NOW) is VerificationOutcome.OK

    def test_trimmed_fractional_seconds(self):
        assert check_verification_code("123456", "123456", "2025-03-01T12:00:00.12+00:00", now=NOW) is VerificationOutcome.OK
        assert check_verification_code("123456", "123456", "2025-03-01T11:59:59.5+00:00", now=NOW) is VerificationOutcome.EXPIRED

    def test_generated_code_shape(self):
        for _ in range(50):
            code = generate_code(6)
            assert len(code) == 6 and code.isdigit() and code[0] != "0"


# =============================================================================
# Send
# =============================================================================


class TestSendCode:

    def test_non_company_domain_is_rejected(self, client, user_headers, email_service):
        response = client.post("/api/verification/send", json={"email": "deniz@gmail.com"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Valid @masterfabric.co email required"
        assert email_service.sent == []

    def test_lookalike_domain_is_rejected(self, client, user_headers):
        response = client.post("/api/verification/send", json={"email": "deniz@evil-masterfabric.co"}, headers=user_headers)
        assert response.status_code == 400

    def test_code_is_stored_and_emailed(self, client, fake_db, user_headers, email_service):
        response = client.post("/api/verification/send", json={"email": "deniz@masterfabric.co"}, headers=user_headers)

        assert response.status_code == 200
        row = _user_row(fake_db)
        assert row["verification_email"] == "deniz@masterfabric.co"
        assert len(row["verification_code"]) == 6
        assert len(email_service.sent) == 1
        assert row["verification_code"] in email_service.sent[0]["html"]

    def test_emailed_code_is_not_returned(self, client, user_headers, email_service):
        response = client.post("/api/verification/send", json={"email": "deniz@masterfabric.co"}, headers=user_headers)

        assert response.status_code == 200
        assert len(email_service.sent) == 1
        assert response.json()["code"] is None

    def test_unconfigured_mail_in_development_still_issues_code(self, client, fake_db, user_headers):
        app.dependency_overrides[get_email_service] = lambda: RecordingEmailService(configured=False)
        response = client.post("/api/verification/send", json={"email": "deniz@masterfabric.co"}, headers=user_headers)
        assert response.status_code == 200
        assert response.json()["code"] == _user_row(fake_db)["verification_code"]


# =============================================================================
# Verify
# =============================================================================


class TestVerifyCode:

    def _store(self, fake_db, code="482913", minutes=5):
        row = _user_row(fake_db)
        row["verification_code"] = code
        row["verification_email"] = "deniz@masterfabric.co"
        row["verification_expires"] = (datetime.now(timezone.utc) + timedelta(minutes=minutes)).isoformat()

    def test_success_marks_profile_verified(self, client, fake_db, user_headers):
        self._store(fake_db)

        response = client.post("/api/verification/verify", json={"code": "482913"}, headers=user_headers)

        assert response.status_code == 200
        assert response.json()["master_email"] == "deniz@masterfabric.co"
        row = _user_row(fake_db)
        assert row["is_verified"] is True
        assert row["master_email"] == "deniz@masterfabric.co"
        assert row["verification_code"] is None

    def test_expired_code(self, client, fake_db, user_headers):
        self._store(fake_db, minutes=-1)
        response = client.post("/api/verification/verify", json={"code": "482913"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Verification code has expired"
        assert _user_row(fake_db)["is_verified"] is False

    def test_wrong_code(self, client, fake_db, user_headers):
        self._store(fake_db)
        response = client.post("/api/verification/verify", json={"code": "111111"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid verification code"

    def test_no_code_stored(self, client, user_headers):
        response = client.post("/api/verification/verify", json={"code": "482913"}, headers=user_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "No verification code found"

    def test_malformed_code(self, client, user_headers):
        response = client.post("/api/verification/verify", json={"code": "12ab"}, headers=user_headers)
        assert response.status_code == 400

    def test_owner_sees_pending_codes(self, client, fake_db, owner_headers):
        self._store(fake_db)
        response = client.get("/api/verification/codes", headers=owner_headers)
        assert response.status_code == 200
        pending = response.json()
        assert [p["id"] for p in pending] == [USER_ID]
        assert pending[0]["is_expired"] is False
