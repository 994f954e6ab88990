"""
Tests for profile editing and owner user management.
"""

from tests.conftest import USER_ID

# =============================================================================
# Bio wizard step
# =============================================================================


class TestBioUpdate:

    def test_empty_last_name_is_rejected(self, client, user_headers):
        response = client.put("/api/users/me/bio", json={"first_name": "Deniz", "last_name": "  "}, headers=user_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request"
        assert body["details"][0]["field"] == "last_name"

    def test_digits_in_name_are_rejected(self, client, user_headers):
        response = client.put("/api/users/me/bio", json={"first_name": "D3niz", "last_name": "Kaya"}, headers=user_headers)
        assert response.status_code == 400

    def test_turkish_names_are_saved_trimmed(self, client, fake_db, user_headers):
        response = client.put(
            "/api/users/me/bio",
            json={"first_name": " Çağrı ", "last_name": "Öztürk-Şahin"},
            headers=user_headers,
        )
        assert response.status_code == 200
        row = next(u for u in fake_db.rows("users") if u["id"] == USER_ID)
        assert row["first_name"] == "Çağrı"
        assert row["last_name"] == "Öztürk-Şahin"


# =============================================================================
# Profile settings
# =============================================================================


class TestProfileUpdate:

    def test_update_department_and_personal_email(self, client, user_headers):
        response = client.patch(
            "/api/users/me",
            json={"department": "Mobile", "personal_email": "deniz@gmail.com"},
            headers=user_headers,
        )
        assert response.status_code == 200
        assert response.json()["department"] == "Mobile"
        assert response.json()["personal_email"] == "deniz@gmail.com"

    def test_invalid_personal_email(self, client, user_headers):
        response = client.patch("/api/users/me", json={"personal_email": "not-an-email"}, headers=user_headers)
        assert response.status_code == 400


# =============================================================================
# Owner management
# =============================================================================


class TestOwnerUserManagement:

    def test_points_adjustment_never_goes_negative(self, client, owner_headers):
        response = client.post(f"/api/users/{USER_ID}/points", json={"delta": -500}, headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["store_points"] == 0

    def test_points_adjustment_adds(self, client, owner_headers):
        response = client.post(f"/api/users/{USER_ID}/points", json={"delta": 25}, headers=owner_headers)
        assert response.json()["store_points"] == 125

    def test_set_flags(self, client, owner_headers):
        response = client.patch(f"/api/users/{USER_ID}/flags", json={"is_owner": True}, headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["is_owner"] is True

    def test_unknown_user_is_404(self, client, owner_headers):
        response = client.get("/api/users/missing", headers=owner_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
