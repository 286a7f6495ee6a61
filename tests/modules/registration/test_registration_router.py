"""
Envelope tests for the registration endpoints.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

from schoolbase.modules.registration.schemas import UserCreatedResponse, UserResponse
from schoolbase.modules.shared.errors import ConflictError

SERVICE = "schoolbase.modules.registration.service"


class TestRegistrationRouter:
    def test_create_user_is_201(self, client):
        created = UserCreatedResponse(
            user=UserResponse(id=7, phone="9876543210", created_at=datetime(2025, 6, 1, tzinfo=UTC))
        )
        with patch(f"{SERVICE}.create_user", new=AsyncMock(return_value=created)):
            response = client.post("/api/school-admin/users", json={"phone": "9876543210", "password": "secret1"})

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["id"] == 7
        assert data["nextStep"] == "CREATE_STUDENT"
        assert "password" not in data["user"]

    def test_create_user_conflict(self, client):
        error = ConflictError("User already exists", "A user with this phone number already exists.")
        with patch(f"{SERVICE}.create_user", new=AsyncMock(side_effect=error)):
            response = client.post("/api/school-admin/users", json={"phone": "9876543210", "password": "secret1"})

        assert response.status_code == 409

    def test_short_phone_is_400(self, client):
        response = client.post("/api/school-admin/students/check-phone", json={"phone": "12345"})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    def test_formatted_phone_too_short_once_normalized(self, client):
        create_user = AsyncMock()
        with patch(f"{SERVICE}.create_user", new=create_user):
            response = client.post(
                "/api/school-admin/users",
                json={"phone": "(98) 765-43", "password": "secret1"},
            )

        assert response.status_code == 400
        assert "at least 10 digits" in response.json()["message"]
        create_user.assert_not_called()
