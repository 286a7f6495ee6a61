"""
Endpoint tests for the login flows: cookies, envelopes and rate limiting.
"""

from unittest.mock import AsyncMock, patch

from schoolbase.modules.auth.schemas import (
    AdminLoginResponse,
    AdminUser,
    SchoolAdminLoginResponse,
    SchoolSummary,
    StudentLoginEntry,
)
from schoolbase.modules.auth.service import InvalidCredentialsError

SERVICE = "schoolbase.modules.auth.service"


class TestStudentLoginRoute:
    def test_returns_entries(self, client):
        entries = [
            StudentLoginEntry(token="t", school_name="Green Valley", name="Asha", class_name="Class 10", section="A"),
            StudentLoginEntry(school_name="Blue Hill", name="Asha", info_message="No active enrollment found."),
        ]
        with patch(f"{SERVICE}.student_login", new=AsyncMock(return_value=entries)):
            response = client.post("/api/student/login", json={"phone": "9876543210", "password": "secret1"})

        assert response.status_code == 200
        students = response.json()["data"]["students"]
        assert students[0]["class"] == "Class 10"
        assert students[1]["infoMessage"] == "No active enrollment found."

    def test_rate_limited(self, client):
        with (
            patch("schoolbase.core.rate_limit.settings") as mock_settings,
            patch("schoolbase.core.rate_limit.get_redis", return_value=None),
            patch(
                f"{SERVICE}.student_login",
                new=AsyncMock(side_effect=InvalidCredentialsError("Invalid phone number or password")),
            ),
        ):
            mock_settings.login_rate_limit = 2
            mock_settings.login_rate_window_seconds = 60
            statuses = [
                client.post("/api/student/login", json={"phone": "9876543210", "password": "secret1"}).status_code
                for _ in range(3)
            ]

        assert statuses == [401, 401, 429]

    def test_rotating_forwarded_for_still_limited(self, client):
        with (
            patch("schoolbase.core.rate_limit.settings") as mock_settings,
            patch("schoolbase.core.rate_limit.get_redis", return_value=None),
            patch(
                f"{SERVICE}.student_login",
                new=AsyncMock(side_effect=InvalidCredentialsError("Invalid phone number or password")),
            ),
        ):
            mock_settings.login_rate_limit = 2
            mock_settings.login_rate_window_seconds = 60
            statuses = [
                client.post(
                    "/api/student/login",
                    json={"phone": "9876543210", "password": "secret1"},
                    headers={"X-Forwarded-For": f"10.0.0.{i}"},
                ).status_code
                for i in range(4)
            ]

        assert statuses == [401, 401, 429, 429]


class TestSchoolAdminRoutes:
    def test_login_sets_cookie(self, client):
        result = SchoolAdminLoginResponse(
            token="signed-token",
            school=SchoolSummary(id=1, name="Green Valley School", code="GREEN"),
            expires_in="7d",
        )
        with patch(f"{SERVICE}.school_admin_login", new=AsyncMock(return_value=result)):
            response = client.post(
                "/api/school-admin/auth/login",
                json={"schoolCode": "GREEN", "phone": "0205550100", "password": "secret1"},
            )

        assert response.status_code == 200
        assert response.cookies.get("school_admin_token") == "signed-token"
        assert "httponly" in response.headers["set-cookie"].lower()
        assert response.json()["data"]["expiresIn"] == "7d"

    def test_verify(self, client, tenant):
        response = client.get("/api/school-admin/auth/verify")
        assert response.json()["data"]["school"]["code"] == tenant.school_code

    def test_logout_clears_cookie(self, client):
        response = client.post("/api/school-admin/auth/logout")
        assert response.status_code == 200
        assert 'school_admin_token=""' in response.headers["set-cookie"]


class TestPlatformAdminRoutes:
    def test_login_sets_cookie(self, client):
        result = AdminLoginResponse(user=AdminUser(username="root", role="super_admin"), token="admin-jwt", expires_in="24h")
        with patch(f"{SERVICE}.platform_admin_login", return_value=result):
            response = client.post("/api/admin/auth/login", json={"username": "root", "password": "hunter22"})

        assert response.status_code == 200
        assert response.cookies.get("admin_token") == "admin-jwt"

    def test_verify(self, client):
        response = client.get("/api/admin/auth/verify")
        assert response.json()["data"] == {"authenticated": True, "user": {"username": "root", "role": "super_admin"}}
