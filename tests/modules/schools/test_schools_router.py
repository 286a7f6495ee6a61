"""
Envelope tests for the platform-admin school endpoints.
"""

from unittest.mock import AsyncMock, patch

from schoolbase.modules.schools.schemas import CodeCheckResponse
from schoolbase.modules.shared.errors import ConflictError
from schoolbase.modules.shared.helpers import Pagination

SERVICE = "schoolbase.modules.schools.service"


class TestSchoolsRouter:
    def test_list_defaults_to_ten(self, client):
        with patch(
            f"{SERVICE}.list_schools",
            new=AsyncMock(return_value=([], Pagination.build(1, 10, 0))),
        ) as mock_list:
            response = client.get("/api/admin/schools")

        assert response.status_code == 200
        assert mock_list.call_args.kwargs["limit"] == 10

    def test_check_code_requires_code(self, client):
        response = client.get("/api/admin/schools/check-code")
        assert response.status_code == 400
        assert response.json()["error"] == "Code parameter is required"

    def test_check_code_available(self, client):
        result = CodeCheckResponse(available=True, suggested_code="GV-01")
        with patch(f"{SERVICE}.check_code", new=AsyncMock(return_value=result)):
            response = client.get("/api/admin/schools/check-code?code=gv-01")

        assert response.json()["message"] == "Code is available"
        assert response.json()["data"]["suggestedCode"] == "GV-01"

    def test_check_code_is_not_read_as_id(self, client):
        result = CodeCheckResponse(available=False, reason="This code is already in use by another school")
        with (
            patch(f"{SERVICE}.check_code", new=AsyncMock(return_value=result)),
            patch(f"{SERVICE}.get_school", new=AsyncMock()) as mock_get,
        ):
            response = client.get("/api/admin/schools/check-code?code=GREEN")

        assert response.json()["message"] == "Code is not available"
        mock_get.assert_not_called()

    def test_delete_conflict(self, client):
        error = ConflictError("Cannot delete school", "Cannot delete school. It has 3 students")
        with patch(f"{SERVICE}.delete_school", new=AsyncMock(side_effect=error)):
            response = client.delete("/api/admin/schools/1")

        assert response.status_code == 409

    def test_requires_platform_admin(self, anonymous_client):
        response = anonymous_client.get("/api/admin/schools")
        assert response.status_code == 401
