"""
Tests for the response envelope and the framework-level error handlers.
"""

import json

from schoolbase.core.responses import (
    error_response,
    internal_error_response,
    service_error_response,
    success_response,
)
from schoolbase.modules.shared.errors import ConflictError, NotFoundError
from schoolbase.modules.shared.helpers import Pagination


def _body(response):
    return json.loads(response.body)


class TestEnvelope:
    def test_success_uses_camel_case(self):
        response = success_response({"pagination": Pagination.build(1, 20, 0)}, "ok")
        body = _body(response)
        assert body["success"] is True
        assert body["message"] == "ok"
        assert "totalCount" in body["data"]["pagination"]

    def test_error_without_message(self):
        body = _body(error_response("Bad"))
        assert body == {"success": False, "error": "Bad"}

    def test_service_error(self):
        response = service_error_response(NotFoundError("Class not found"))
        assert response.status_code == 404
        assert _body(response) == {"success": False, "error": "Not Found", "message": "Class not found"}

    def test_conflict_status(self):
        assert service_error_response(ConflictError("Duplicate")).status_code == 409

    def test_internal_error(self):
        response = internal_error_response("Failed to fetch classes", RuntimeError("db down"))
        assert response.status_code == 500
        assert _body(response)["message"] == "db down"


class TestHandlers:
    def test_validation_error_is_400(self, client):
        response = client.post("/api/school-admin/classes", json={"session": "2024-25"})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"

    def test_missing_bearer_is_401(self, anonymous_client):
        response = anonymous_client.get("/api/school-admin/classes")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": "Unauthorized",
            "message": "Authorization token is required",
        }

    def test_unknown_route_is_404(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.json()["success"] is False
