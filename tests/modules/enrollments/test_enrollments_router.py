"""
Envelope tests for the enrollments endpoints.
"""

from unittest.mock import AsyncMock, patch

from schoolbase.modules.enrollments.schemas import EnrollmentResponse
from schoolbase.modules.shared.helpers import Pagination

SERVICE = "schoolbase.modules.enrollments.service"


class TestEnrollmentsRouter:
    def test_new_enrollment_is_201(self, client, enrollment_row):
        result = (EnrollmentResponse(**enrollment_row), False)
        with patch(f"{SERVICE}.create_enrollment", new=AsyncMock(return_value=result)):
            response = client.post("/api/school-admin/enrollments", json={"studentId": 21, "classId": 31})

        assert response.status_code == 201
        assert response.json()["message"] == "Student enrolled successfully"

    def test_reactivation_is_200(self, client, enrollment_row):
        result = (EnrollmentResponse(**enrollment_row), True)
        with patch(f"{SERVICE}.create_enrollment", new=AsyncMock(return_value=result)):
            response = client.post("/api/school-admin/enrollments", json={"studentId": 21, "classId": 31})

        assert response.status_code == 200
        assert response.json()["message"] == "Enrollment reactivated successfully"
        assert response.json()["data"]["enrollment"]["id"] == 41

    def test_unenroll_message(self, client, enrollment_row):
        updated = EnrollmentResponse(**dict(enrollment_row, is_active=False))
        with patch(f"{SERVICE}.update_enrollment", new=AsyncMock(return_value=updated)):
            response = client.patch("/api/school-admin/enrollments/41", json={"isActive": False})

        assert response.status_code == 200
        assert response.json()["message"] == "Student unenrolled successfully"
        assert response.json()["data"]["enrollment"]["isActive"] is False

    def test_list_filters(self, client):
        with patch(
            f"{SERVICE}.list_enrollments",
            new=AsyncMock(return_value=([], Pagination.build(1, 20, 0))),
        ) as mock_list:
            response = client.get("/api/school-admin/enrollments?classId=31&isActive=true")

        assert response.status_code == 200
        kwargs = mock_list.call_args.kwargs
        assert kwargs["class_id"] == 31
        assert kwargs["is_active"] is True
