"""
Envelope tests for the students and registration endpoints sharing /students.
"""

from unittest.mock import AsyncMock, patch

from schoolbase.modules.registration.schemas import CheckPhoneResponse, NextStep
from schoolbase.modules.shared.errors import ConflictError
from schoolbase.modules.shared.helpers import Pagination

SERVICE = "schoolbase.modules.students.service"


class TestStudentsRouter:
    def test_list_passes_status_filter(self, client, tenant):
        with patch(
            f"{SERVICE}.list_students",
            new=AsyncMock(return_value=([], Pagination.build(1, 20, 0))),
        ) as mock_list:
            response = client.get("/api/school-admin/students?status=inactive&search=asha")

        assert response.status_code == 200
        kwargs = mock_list.call_args.kwargs
        assert kwargs["status"].value == "inactive"
        assert kwargs["search"] == "asha"

    def test_create_conflict(self, client):
        error = ConflictError("Student already exists", "A student profile already exists for this user in your school")
        with patch(f"{SERVICE}.create_student", new=AsyncMock(side_effect=error)):
            response = client.post(
                "/api/school-admin/students",
                json={"userId": 7, "name": "Asha Rao", "gender": "female", "email": "asha@example.com"},
            )

        assert response.status_code == 409
        assert response.json()["error"] == "Student already exists"

    def test_soft_delete_message(self, client, tenant):
        with patch(f"{SERVICE}.delete_student", new=AsyncMock()) as mock_delete:
            response = client.delete("/api/school-admin/students/21")

        assert response.json()["message"] == "Student deactivated and unenrolled from all classes"
        assert response.json()["data"] == {"deleted": True, "hard": False}
        mock_delete.assert_called_once()
        assert mock_delete.call_args.kwargs["hard"] is False

    def test_hard_delete_message(self, client):
        with patch(f"{SERVICE}.delete_student", new=AsyncMock()):
            response = client.delete("/api/school-admin/students/21?hard=true")

        assert response.json()["message"] == "Student permanently deleted"

    def test_check_phone_is_not_shadowed_by_student_routes(self, client):
        result = CheckPhoneResponse(
            user_exists=False,
            student_exists_in_school=False,
            next_step=NextStep.CREATE_USER,
            message="Phone number is not registered. Create a new user account.",
        )
        with patch(
            "schoolbase.modules.registration.service.check_phone",
            new=AsyncMock(return_value=result),
        ):
            response = client.post("/api/school-admin/students/check-phone", json={"phone": "9876543210"})

        assert response.status_code == 200
        assert response.json()["message"] == "Phone number available"
        assert response.json()["data"]["nextStep"] == "CREATE_USER"
