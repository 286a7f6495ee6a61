"""
Dashboard Schemas
"""

from datetime import datetime

from schoolbase.modules.shared.helpers import CamelModel
from schoolbase.modules.students.models import StudentStatus


class DashboardSchool(CamelModel):
    id: int
    name: str
    code: str


class DashboardStats(CamelModel):
    total_students: int
    active_students: int
    total_classes: int
    active_enrollments: int
    students_by_status: dict[str, int]


class RecentStudent(CamelModel):
    id: int
    name: str
    email: str
    status: StudentStatus
    created_at: datetime


class ClassOverview(CamelModel):
    id: int
    class_name: str
    class_number: int
    section: str
    session: str
    student_count: int


class DashboardResponse(CamelModel):
    school: DashboardSchool
    stats: DashboardStats
    recent_students: list[RecentStudent]
    classes_overview: list[ClassOverview]
