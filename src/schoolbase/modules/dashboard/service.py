"""
Dashboard Service Layer

Summary numbers for a school admin's landing page.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from schoolbase.core.auth import TenantContext
from schoolbase.modules.dashboard import repository
from schoolbase.modules.dashboard.schemas import (
    ClassOverview,
    DashboardResponse,
    DashboardSchool,
    DashboardStats,
    RecentStudent,
)
from schoolbase.modules.students import repository as student_repository
from schoolbase.modules.students.models import StudentStatus

RECENT_STUDENTS = 5


async def get_dashboard(db: AsyncSession, tenant: TenantContext) -> DashboardResponse:
    """
    Collect the dashboard for the calling school.

    Returns:
        School identity, headline counts, the five newest students and
        every class with its active student count (by class number, then
        section)
    """
    school_id = tenant.school_id

    stats = DashboardStats(
        total_students=await student_repository.count_for_school(db, school_id),
        active_students=await student_repository.count_for_school(
            db, school_id, status=StudentStatus.ACTIVE
        ),
        total_classes=await repository.count_classes(db, school_id),
        active_enrollments=await repository.count_active_enrollments(db, school_id),
        students_by_status=await repository.students_by_status(db, school_id),
    )

    recent = await repository.recent_students(db, school_id, RECENT_STUDENTS)
    overview = await repository.classes_overview(db, school_id)

    return DashboardResponse(
        school=DashboardSchool(id=school_id, name=tenant.school_name, code=tenant.school_code),
        stats=stats,
        recent_students=[RecentStudent(**row) for row in recent],
        classes_overview=[ClassOverview(**row) for row in overview],
    )
