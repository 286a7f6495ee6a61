import time

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from schoolbase.core.database import Database
from schoolbase.core.responses import error_response, success_response
from schoolbase.modules.auth.router import admin_router as admin_auth_router
from schoolbase.modules.auth.router import school_admin_router as school_admin_auth_router
from schoolbase.modules.auth.router import student_router
from schoolbase.modules.classes.router import router as classes_router
from schoolbase.modules.curriculum.router import router as classlist_router
from schoolbase.modules.curriculum.router import school_admin_router as school_admin_classlist_router
from schoolbase.modules.dashboard.router import router as dashboard_router
from schoolbase.modules.enrollments.router import router as enrollments_router
from schoolbase.modules.registration.router import router as registration_router
from schoolbase.modules.schools.router import router as admin_schools_router
from schoolbase.modules.students.router import router as students_router

api_router = APIRouter()

# Public
api_router.include_router(student_router, prefix="/student", tags=["Student Auth"])
api_router.include_router(classlist_router, prefix="/classlist", tags=["Curriculum"])

# School admin
api_router.include_router(
    school_admin_auth_router, prefix="/school-admin/auth", tags=["School Admin - Auth"]
)
# Shares the /students prefix with the students router; keep it first
api_router.include_router(
    registration_router, prefix="/school-admin", tags=["School Admin - Registration"]
)
api_router.include_router(
    students_router, prefix="/school-admin/students", tags=["School Admin - Students"]
)
api_router.include_router(
    enrollments_router, prefix="/school-admin/enrollments", tags=["School Admin - Enrollments"]
)
api_router.include_router(
    classes_router, prefix="/school-admin/classes", tags=["School Admin - Classes"]
)
api_router.include_router(
    school_admin_classlist_router, prefix="/school-admin/classlist", tags=["School Admin - Classes"]
)
api_router.include_router(
    dashboard_router, prefix="/school-admin/dashboard", tags=["School Admin - Dashboard"]
)

# Platform admin
api_router.include_router(admin_auth_router, prefix="/admin/auth", tags=["Admin - Auth"])
api_router.include_router(admin_schools_router, prefix="/admin/schools", tags=["Admin - Schools"])


@api_router.get("/health", tags=["Health"])
async def health_check(request: Request) -> JSONResponse:
    """Database health check; 503 when the database cannot be reached."""
    database: Database = request.app.state.database

    if not database.is_connected or not await database.ping():
        return error_response(
            "Database connection failed",
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Service unavailable",
        )

    return success_response(
        {
            "status": "ok",
            "database": "connected",
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        },
        "Service is healthy",
    )
