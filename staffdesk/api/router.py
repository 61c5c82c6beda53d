"""
Main API router
"""
from fastapi import APIRouter

from staffdesk.api.v1 import (
    health,
    version,
    auth,
    profiles,
    salary,
    attendance,
    suspensions,
    tasks,
    projects,
    inventory,
    settings,
    reports,
    jobs,
    biodata,
    employee_audits,
    growth_tasks,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
api_router.include_router(salary.router, prefix="/salary", tags=["salary"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(suspensions.router, prefix="/suspensions", tags=["suspensions"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])
api_router.include_router(settings.router, prefix="/settings", tags=["system-settings"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(jobs.router, prefix="/admin/jobs", tags=["admin-jobs"])
api_router.include_router(biodata.router, prefix="/biodata", tags=["biodata"])
api_router.include_router(employee_audits.router, prefix="/employee-audits", tags=["employee-audits"])
api_router.include_router(growth_tasks.router, prefix="/growth-tasks", tags=["growth-tasks"])
