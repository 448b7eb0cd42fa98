"""Top-level API router."""

from fastapi import APIRouter

from firmops.api.routes.companies import router as companies_router
from firmops.api.routes.expenses import router as expenses_router
from firmops.api.routes.health import router as health_router
from firmops.api.routes.home import router as home_router
from firmops.api.routes.projects import router as projects_router
from firmops.api.routes.roles import employees_router as employee_roles_router
from firmops.api.routes.roles import router as roles_router
from firmops.api.routes.tasks import employees_router as employee_tasks_router
from firmops.api.routes.tasks import router as tasks_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(home_router)
api_router.include_router(companies_router)
api_router.include_router(projects_router)
api_router.include_router(tasks_router)
api_router.include_router(employee_tasks_router)
api_router.include_router(roles_router)
api_router.include_router(employee_roles_router)
api_router.include_router(expenses_router)
