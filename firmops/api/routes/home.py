"""Caller landing page endpoint."""

from fastapi import APIRouter, Depends

from firmops.core.auth import get_caller_email
from firmops.db.dependencies import get_persistence
from firmops.repositories import Persistence
from firmops.services.company_service import CompanyService
from firmops.services.home_service import HomeService
from firmops.services.project_service import ProjectService

router = APIRouter(tags=["home"])


@router.get("/home")
async def get_home(
    caller_email: str = Depends(get_caller_email),
    persistence: Persistence = Depends(get_persistence),
) -> dict[str, list[object]]:
    home = await HomeService(persistence).get_home(caller_email)
    return {
        "projects": [ProjectService.serialize_project(project) for project in home.projects],
        "companies": [CompanyService.serialize_company(company) for company in home.companies],
    }
