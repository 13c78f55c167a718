"""
FastAPI dependencies - hand each route the services it needs.

The database handle and external client are built once in create_app and
live on app.state; services are cheap wrappers created per request.

Usage:
    @router.get("/profile/{clerk_user_id}")
    async def route(profiles: ProfileService = Depends(get_profile_service)):
        ...
"""

from fastapi import Depends, Request
from pymongo.database import Database

from placement_api.services.application_service import ApplicationService
from placement_api.services.external_jobs_service import ExternalJobService
from placement_api.services.institution_service import InstitutionService
from placement_api.services.job_service import JobService
from placement_api.services.profile_service import ProfileService


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_profile_service(db: Database = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_job_service(db: Database = Depends(get_db)) -> JobService:
    return JobService(db)


def get_application_service(db: Database = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


def get_institution_service(db: Database = Depends(get_db)) -> InstitutionService:
    return InstitutionService(db)


def get_external_job_service(request: Request) -> ExternalJobService:
    return request.app.state.external_jobs
