"""
External Job Routes

GET /external/jobs - Off-campus listings from Adzuna (demo data without credentials)
"""

from fastapi import APIRouter, Depends, Query

from placement_api.core.dependencies import get_external_job_service
from placement_api.services.external_jobs_service import ExternalJobService

router = APIRouter(prefix="/external", tags=["External Jobs"])


@router.get("/jobs")
async def external_jobs(
    what: str = Query("software engineer", description="Search keywords"),
    where: str = Query("bangalore", description="Location"),
    page: int = Query(1, ge=1),
    external: ExternalJobService = Depends(get_external_job_service),
):
    """
    Search external job listings.

    Returns {count, results, isDemo}. 502 when the provider call fails.
    """
    return await external.fetch_external_jobs(query=what, location=where, page=page)
