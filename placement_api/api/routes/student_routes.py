"""
Student Routes

GET /student/jobs - Jobs the student is eligible for
POST /student/apply/{job_id} - Apply to a job
GET /student/{student_id}/applications - My applications
GET /student/{student_id}/applications/stats - Application counts per status
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from placement_api.core.dependencies import (
    get_application_service,
    get_job_service,
    get_profile_service,
)
from placement_api.services.application_service import ApplicationService
from placement_api.services.job_service import JobService
from placement_api.services.profile_service import ProfileService
from placement_api.schemas.schemas import ApplicationCreate, ApplicationStats

router = APIRouter(prefix="/student", tags=["Students"])

REGISTERED_MESSAGE = "You have access to both on-campus and external job opportunities."
UNREGISTERED_MESSAGE = (
    "You can only access external job opportunities. To access on-campus jobs, "
    "your institution must be registered with PlacementPro."
)


@router.get("/jobs")
async def list_jobs(
    cgpa: Optional[float] = Query(None, ge=0, le=10),
    branch: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    clerk_user_id: Optional[str] = Query(None, alias="clerkUserId"),
    jobs: JobService = Depends(get_job_service),
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    List active jobs whose deadline has not passed and whose eligibility
    criteria the student meets.

    With clerkUserId, missing criteria are taken from the student's profile,
    and students whose institution is not registered only see external jobs.
    """
    registered = True
    if clerk_user_id:
        profile = profiles.find_by_clerk_user_id(clerk_user_id)
        registered = bool(profile and profile.get("isRegisteredInstitution"))
        if profile:
            cgpa = cgpa if cgpa is not None else profile.get("cgpa")
            branch = branch or profile.get("branch")

    eligible = jobs.list_eligible_jobs(
        cgpa=cgpa,
        branch=branch,
        academic_year=academic_year,
        job_type=None if registered else "external",
    )
    return {
        "jobs": eligible,
        "accessLevel": {
            "isFromRegisteredInstitution": registered,
            "canAccessOnCampusJobs": registered,
            "message": REGISTERED_MESSAGE if registered else UNREGISTERED_MESSAGE,
        },
    }


@router.post("/apply/{job_id}", status_code=201)
async def apply_to_job(
    job_id: str,
    application: ApplicationCreate,
    applications: ApplicationService = Depends(get_application_service),
):
    """Apply to a job. Cannot apply twice to the same job (409)."""
    return applications.apply_to_job(application.student_id, job_id)


@router.get("/{student_id}/applications")
async def my_applications(
    student_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    """All applications of a student, newest first."""
    return applications.list_for_student(student_id)


@router.get("/{student_id}/applications/stats", response_model=ApplicationStats)
async def my_application_stats(
    student_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    """Application counts by status."""
    return applications.stats_for_student(student_id)
