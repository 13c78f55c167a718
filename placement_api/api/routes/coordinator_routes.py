"""
Coordinator Routes

Jobs:
GET /coordinator/{coordinator_id}/jobs - Jobs posted by a coordinator
POST /coordinator/jobs - Create job posting
PUT /coordinator/jobs/{job_id} - Update job
DELETE /coordinator/jobs/{job_id} - Delete job (cascades to applications)

Applications:
GET /coordinator/jobs/{job_id}/applications - Applications for a job
GET /coordinator/jobs/{job_id}/applications/export - Export rows for a job
GET /coordinator/{coordinator_id}/applications - Applications to all my jobs
PUT /coordinator/applications/{application_id}/status - Change status
DELETE /coordinator/applications/{application_id} - Delete application

Students:
GET /coordinator/students/{institution_id} - Students of an institution
POST /coordinator/students - Add a student manually
PUT /coordinator/students/{student_id} - Edit a student
"""

from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from placement_api.core.dependencies import (
    get_application_service,
    get_job_service,
    get_profile_service,
)
from placement_api.services.application_service import ApplicationService
from placement_api.services.job_service import JobService
from placement_api.services.profile_service import ProfileService
from placement_api.schemas.schemas import (
    ApplicationStatusUpdate,
    JobCreate,
    JobUpdate,
    ManualStudentCreate,
    MessageResponse,
    ProfileFields,
)

router = APIRouter(prefix="/coordinator", tags=["Coordinators"])


# ============================================================
# JOBS
# ============================================================

@router.get("/{coordinator_id}/jobs")
async def list_jobs(coordinator_id: str, jobs: JobService = Depends(get_job_service)):
    """Jobs posted by this coordinator, newest first, with application counts."""
    return jobs.list_by_coordinator(coordinator_id)


@router.post("/jobs", status_code=201)
async def create_job(job: JobCreate, jobs: JobService = Depends(get_job_service)):
    """Create an on-campus job posting."""
    return jobs.create_job(job)


@router.get("/jobs/{job_id}")
async def get_job(job_id: str, jobs: JobService = Depends(get_job_service)):
    return jobs.get_job(job_id)


@router.put("/jobs/{job_id}")
async def update_job(job_id: str, update: JobUpdate, jobs: JobService = Depends(get_job_service)):
    """Update a job posting. Only provided fields change."""
    return jobs.update_job(job_id, update)


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
async def delete_job(job_id: str, jobs: JobService = Depends(get_job_service)):
    """Delete a job posting. Cascades to applications."""
    removed = jobs.delete_job(job_id)
    return MessageResponse(message=f"Job deleted successfully ({removed} applications removed)")


# ============================================================
# APPLICATIONS
# ============================================================

@router.get("/jobs/{job_id}/applications")
async def job_applications(job_id: str, applications: ApplicationService = Depends(get_application_service)):
    return applications.list_for_job(job_id)


@router.get("/jobs/{job_id}/applications/export")
async def export_job_applications(
    job_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    """Applications as flat rows; the frontend turns them into a spreadsheet."""
    export = applications.export_for_job(job_id)
    safe_title = "".join(c if c.isalnum() else "_" for c in export["jobTitle"])
    filename = f"{safe_title}_Applications_{date.today().isoformat()}.json"
    return JSONResponse(
        content=jsonable_encoder(export),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{coordinator_id}/applications")
async def coordinator_applications(
    coordinator_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    return applications.list_for_coordinator(coordinator_id)


@router.put("/applications/{application_id}/status")
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    applications: ApplicationService = Depends(get_application_service),
):
    """Set any status; transitions are not restricted."""
    return applications.update_status(application_id, update.status, update.notes)


@router.delete("/applications/{application_id}")
async def delete_application(
    application_id: str,
    applications: ApplicationService = Depends(get_application_service),
):
    deleted_id = applications.delete_application(application_id)
    return {"message": "Application deleted successfully", "deletedId": deleted_id}


# ============================================================
# STUDENTS
# ============================================================

@router.get("/students/{institution_id}")
async def institution_students(institution_id: str, profiles: ProfileService = Depends(get_profile_service)):
    return profiles.list_institution_students(institution_id)


@router.post("/students", status_code=201)
async def add_student(data: ManualStudentCreate, profiles: ProfileService = Depends(get_profile_service)):
    """Add a student who has not signed up yet."""
    student = profiles.add_manual_student(data)
    return {"message": "Student added successfully", "student": student}


@router.put("/students/{student_id}")
async def update_student(
    student_id: str,
    data: ProfileFields,
    profiles: ProfileService = Depends(get_profile_service),
):
    student = profiles.update_student(student_id, data)
    return {"message": "Student updated successfully", "student": student}
