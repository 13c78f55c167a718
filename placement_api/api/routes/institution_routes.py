"""
Institution Routes

POST /institutions/register - Register an institution and its coordinators
GET /institutions - Approved institutions
GET /institutions/{institution_id} - Institution details
POST /institutions/verify-coordinator - Is this email a coordinator?
POST /institutions/verify-student - May this student join the institution?
"""

from fastapi import APIRouter, Depends

from placement_api.core.dependencies import get_institution_service
from placement_api.services.institution_service import InstitutionService
from placement_api.schemas.schemas import (
    InstitutionRegister,
    VerifyCoordinatorRequest,
    VerifyStudentRequest,
)

router = APIRouter(prefix="/institutions", tags=["Institutions"])


@router.post("/register", status_code=201)
async def register_institution(
    data: InstitutionRegister,
    institutions: InstitutionService = Depends(get_institution_service),
):
    """
    Register an institution. Registrations are approved immediately.

    409 when an institution with the same name already exists in the city.
    """
    return institutions.register(data)


@router.get("")
async def list_institutions(institutions: InstitutionService = Depends(get_institution_service)):
    return institutions.list_approved()


@router.post("/verify-coordinator")
async def verify_coordinator(
    data: VerifyCoordinatorRequest,
    institutions: InstitutionService = Depends(get_institution_service),
):
    return institutions.verify_coordinator(data.email)


@router.post("/verify-student")
async def verify_student(
    data: VerifyStudentRequest,
    institutions: InstitutionService = Depends(get_institution_service),
):
    return institutions.verify_student(data.email, data.institution_id)


@router.get("/{institution_id}")
async def get_institution(institution_id: str, institutions: InstitutionService = Depends(get_institution_service)):
    return institutions.get(institution_id)
