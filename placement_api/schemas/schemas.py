"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Wire format is camelCase (what the frontend sends and what MongoDB stores);
Python attributes are snake_case. Request bodies reject unknown fields.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from placement_api.db.mongodb import to_naive_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_document(self, **kwargs) -> dict:
        """Dump to the stored (camelCase, JSON-safe) shape."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


# ============================================================
# ENUMS
# ============================================================

class ApplicationStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    shortlisted = "shortlisted"
    selected = "selected"
    rejected = "rejected"


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class Project(CamelModel):
    title: str
    description: Optional[str] = None
    technologies: List[str] = []
    github: Optional[str] = None
    demo: Optional[str] = None


class Certification(CamelModel):
    name: str
    issuer: Optional[str] = None
    date: Optional[str] = None
    credential_id: Optional[str] = None
    url: Optional[str] = None
    media_url: Optional[str] = None


class SubjectGrade(CamelModel):
    name: str
    grade: Optional[str] = None
    credits: Optional[float] = None


class SemesterGrade(CamelModel):
    semester: str
    sgpa: float = Field(..., ge=0, le=10)
    credits: Optional[float] = None
    subjects: List[SubjectGrade] = []


class ProfileFields(CamelModel):
    """Every editable profile field, all optional (partial updates)."""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    roll_number: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=0, le=120)
    address: Optional[str] = None
    college_email: Optional[EmailStr] = None
    personal_email: Optional[EmailStr] = None
    college_name: Optional[str] = None
    institution_id: Optional[str] = None
    is_registered_institution: Optional[bool] = None
    branch: Optional[str] = None
    academic_start_year: Optional[str] = None
    academic_end_year: Optional[str] = None
    current_semester: Optional[str] = None
    mobile_number: Optional[str] = None
    cgpa: Optional[float] = Field(None, ge=0, le=10)

    projects: Optional[List[Project]] = None
    certifications: Optional[List[Certification]] = None
    skills: Optional[List[str]] = None
    achievements: Optional[List[str]] = None
    semester_grades: Optional[List[SemesterGrade]] = None

    resume_url: Optional[str] = None
    marks_memo_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    profile_picture: Optional[str] = None

    is_eligible_for_placements: Optional[bool] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    tenth_percentage: Optional[float] = Field(None, ge=0, le=100)
    twelfth_percentage: Optional[float] = Field(None, ge=0, le=100)
    diploma_percentage: Optional[float] = Field(None, ge=0, le=100)
    backlogs: Optional[int] = Field(None, ge=0)

    preferred_locations: Optional[List[str]] = None
    preferred_company_types: Optional[List[str]] = None
    expected_salary: Optional[str] = None

    @field_validator(
        "email", "first_name", "last_name", "roll_number", "age", "address",
        "college_email", "personal_email", "college_name", "branch",
        "academic_start_year", "academic_end_year", "current_semester",
        "mobile_number", "cgpa",
        mode="before",
    )
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it unchanged; null would wipe a required value
        if value is None:
            raise ValueError("may not be null")
        return value


class ProfileCreate(ProfileFields):
    """Full onboarding payload. Required fields mirror the stored record."""
    clerk_user_id: str = Field(..., min_length=1)
    email: EmailStr
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    roll_number: str = Field(..., min_length=1)
    age: int = Field(..., ge=0, le=120)
    address: str
    college_email: EmailStr
    personal_email: EmailStr
    college_name: str
    branch: str
    academic_start_year: str
    academic_end_year: str
    current_semester: str
    mobile_number: str
    cgpa: float = Field(..., ge=0, le=10)


class ProfileUpdate(ProfileFields):
    """Partial update; the identity id selects the profile and is never changed."""
    clerk_user_id: str = Field(..., min_length=1)


class OnboardingStatus(CamelModel):
    is_onboarding_complete: bool
    has_profile: bool


class ManualStudentCreate(CamelModel):
    """Student entered by a coordinator (no identity provider account yet)."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    roll_number: str = Field(..., min_length=1)
    branch: str
    semester: str
    cgpa: float = Field(..., ge=0, le=10)
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    address: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    tenth_percentage: Optional[float] = Field(None, ge=0, le=100)
    twelfth_percentage: Optional[float] = Field(None, ge=0, le=100)
    diploma_percentage: Optional[float] = Field(None, ge=0, le=100)
    backlogs: Optional[int] = Field(None, ge=0)
    institution_id: Optional[str] = None


# ============================================================
# INSTITUTION SCHEMAS
# ============================================================

class PlacementOfficer(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    designation: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email(cls, value):
        # Empty rows from the registration form are skipped, not rejected
        return value or None


class AuthorizedStudent(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    semester: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email(cls, value):
        return value or None


class InstitutionRegister(CamelModel):
    coordinator_name: str = Field(..., min_length=1)
    coordinator_email: EmailStr
    institution_name: str = Field(..., min_length=1)
    institution_address: str = Field(..., min_length=1)
    institution_city: str = Field(..., min_length=1)
    institution_state: str = Field(..., min_length=1)
    institution_pincode: Optional[str] = None
    institution_phone: Optional[str] = None
    institution_website: Optional[str] = None
    placement_officers: List[PlacementOfficer] = []
    allow_all_students: bool = False
    student_data: List[AuthorizedStudent] = []


class VerifyCoordinatorRequest(CamelModel):
    email: EmailStr


class VerifyStudentRequest(CamelModel):
    email: EmailStr
    institution_id: str


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str
    salary_min: float = Field(..., ge=0)
    salary_max: float = Field(..., ge=0)
    experience: str
    description: str
    requirements: List[str] = []
    application_deadline: datetime
    min_cgpa: float = Field(..., ge=0, le=10, alias="minCGPA")
    allowed_branches: List[str] = []
    academic_year: List[str] = []
    max_applications: Optional[int] = Field(None, ge=1)
    is_active: bool = True
    posted_by: str = Field(..., min_length=1)

    @field_validator("application_deadline")
    @classmethod
    def deadline_to_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class JobUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = None
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    experience: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    min_cgpa: Optional[float] = Field(None, ge=0, le=10, alias="minCGPA")
    allowed_branches: Optional[List[str]] = None
    academic_year: Optional[List[str]] = None
    max_applications: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator(
        "title", "company", "location", "salary_min", "salary_max", "experience",
        "description", "requirements", "application_deadline", "min_cgpa",
        "allowed_branches", "academic_year", "is_active",
        mode="before",
    )
    @classmethod
    def not_null(cls, value):
        # maxApplications may be cleared with null; nothing else may
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("application_deadline")
    @classmethod
    def deadline_to_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    student_id: str = Field(..., min_length=1)


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus
    notes: Optional[str] = None


class ApplicationStats(CamelModel):
    total: int
    pending: int
    reviewed: int
    shortlisted: int
    selected: int
    rejected: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    service: str
