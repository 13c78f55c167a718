"""
Profile Service - the canonical student profile record.

Invariants (backed by unique indexes, see init_mongo_indexes):
- at most one profile per identity id (clerkUserId)
- at most one profile per roll number

Profiles are created on first onboarding submission (upsert keyed on the
identity id), updated on every later submission and never hard-deleted.
"""

import copy
import logging
import re
import time
from datetime import date, datetime
from typing import List, Optional, Tuple

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from placement_api.core.errors import (
    ConflictError,
    NotFoundError,
    conflict_from_duplicate_key,
)
from placement_api.db.mongodb import get_collection, parse_object_id, serialize_doc
from placement_api.schemas.schemas import (
    ManualStudentCreate,
    ProfileCreate,
    ProfileFields,
    ProfileUpdate,
)
from placement_api.utils.document_links import validate_document_links

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGES = {
    "rollNumber": "Roll number already exists",
    "clerkUserId": "Profile already exists for this user",
}

# Applied only when a profile is first inserted
PROFILE_DEFAULTS = {
    "isEligibleForPlacements": True,
    "isRegisteredInstitution": False,
    "isManualEntry": False,
    "backlogs": 0,
    "projects": [],
    "certifications": [],
    "skills": [],
    "achievements": [],
    "semesterGrades": [],
}

# Never writable through an update payload
PROTECTED_FIELDS = ("clerkUserId", "_id", "createdAt", "isOnboardingComplete")


class ProfileService:
    """Create, read and update student profiles."""

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "profiles")
        self.institutions: Collection = get_collection(db, "institutions")

    # --------------------------------------------------------
    # Reads
    # --------------------------------------------------------

    def find_by_clerk_user_id(self, clerk_user_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"clerkUserId": clerk_user_id}))

    def get_profile(self, clerk_user_id: str) -> dict:
        profile = self.find_by_clerk_user_id(clerk_user_id)
        if profile is None:
            raise NotFoundError("User profile not found")
        return profile

    def check_onboarding(self, clerk_user_id: str) -> dict:
        """Missing profile is a normal answer here, not an error."""
        profile = self.collection.find_one(
            {"clerkUserId": clerk_user_id}, {"isOnboardingComplete": 1}
        )
        if profile is None:
            return {"isOnboardingComplete": False, "hasProfile": False}
        return {
            "isOnboardingComplete": bool(profile.get("isOnboardingComplete", False)),
            "hasProfile": True,
        }

    # --------------------------------------------------------
    # Writes
    # --------------------------------------------------------

    def _ensure_roll_number_available(self, roll_number: Optional[str], clerk_user_id: Optional[str]) -> None:
        if not roll_number:
            return
        query = {"rollNumber": roll_number}
        if clerk_user_id is not None:
            query["clerkUserId"] = {"$ne": clerk_user_id}
        if self.collection.find_one(query, {"_id": 1}) is not None:
            raise ConflictError(
                DUPLICATE_MESSAGES["rollNumber"],
                field="rollNumber",
                details="A student with this roll number is already registered",
            )

    def _upsert(self, clerk_user_id: str, update: dict) -> dict:
        return self.collection.find_one_and_update(
            {"clerkUserId": clerk_user_id},
            update,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    def upsert_profile(self, data: ProfileCreate) -> Tuple[dict, bool]:
        """
        Create the profile for data.clerk_user_id, or overwrite the supplied
        fields of the existing one.

        Returns (profile, created). Every upsert marks onboarding complete:
        the create schema already requires all mandatory fields.
        """
        clerk_user_id = data.clerk_user_id
        fields = data.to_document(exclude_unset=True)
        self._ensure_roll_number_available(fields.get("rollNumber"), clerk_user_id)
        validate_document_links(fields)

        created = self.collection.find_one({"clerkUserId": clerk_user_id}, {"_id": 1}) is None
        now = datetime.utcnow()
        fields["isOnboardingComplete"] = True
        fields["updatedAt"] = now

        on_insert = {k: copy.deepcopy(v) for k, v in PROFILE_DEFAULTS.items() if k not in fields}
        on_insert["createdAt"] = now

        update = {"$set": fields, "$setOnInsert": on_insert}
        try:
            profile = self._upsert(clerk_user_id, update)
        except DuplicateKeyError as exc:
            conflict = conflict_from_duplicate_key(exc, DUPLICATE_MESSAGES)
            if conflict.field != "clerkUserId":
                raise conflict
            # A concurrent first submission won the insert; update its profile instead
            created = False
            try:
                profile = self._upsert(clerk_user_id, update)
            except DuplicateKeyError as retry_exc:
                raise conflict_from_duplicate_key(retry_exc, DUPLICATE_MESSAGES)

        logger.info("Profile %s for %s", "created" if created else "updated", clerk_user_id)
        return serialize_doc(profile), created

    def _apply_update(self, query: dict, changes: dict, clerk_user_id: Optional[str]) -> dict:
        for field in PROTECTED_FIELDS:
            changes.pop(field, None)
        self._ensure_roll_number_available(changes.get("rollNumber"), clerk_user_id)
        validate_document_links(changes)
        changes["updatedAt"] = datetime.utcnow()

        try:
            profile = self.collection.find_one_and_update(
                query, {"$set": changes}, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as exc:
            raise conflict_from_duplicate_key(exc, DUPLICATE_MESSAGES)

        if profile is None:
            raise NotFoundError("Profile not found")
        return serialize_doc(profile)

    def update_profile(self, data: ProfileUpdate) -> dict:
        """Partial update by identity id. The identity id itself never changes."""
        changes = data.to_document(exclude_unset=True)
        return self._apply_update(
            {"clerkUserId": data.clerk_user_id}, changes, data.clerk_user_id
        )

    def update_student(self, student_id: str, data: ProfileFields) -> dict:
        """Coordinator edit of a profile addressed by its document id."""
        oid = parse_object_id(student_id, "student id")
        existing = self.collection.find_one({"_id": oid}, {"clerkUserId": 1})
        if existing is None:
            raise NotFoundError("Student not found")
        return self._apply_update(
            {"_id": oid}, data.to_document(exclude_unset=True), existing.get("clerkUserId")
        )

    def add_manual_student(self, data: ManualStudentCreate) -> dict:
        """
        Register a student on behalf of a coordinator.

        The student has no identity-provider account yet, so a placeholder
        identity id is generated. Onboarding stays incomplete until the
        student submits their own profile.
        """
        clash = self.collection.find_one(
            {"$or": [{"email": data.email}, {"rollNumber": data.roll_number}]},
            {"rollNumber": 1},
        )
        if clash is not None:
            field = "rollNumber" if clash.get("rollNumber") == data.roll_number else "email"
            raise ConflictError("Student with this email or roll number already exists", field=field)

        college_name = "Institution Student"
        if data.institution_id:
            institution = self.institutions.find_one(
                {"_id": parse_object_id(data.institution_id, "institution id")}, {"name": 1}
            )
            if institution is not None:
                college_name = institution["name"]

        first_name, _, last_name = data.name.strip().partition(" ")
        this_year = date.today().year
        age = this_year - data.date_of_birth.year if data.date_of_birth else 20
        now = datetime.utcnow()

        doc = {
            "clerkUserId": f"manual_{data.roll_number}_{int(time.time() * 1000)}",
            "email": data.email,
            "firstName": first_name,
            "lastName": last_name.strip() or "Student",
            "rollNumber": data.roll_number,
            "age": age,
            "address": data.address or "",
            "collegeEmail": data.email,
            "personalEmail": data.email,
            "collegeName": college_name,
            "institutionId": data.institution_id,
            "branch": data.branch,
            "academicStartYear": str(this_year - 2),
            "academicEndYear": str(this_year + 2),
            "currentSemester": data.semester,
            "mobileNumber": data.phone or "",
            "cgpa": data.cgpa,
            "dateOfBirth": data.date_of_birth.isoformat() if data.date_of_birth else None,
            "parentName": data.parent_name,
            "parentPhone": data.parent_phone,
            "tenthPercentage": data.tenth_percentage,
            "twelfthPercentage": data.twelfth_percentage,
            "diplomaPercentage": data.diploma_percentage,
            **copy.deepcopy(PROFILE_DEFAULTS),
            "backlogs": data.backlogs or 0,
            "isRegisteredInstitution": True,
            "isManualEntry": True,
            "isOnboardingComplete": False,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise conflict_from_duplicate_key(exc, DUPLICATE_MESSAGES)

        logger.info("Manual student %s added", data.roll_number)
        return {
            "id": str(result.inserted_id),
            "name": f"{doc['firstName']} {doc['lastName']}",
            "email": doc["email"],
            "rollNumber": doc["rollNumber"],
            "branch": doc["branch"],
        }

    # --------------------------------------------------------
    # Coordinator views
    # --------------------------------------------------------

    def list_institution_students(self, institution_id: str) -> List[dict]:
        """
        Students of an institution: linked directly by id, or whose college
        name matches the institution's name (case-insensitive).
        """
        institution = self.institutions.find_one(
            {"_id": parse_object_id(institution_id, "institution id")}
        )
        if institution is None:
            raise NotFoundError("Institution not found")

        name = institution["name"]
        query = {
            "$or": [
                {"institutionId": institution_id},
                {"collegeName": name},
                {"collegeName": {"$regex": re.escape(name), "$options": "i"}},
            ]
        }
        students = []
        for student in self.collection.find(query).sort("firstName", 1):
            if student.get("institutionId") == institution_id:
                match_type = "direct"
            elif student.get("collegeName") == name:
                match_type = "collegeName"
            else:
                match_type = "inferred"
            students.append({
                "id": str(student["_id"]),
                "name": f"{student.get('firstName', '')} {student.get('lastName', '')}".strip(),
                "email": student.get("email"),
                "rollNumber": student.get("rollNumber"),
                "branch": student.get("branch") or "Not specified",
                "semester": student.get("currentSemester"),
                "cgpa": student.get("cgpa"),
                "phone": student.get("mobileNumber"),
                "dateOfBirth": student.get("dateOfBirth"),
                "address": student.get("address"),
                "parentName": student.get("parentName"),
                "parentPhone": student.get("parentPhone"),
                "resumeUrl": student.get("resumeUrl"),
                "marksMemoUrl": student.get("marksMemoUrl"),
                "registeredDate": student.get("createdAt"),
                "tenthPercentage": student.get("tenthPercentage"),
                "twelfthPercentage": student.get("twelfthPercentage"),
                "diplomaPercentage": student.get("diplomaPercentage"),
                "backlogs": student.get("backlogs"),
                "isManualEntry": student.get("isManualEntry", False),
                "matchType": match_type,
            })
        return students
