"""
Institution Service - colleges registered on the platform.

An institution carries its placement coordinators and, optionally, the list
of students allowed to sign up. `isMainCoordinator` is informational only;
nothing enforces a single main coordinator.
"""

import logging
from datetime import datetime
from typing import List

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from placement_api.core.errors import ConflictError, NotFoundError, conflict_from_duplicate_key
from placement_api.db.mongodb import get_collection, parse_object_id, serialize_doc
from placement_api.schemas.schemas import InstitutionRegister

logger = logging.getLogger(__name__)

ALREADY_REGISTERED = "Institution with this name and city already exists"


def build_coordinators(data: InstitutionRegister) -> List[dict]:
    """
    Officers with both a name and an email become coordinators, the first
    one marked main. The registering coordinator is prepended as main when
    not already listed.
    """
    coordinators = [
        {
            "name": officer.name,
            "email": officer.email,
            "designation": officer.designation or "Placement Officer",
            "isMainCoordinator": index == 0,
        }
        for index, officer in enumerate(o for o in data.placement_officers if o.name and o.email)
    ]
    if not any(c["email"] == data.coordinator_email for c in coordinators):
        coordinators.insert(0, {
            "name": data.coordinator_name,
            "email": data.coordinator_email,
            "designation": "Placement Coordinator",
            "isMainCoordinator": True,
        })
    return coordinators


class InstitutionService:

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "institutions")

    def register(self, data: InstitutionRegister) -> dict:
        if self.collection.find_one(
            {"name": data.institution_name, "city": data.institution_city}, {"_id": 1}
        ):
            raise ConflictError(ALREADY_REGISTERED, field="name")

        now = datetime.utcnow()
        doc = {
            "name": data.institution_name,
            "address": data.institution_address,
            "city": data.institution_city,
            "state": data.institution_state,
            "pincode": data.institution_pincode or "",
            "phone": data.institution_phone or "",
            "website": data.institution_website or "",
            "coordinators": build_coordinators(data),
            "allowAllStudents": data.allow_all_students,
            "authorizedStudents": [s.to_document() for s in data.student_data],
            # Auto-approved until an admin review flow exists
            "isApproved": True,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise conflict_from_duplicate_key(exc, {"name": ALREADY_REGISTERED, "city": ALREADY_REGISTERED})

        logger.info("Institution '%s' (%s) registered", doc["name"], doc["city"])
        return {
            "message": "Institution registered successfully",
            "institutionId": str(result.inserted_id),
            "institution": {"name": doc["name"], "city": doc["city"], "state": doc["state"]},
        }

    def list_approved(self) -> List[dict]:
        cursor = self.collection.find(
            {"isApproved": True}, {"name": 1, "city": 1, "state": 1}
        ).sort("name", 1)
        return [serialize_doc(doc) for doc in cursor]

    def get(self, institution_id: str) -> dict:
        institution = self.collection.find_one({"_id": parse_object_id(institution_id, "institution id")})
        if institution is None:
            raise NotFoundError("Institution not found")
        return serialize_doc(institution)

    def verify_coordinator(self, email: str) -> dict:
        institution = self.collection.find_one({"coordinators.email": email, "isApproved": True})
        if institution is None:
            raise NotFoundError("Coordinator not found")

        coordinator = next(c for c in institution["coordinators"] if c["email"] == email)
        return {
            "isCoordinator": True,
            "institution": {
                "id": str(institution["_id"]),
                "name": institution["name"],
                "city": institution["city"],
                "state": institution["state"],
                "address": institution["address"],
                "phone": institution.get("phone"),
                "website": institution.get("website"),
            },
            "coordinatorInfo": coordinator,
        }

    def verify_student(self, email: str, institution_id: str) -> dict:
        institution = self.get(institution_id)
        if institution.get("allowAllStudents"):
            return {"isAuthorized": True, "institution": institution}

        authorized = any(
            s.get("email") == email for s in institution.get("authorizedStudents", [])
        )
        return {"isAuthorized": authorized, "institution": institution if authorized else None}
