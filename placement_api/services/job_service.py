"""
Job Service - campus job postings and eligibility matching.

Coordinators post jobs with eligibility thresholds (minimum CGPA, allowed
branches, academic years). Students see the active, not-yet-expired jobs they
qualify for.

The number of applications per job is NOT stored on the job. It is counted
from the applications collection on every read, so concurrent applies can
never leave it out of sync.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database

from placement_api.core.errors import NotFoundError
from placement_api.db.mongodb import get_collection, parse_object_id, serialize_doc
from placement_api.schemas.schemas import JobCreate, JobUpdate

logger = logging.getLogger(__name__)

CAMPUS_JOB_TYPE = "on-campus"


def format_salary_range(salary_min: float, salary_max: float) -> str:
    """Display string for a salary range given in LPA."""
    return f"₹{salary_min:g}-{salary_max:g} LPA"


def eligibility_query(
    cgpa: Optional[float] = None,
    branch: Optional[str] = None,
    academic_year: Optional[str] = None,
    now: Optional[datetime] = None,
) -> dict:
    """
    Build the MongoDB filter for jobs a student may apply to.

    Active and not past the deadline always; each eligibility criterion only
    when supplied. An empty allowedBranches list means any branch.
    """
    query = {
        "isActive": True,
        "applicationDeadline": {"$gte": now or datetime.utcnow()},
    }
    if cgpa is not None:
        query["minCGPA"] = {"$lte": cgpa}
    if branch:
        query["$or"] = [
            {"allowedBranches": branch},
            {"allowedBranches": {"$size": 0}},
            {"allowedBranches": {"$exists": False}},
        ]
    if academic_year:
        query["academicYear"] = academic_year
    return query


class JobService:
    """Job postings plus application counts derived from the applications collection."""

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "jobs")
        self.applications: Collection = get_collection(db, "applications")

    # --------------------------------------------------------
    # Derived counter
    # --------------------------------------------------------

    def application_counts(self, job_ids: Iterable[str]) -> Dict[str, int]:
        """Count applications per job id in a single aggregation."""
        ids = list(job_ids)
        if not ids:
            return {}
        pipeline = [
            {"$match": {"jobId": {"$in": ids}}},
            {"$group": {"_id": "$jobId", "count": {"$sum": 1}}},
        ]
        return {row["_id"]: row["count"] for row in self.applications.aggregate(pipeline)}

    def _with_counts(self, jobs: List[dict]) -> List[dict]:
        jobs = [serialize_doc(job) for job in jobs]
        counts = self.application_counts(job["_id"] for job in jobs)
        for job in jobs:
            job["applicationsCount"] = counts.get(job["_id"], 0)
        return jobs

    # --------------------------------------------------------
    # Coordinator CRUD
    # --------------------------------------------------------

    def create_job(self, data: JobCreate) -> dict:
        now = datetime.utcnow()
        doc = data.model_dump(by_alias=True)
        doc.update({
            "salary": format_salary_range(data.salary_min, data.salary_max),
            "type": CAMPUS_JOB_TYPE,
            "postedDate": now,
            "createdAt": now,
            "updatedAt": now,
        })
        self.collection.insert_one(doc)
        logger.info("Job '%s' posted by %s", data.title, data.posted_by)
        job = serialize_doc(doc)
        job["applicationsCount"] = 0
        return job

    def get_job(self, job_id: str) -> dict:
        job = self.collection.find_one({"_id": parse_object_id(job_id, "job id")})
        if job is None:
            raise NotFoundError("Job not found")
        return self._with_counts([job])[0]

    def list_by_coordinator(self, coordinator_id: str) -> List[dict]:
        jobs = list(self.collection.find({"postedBy": coordinator_id}).sort("createdAt", -1))
        return self._with_counts(jobs)

    def update_job(self, job_id: str, data: JobUpdate) -> dict:
        oid = parse_object_id(job_id, "job id")
        changes = data.model_dump(by_alias=True, exclude_unset=True)
        if data.salary_min is not None and data.salary_max is not None:
            changes["salary"] = format_salary_range(data.salary_min, data.salary_max)
        changes["updatedAt"] = datetime.utcnow()

        job = self.collection.find_one_and_update(
            {"_id": oid}, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        if job is None:
            raise NotFoundError("Job not found")
        return self._with_counts([job])[0]

    def delete_job(self, job_id: str) -> int:
        """Delete a job and its applications. Returns applications removed."""
        oid = parse_object_id(job_id, "job id")
        result = self.collection.delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError("Job not found")
        removed = self.applications.delete_many({"jobId": job_id}).deleted_count
        logger.info("Job %s deleted with %d applications", job_id, removed)
        return removed

    # --------------------------------------------------------
    # Student matching
    # --------------------------------------------------------

    def list_eligible_jobs(
        self,
        cgpa: Optional[float] = None,
        branch: Optional[str] = None,
        academic_year: Optional[str] = None,
        job_type: Optional[str] = None,
    ) -> List[dict]:
        """Active, open jobs matching the student's CGPA, branch and year."""
        query = eligibility_query(cgpa, branch, academic_year)
        if job_type:
            query["type"] = job_type
        jobs = list(self.collection.find(query).sort("postedDate", -1))
        return self._with_counts(jobs)
