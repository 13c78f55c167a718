"""
Application Service - students applying to jobs and coordinators tracking them.

One application per (studentId, jobId), enforced by a unique index so two
concurrent applies cannot both succeed. Status may move between any of the
enumerated values (coordinators override freely); every change is appended
to statusHistory.
"""

import logging
from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from placement_api.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    conflict_from_duplicate_key,
)
from placement_api.db.mongodb import get_collection, parse_object_id, serialize_doc
from placement_api.schemas.schemas import ApplicationStatus

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "Already applied to this job"
NOT_DISCLOSED = "Not disclosed"


def student_view_status(status: str) -> str:
    """Students see a selection as an acceptance."""
    return "accepted" if status == ApplicationStatus.selected.value else status


class ApplicationService:
    """Applications collection plus the job and profile lookups they need."""

    def __init__(self, db: Database):
        self.collection: Collection = get_collection(db, "applications")
        self.jobs: Collection = get_collection(db, "jobs")
        self.profiles: Collection = get_collection(db, "profiles")

    def _get_job(self, job_id: str) -> dict:
        job = self.jobs.find_one({"_id": parse_object_id(job_id, "job id")})
        if job is None:
            raise NotFoundError("Job not found")
        return job

    # --------------------------------------------------------
    # Student side
    # --------------------------------------------------------

    def apply_to_job(self, student_id: str, job_id: str) -> dict:
        """
        Create a pending application for the student.

        Raises ConflictError on a repeat application, NotFoundError for a
        missing job or profile, ValidationError when the student is not
        eligible or the job no longer accepts applications.
        """
        if self.collection.find_one({"studentId": student_id, "jobId": job_id}, {"_id": 1}):
            raise ConflictError(ALREADY_APPLIED, field="jobId")

        job = self._get_job(job_id)
        profile = self.profiles.find_one({"clerkUserId": student_id})
        if profile is None:
            raise NotFoundError("Student profile not found")

        now = datetime.utcnow()
        if not job.get("isActive", True):
            raise ValidationError("Job is not accepting applications")
        # Records written before required fields were enforced may hold null
        student_cgpa = profile.get("cgpa") or 0
        min_cgpa = job.get("minCGPA") or 0
        if student_cgpa < min_cgpa:
            raise ValidationError(
                f"CGPA requirement not met. Required: {min_cgpa}, Your CGPA: {profile.get('cgpa')}"
            )
        deadline = job.get("applicationDeadline")
        if deadline is not None and now > deadline:
            raise ValidationError("Application deadline has passed")
        if job.get("maxApplications"):
            if self.collection.count_documents({"jobId": job_id}) >= job["maxApplications"]:
                raise ValidationError("Maximum applications limit reached")

        status = ApplicationStatus.pending.value
        doc = {
            "studentId": student_id,
            "jobId": job_id,
            "studentName": f"{profile.get('firstName', '')} {profile.get('lastName', '')}".strip(),
            "studentEmail": profile.get("email"),
            "rollNumber": profile.get("rollNumber"),
            "branch": profile.get("branch"),
            "cgpa": profile.get("cgpa"),
            "semester": profile.get("currentSemester"),
            "phone": profile.get("mobileNumber"),
            "resumeUrl": profile.get("resumeUrl"),
            "marksMemoUrl": profile.get("marksMemoUrl"),
            "status": status,
            "appliedDate": now,
            "lastUpdated": now,
            "statusHistory": [{"status": status, "date": now, "notes": "Application submitted"}],
        }
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise conflict_from_duplicate_key(exc, {"studentId": ALREADY_APPLIED, "jobId": ALREADY_APPLIED})

        logger.info("Student %s applied to job %s", student_id, job_id)
        return serialize_doc(doc)

    def list_for_student(self, student_id: str) -> List[dict]:
        """A student's applications joined with the job they target."""
        applications = list(self.collection.find({"studentId": student_id}).sort("appliedDate", -1))
        job_ids = [ObjectId(a["jobId"]) for a in applications if ObjectId.is_valid(a["jobId"])]
        jobs = {str(j["_id"]): j for j in self.jobs.find({"_id": {"$in": job_ids}})}

        results = []
        for app in applications:
            job = jobs.get(app["jobId"])
            if job is None:
                logger.warning("Application %s references a missing job", app["_id"])
            results.append({
                "id": str(app["_id"]),
                "jobId": app["jobId"] if job else None,
                "jobTitle": job["title"] if job else "Job not found",
                "company": job["company"] if job else "Unknown",
                "location": job.get("location") if job else "Not specified",
                "salary": job.get("salary", NOT_DISCLOSED) if job else NOT_DISCLOSED,
                "appliedDate": app.get("appliedDate"),
                "status": student_view_status(app["status"]),
                "lastUpdate": app.get("lastUpdated") or app.get("appliedDate"),
                "notes": app.get("notes"),
                "isOnCampus": bool(job and job.get("type") == "on-campus"),
            })
        return results

    def stats_for_student(self, student_id: str) -> dict:
        stats = {status.value: 0 for status in ApplicationStatus}
        for app in self.collection.find({"studentId": student_id}, {"status": 1}):
            stats[app["status"]] = stats.get(app["status"], 0) + 1
        stats["total"] = sum(stats.values())
        return stats

    # --------------------------------------------------------
    # Coordinator side
    # --------------------------------------------------------

    def _enrich(self, applications: List[dict], jobs: Optional[dict] = None) -> List[dict]:
        """Overlay current profile data on the snapshot taken at apply time."""
        student_ids = list({a["studentId"] for a in applications})
        profiles = {
            p["clerkUserId"]: p for p in self.profiles.find({"clerkUserId": {"$in": student_ids}})
        }
        results = []
        for app in applications:
            item = serialize_doc(app)
            item["id"] = item["_id"]
            profile = profiles.get(app["studentId"])
            if profile is not None:
                item.update({
                    "studentName": f"{profile.get('firstName', '')} {profile.get('lastName', '')}".strip(),
                    "studentEmail": profile.get("email"),
                    "rollNumber": profile.get("rollNumber"),
                    "cgpa": profile.get("cgpa"),
                    "branch": profile.get("branch"),
                    "semester": profile.get("currentSemester"),
                })
            if jobs is not None:
                job = jobs.get(app["jobId"])
                if job is not None:
                    item["jobTitle"] = f"{job['title']} - {job['company']}"
            results.append(item)
        return results

    def list_for_job(self, job_id: str) -> List[dict]:
        self._get_job(job_id)
        applications = list(self.collection.find({"jobId": job_id}).sort("appliedDate", -1))
        return self._enrich(applications)

    def list_for_coordinator(self, coordinator_id: str) -> List[dict]:
        jobs = {str(j["_id"]): j for j in self.jobs.find({"postedBy": coordinator_id})}
        applications = list(
            self.collection.find({"jobId": {"$in": list(jobs)}}).sort("appliedDate", -1)
        )
        return self._enrich(applications, jobs)

    def update_status(self, application_id: str, status: ApplicationStatus, notes: Optional[str] = None) -> dict:
        """Set any enumerated status; no transition rules are enforced."""
        oid = parse_object_id(application_id, "application id")
        now = datetime.utcnow()
        changes = {"status": status.value, "lastUpdated": now}
        if notes:
            changes["notes"] = notes

        application = self.collection.find_one_and_update(
            {"_id": oid},
            {
                "$set": changes,
                "$push": {"statusHistory": {"status": status.value, "date": now, "notes": notes}},
            },
            return_document=ReturnDocument.AFTER,
        )
        if application is None:
            raise NotFoundError("Application not found")
        logger.info("Application %s set to %s", application_id, status.value)
        return serialize_doc(application)

    def delete_application(self, application_id: str) -> str:
        oid = parse_object_id(application_id, "application id")
        if self.collection.delete_one({"_id": oid}).deleted_count == 0:
            raise NotFoundError("Application not found")
        logger.info("Application %s deleted", application_id)
        return application_id

    def export_for_job(self, job_id: str) -> dict:
        """Flat rows for a spreadsheet export of one job's applications."""
        job = self._get_job(job_id)
        applications = list(self.collection.find({"jobId": job_id}).sort("appliedDate", -1))
        if not applications:
            raise NotFoundError("No applications found for this job")

        rows = []
        for index, app in enumerate(applications, start=1):
            applied = app.get("appliedDate")
            rows.append({
                "S.No": index,
                "Student Name": app.get("studentName"),
                "Email": app.get("studentEmail"),
                "Roll Number": app.get("rollNumber"),
                "Branch": app.get("branch"),
                "Semester": app.get("semester"),
                "CGPA": app.get("cgpa"),
                "Phone": app.get("phone") or "Not provided",
                "Applied Date": applied.strftime("%d/%m/%Y") if applied else "",
                "Status": app["status"].capitalize(),
                "Resume URL": app.get("resumeUrl") or "Not provided",
                "CMM URL": app.get("marksMemoUrl") or "Not provided",
                "Notes": app.get("notes") or "No notes",
            })
        return {
            "jobTitle": job["title"],
            "company": job["company"],
            "exportDate": datetime.utcnow().isoformat() + "Z",
            "totalApplications": len(rows),
            "data": rows,
        }
