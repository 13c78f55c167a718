#!/usr/bin/env python3
"""
Seed Script

Registers a sample institution and posts a few campus jobs through the
service layer, so the same validation and indexes apply as for API calls.
Safe to re-run: an already registered institution is reused.

Usage: python scripts/seed.py
"""
import sys
from datetime import datetime, timedelta
sys.path.insert(0, '.')

from placement_api.core.config import get_settings
from placement_api.core.errors import ConflictError
from placement_api.db.mongodb import (
    create_mongo_client,
    get_database,
    init_mongo_indexes,
)
from placement_api.schemas.schemas import InstitutionRegister, JobCreate
from placement_api.services.institution_service import InstitutionService
from placement_api.services.job_service import JobService

COORDINATOR_EMAIL = "placements@cbit.ac.in"

INSTITUTION = {
    "coordinatorName": "Priya Sharma",
    "coordinatorEmail": COORDINATOR_EMAIL,
    "institutionName": "Chaitanya Bharathi Institute of Technology",
    "institutionAddress": "Gandipet",
    "institutionCity": "Hyderabad",
    "institutionState": "Telangana",
    "allowAllStudents": True,
}

SAMPLE_JOBS = [
    {
        "title": "Software Development Engineer",
        "company": "Microsoft",
        "location": "Hyderabad",
        "salaryMin": 18,
        "salaryMax": 22,
        "experience": "0-2 years",
        "description": "Work on Azure cloud services and build scalable solutions.",
        "requirements": ["C#", ".NET", "Azure", "SQL"],
        "minCGPA": 7.5,
        "allowedBranches": ["Computer Science", "Information Technology"],
        "academicYear": ["2025"],
    },
    {
        "title": "Data Scientist",
        "company": "Amazon",
        "location": "Chennai",
        "salaryMin": 20,
        "salaryMax": 24,
        "experience": "1-3 years",
        "description": "Build machine learning models and analyse customer behaviour.",
        "requirements": ["Python", "Machine Learning", "Statistics", "SQL"],
        "minCGPA": 8.0,
        "allowedBranches": [],
        "academicYear": [],
        "maxApplications": 200,
    },
    {
        "title": "DevOps Engineer",
        "company": "Flipkart",
        "location": "Bangalore",
        "salaryMin": 15,
        "salaryMax": 18,
        "experience": "1-3 years",
        "description": "Manage cloud infrastructure and CI/CD pipelines.",
        "requirements": ["AWS", "Docker", "Kubernetes", "Linux"],
        "minCGPA": 6.5,
        "allowedBranches": ["Computer Science", "Electronics"],
        "academicYear": [],
    },
]


def main():
    settings = get_settings()
    client = create_mongo_client(settings)
    db = get_database(client, settings)
    init_mongo_indexes(db)

    print("🌱 Seeding database...")

    print("\n[1] Registering institution...")
    institutions = InstitutionService(db)
    try:
        result = institutions.register(InstitutionRegister(**INSTITUTION))
        print(f"    ✅ Registered: {result['institutionId']}")
    except ConflictError as e:
        print(f"    ⚠️  {e.message} (reusing)")

    print("\n[2] Posting jobs...")
    jobs = JobService(db)
    deadline = datetime.utcnow() + timedelta(days=30)
    for payload in SAMPLE_JOBS:
        job = jobs.create_job(JobCreate(
            **payload,
            applicationDeadline=deadline,
            postedBy=COORDINATOR_EMAIL,
        ))
        print(f"    ✅ {job['title']} @ {job['company']} ({job['salary']})")

    print("\n🎉 Seeding complete!")
    client.close()


if __name__ == "__main__":
    main()
