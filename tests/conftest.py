"""
Shared fixtures: the app wired to an in-memory MongoDB (mongomock) and,
where a test needs it, a mocked Adzuna transport.
"""
from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from placement_api.core.config import Settings
from placement_api.main import create_app

DRIVE_RESUME = "https://drive.google.com/file/d/1AbC_resume-42/view"
DRIVE_MEMO = "https://drive.google.com/open?id=9ZyX_memo"


@pytest.fixture
def settings():
    return Settings(
        mongodb_uri="mongodb://localhost:27017",
        mongodb_db="placement_test",
        adzuna_app_id="",
        adzuna_api_key="",
        log_level="WARNING",
    )


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def db(mongo_client, settings):
    return mongo_client[settings.mongodb_db]


@pytest.fixture
def client(settings, mongo_client):
    app = create_app(settings=settings, mongo_client=mongo_client)
    # Context manager runs startup, which creates the unique indexes
    with TestClient(app) as test_client:
        yield test_client


def profile_payload(clerk_user_id="user_1", roll_number="160121733001", **overrides):
    payload = {
        "clerkUserId": clerk_user_id,
        "email": f"{clerk_user_id}@cbit.ac.in",
        "firstName": "Ananya",
        "lastName": "Rao",
        "rollNumber": roll_number,
        "age": 21,
        "address": "Gandipet, Hyderabad",
        "collegeEmail": f"{clerk_user_id}@cbit.ac.in",
        "personalEmail": f"{clerk_user_id}.personal@gmail.com",
        "collegeName": "Chaitanya Bharathi Institute of Technology",
        "branch": "Computer Science",
        "academicStartYear": "2021",
        "academicEndYear": "2025",
        "currentSemester": "7",
        "mobileNumber": "9876543210",
        "cgpa": 8.2,
    }
    payload.update(overrides)
    return payload


def job_payload(posted_by="coordinator_1", days_open=30, **overrides):
    payload = {
        "title": "Software Engineer",
        "company": "Microsoft",
        "location": "Hyderabad",
        "salaryMin": 18,
        "salaryMax": 22,
        "experience": "0-2 years",
        "description": "Build cloud services.",
        "requirements": ["Python", "SQL"],
        "applicationDeadline": (datetime.utcnow() + timedelta(days=days_open)).isoformat() + "Z",
        "minCGPA": 7.0,
        "allowedBranches": ["Computer Science"],
        "academicYear": ["2025"],
        "postedBy": posted_by,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_profile(client):
    def _create(**kwargs):
        response = client.post("/users/profile", json=profile_payload(**kwargs))
        assert response.status_code in (200, 201), response.text
        return response.json()
    return _create


@pytest.fixture
def create_job(client):
    def _create(**kwargs):
        response = client.post("/coordinator/jobs", json=job_payload(**kwargs))
        assert response.status_code == 201, response.text
        return response.json()
    return _create
