"""
Adzuna client: demo fallback, normalisation, and upstream failures.
"""
import asyncio

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient

from placement_api.core.config import Settings
from placement_api.core.errors import UpstreamError
from placement_api.main import create_app
from placement_api.services.external_jobs_service import (
    ExternalJobService,
    format_external_salary,
    normalize_external_job,
)

ADZUNA_RESULT = {
    "id": 4211,
    "title": "Python Developer",
    "company": {"display_name": "Zoho"},
    "location": {"display_name": "Chennai, Tamil Nadu"},
    "salary_min": 650000,
    "salary_max": 940000,
    "contract_type": "permanent",
    "category": {"label": "IT Jobs"},
    "description": "Django and PostgreSQL.",
    "redirect_url": "https://www.adzuna.in/details/4211",
    "created": "2025-03-01T10:00:00Z",
}


def configured_settings(**overrides):
    values = {
        "mongodb_db": "placement_test",
        "adzuna_app_id": "abc123",
        "adzuna_api_key": "secret",
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def app_client(settings, handler):
    app = create_app(
        settings=settings,
        mongo_client=mongomock.MongoClient(),
        http_transport=httpx.MockTransport(handler),
    )
    return TestClient(app)


# ============================================================
# FORMATTING
# ============================================================

def test_format_external_salary():
    assert format_external_salary(650000, 940000) == "₹7-9 LPA"
    assert format_external_salary(None, 1200000) == "₹12-12 LPA"
    assert format_external_salary(None, None) == "Not disclosed"


def test_normalize_fills_defaults():
    job = normalize_external_job({"id": "x1", "title": "Analyst"})

    assert job["company"] == "Company"
    assert job["location"] == "India"
    assert job["salary"] == "Not disclosed"
    assert job["type"] == "Full-time"
    assert job["source"] == "adzuna"
    assert job["isOnCampus"] is False


# ============================================================
# DEMO MODE
# ============================================================

def test_demo_payload_without_credentials(client):
    response = client.get("/external/jobs")

    assert response.status_code == 200
    body = response.json()
    assert body["isDemo"] is True
    assert body["count"] == 5
    assert len(body["results"]) == 2
    assert body["results"][0]["salary"] == "₹12-18 LPA"


@pytest.mark.parametrize("app_id,api_key", [("demo_app_id", "real"), ("real", "demo_api_key"), ("", "")])
def test_placeholder_credentials_mean_demo(app_id, api_key):
    service = ExternalJobService(configured_settings(adzuna_app_id=app_id, adzuna_api_key=api_key))

    assert service.has_credentials is False


def test_demo_payload_is_deterministic():
    service = ExternalJobService(configured_settings(adzuna_app_id=""))

    first = asyncio.run(service.fetch_external_jobs())
    second = asyncio.run(service.fetch_external_jobs(query="nurse", location="pune", page=3))

    assert first == second


# ============================================================
# LIVE CALLS (mocked transport)
# ============================================================

def test_search_normalises_results():
    seen = {}

    def handler(request):
        seen["url"] = request.url
        return httpx.Response(200, json={"count": 812, "results": [ADZUNA_RESULT]})

    with app_client(configured_settings(), handler) as client:
        response = client.get("/external/jobs", params={"what": "python", "where": "chennai", "page": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["isDemo"] is False
    assert body["count"] == 812
    [job] = body["results"]
    assert job["id"] == "4211"
    assert job["company"] == "Zoho"
    assert job["salary"] == "₹7-9 LPA"
    assert job["type"] == "permanent"
    assert job["category"] == "IT Jobs"
    assert job["applyUrl"] == "https://www.adzuna.in/details/4211"

    assert seen["url"].path.endswith("/in/search/2")
    assert seen["url"].params["what"] == "python"
    assert seen["url"].params["where"] == "chennai"
    assert seen["url"].params["app_id"] == "abc123"


def test_missing_salary_is_not_disclosed():
    raw = dict(ADZUNA_RESULT)
    del raw["salary_min"]
    del raw["salary_max"]

    def handler(request):
        return httpx.Response(200, json={"count": 1, "results": [raw]})

    with app_client(configured_settings(), handler) as client:
        [job] = client.get("/external/jobs").json()["results"]

    assert job["salary"] == "Not disclosed"
    assert job["salaryMin"] is None


def test_upstream_error_status_is_502():
    def handler(request):
        return httpx.Response(401, json={"exception": "AUTH_FAIL"})

    with app_client(configured_settings(), handler) as client:
        response = client.get("/external/jobs")

    assert response.status_code == 502
    body = response.json()
    assert body["message"] == "Failed to fetch external jobs"
    assert "401" in body["details"]


def test_upstream_network_failure_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = ExternalJobService(configured_settings(), transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError):
        asyncio.run(service.fetch_external_jobs())


def test_non_json_response_is_502():
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    with app_client(configured_settings(), handler) as client:
        response = client.get("/external/jobs")

    assert response.status_code == 502


def test_invalid_page_rejected(client):
    response = client.get("/external/jobs", params={"page": 0})

    assert response.status_code == 400
    assert response.json()["message"].startswith("query.page:")


def test_connection_check():
    def handler(request):
        return httpx.Response(200, json={"count": 0, "results": []})

    service = ExternalJobService(configured_settings(), transport=httpx.MockTransport(handler))

    assert asyncio.run(service.test_connection()) is True
    assert asyncio.run(ExternalJobService(configured_settings(adzuna_app_id="")).test_connection()) is False
