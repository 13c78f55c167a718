"""
External Job Search Client (Adzuna)

Off-campus listings come from the Adzuna job-search API and are normalised
into the same display shape the frontend uses for campus jobs.

DEMO MODE:
- No credentials, or the demo_* placeholders from the sample .env,
  means no network call: a fixed two-result payload is returned instead.
- This is a degraded mode, not an error.

No timeout or retry policy beyond the HTTP client's defaults; a failed call
surfaces as a 502 for that request only.
"""

import logging
import math
from typing import Optional

import httpx

from placement_api.core.config import Settings
from placement_api.core.errors import UpstreamError

logger = logging.getLogger(__name__)

PLACEHOLDER_CREDENTIALS = {"demo_app_id", "demo_api_key"}
NOT_DISCLOSED = "Not disclosed"
RUPEES_PER_LAKH = 100000

DEMO_CREATED = "2024-01-01T00:00:00Z"
DEMO_RESPONSE = {
    "count": 5,
    "results": [
        {
            "id": "ext_1",
            "title": "Senior Software Engineer",
            "company": {"display_name": "Tech Solutions Pvt Ltd"},
            "location": {"display_name": "Bangalore, Karnataka"},
            "salary_min": 1200000,
            "salary_max": 1800000,
            "description": "Looking for an experienced software engineer...",
            "redirect_url": "https://example.com/job/1",
            "created": DEMO_CREATED,
        },
        {
            "id": "ext_2",
            "title": "Full Stack Developer",
            "company": {"display_name": "InnovateLabs"},
            "location": {"display_name": "Hyderabad, Telangana"},
            "salary_min": 800000,
            "salary_max": 1400000,
            "description": "Full stack developer with React and Node.js experience...",
            "redirect_url": "https://example.com/job/2",
            "created": DEMO_CREATED,
        },
    ],
}


def _to_lakhs(amount: float) -> int:
    # Half rounds up (6.5 lakh shows as 7)
    return math.floor(amount / RUPEES_PER_LAKH + 0.5)


def format_external_salary(salary_min: Optional[float], salary_max: Optional[float]) -> str:
    """Rupee amounts to an LPA range; a single bound is used for both ends."""
    if salary_min is None and salary_max is None:
        return NOT_DISCLOSED
    low = salary_min if salary_min is not None else salary_max
    high = salary_max if salary_max is not None else salary_min
    return f"₹{_to_lakhs(low)}-{_to_lakhs(high)} LPA"


def normalize_external_job(raw: dict) -> dict:
    """Map one Adzuna result onto the internal job display shape."""
    company = raw.get("company") or {}
    location = raw.get("location") or {}
    category = raw.get("category") or {}
    return {
        "id": str(raw.get("id", "")),
        "title": raw.get("title", ""),
        "company": company.get("display_name") or "Company",
        "location": location.get("display_name") or "India",
        "salary": format_external_salary(raw.get("salary_min"), raw.get("salary_max")),
        "salaryMin": raw.get("salary_min"),
        "salaryMax": raw.get("salary_max"),
        "type": raw.get("contract_type") or "Full-time",
        "category": category.get("label"),
        "description": raw.get("description", ""),
        "applyUrl": raw.get("redirect_url"),
        "created": raw.get("created"),
        "source": "adzuna",
        "isOnCampus": False,
    }


class ExternalJobService:
    """
    Thin wrapper over the Adzuna search endpoint.

    `transport` is passed to httpx.AsyncClient, which lets tests substitute
    httpx.MockTransport for the network.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    @property
    def has_credentials(self) -> bool:
        app_id = self.settings.adzuna_app_id
        api_key = self.settings.adzuna_api_key
        if not app_id or not api_key:
            return False
        return app_id not in PLACEHOLDER_CREDENTIALS and api_key not in PLACEHOLDER_CREDENTIALS

    def _demo_payload(self) -> dict:
        return {
            "count": DEMO_RESPONSE["count"],
            "results": [normalize_external_job(r) for r in DEMO_RESPONSE["results"]],
            "isDemo": True,
        }

    async def _call_api(self, query: str, location: str, page: int) -> dict:
        url = f"{self.settings.adzuna_base_url}/{self.settings.adzuna_country}/search/{page}"
        params = {
            "app_id": self.settings.adzuna_app_id,
            "app_key": self.settings.adzuna_api_key,
            "results_per_page": self.settings.adzuna_results_per_page,
            "what": query,
            "where": location,
            "sort_by": "relevance",
            "content-type": "application/json",
        }
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()

    async def fetch_external_jobs(
        self,
        query: str = "software engineer",
        location: str = "bangalore",
        page: int = 1,
    ) -> dict:
        """
        Search external listings. Returns {count, results, isDemo}.

        Raises UpstreamError when the API cannot be reached, answers with an
        error status, or returns something that is not JSON.
        """
        if not self.has_credentials:
            logger.info("Adzuna credentials not configured, serving demo jobs")
            return self._demo_payload()

        try:
            data = await self._call_api(query, location, page)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("External job search failed: %s", exc)
            raise UpstreamError("Failed to fetch external jobs", details=str(exc))
        if not isinstance(data, dict):
            raise UpstreamError("Failed to fetch external jobs", details="Unexpected response shape")

        results = [normalize_external_job(r) for r in data.get("results", [])]
        logger.info("External job search '%s' in '%s' returned %d jobs", query, location, len(results))
        return {
            "count": data.get("count", len(results)),
            "results": results,
            "isDemo": False,
        }

    async def test_connection(self) -> bool:
        """Test if Adzuna is reachable with the configured credentials."""
        if not self.has_credentials:
            return False
        try:
            await self._call_api("software engineer", "india", 1)
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Adzuna connection failed: %s", e)
            return False
