"""
PlacementPro API - Main Application

FastAPI backend with:
- MongoDB for profiles, institutions, jobs and applications
- Adzuna for off-campus job listings (demo data when not configured)
- One JSON error envelope for every failure

Run: uvicorn placement_api.main:app --reload
"""

import logging
import time
from datetime import datetime
from http import HTTPStatus
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import MongoClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from placement_api.api.routes import api_router
from placement_api.core.config import Settings, get_settings
from placement_api.core.logging_config import configure_logging
from placement_api.db.mongodb import (
    create_mongo_client,
    get_database,
    init_mongo_indexes,
    test_mongo_connection,
)
from placement_api.schemas.schemas import HealthResponse
from placement_api.services.external_jobs_service import ExternalJobService

logger = logging.getLogger(__name__)


# ============================================================
# ERROR ENVELOPE
# ============================================================

def _timestamp() -> str:
    return datetime.utcnow().isoformat(timespec="milliseconds") + "Z"


def error_body(request: Request, status_code: int, message: str, **extra) -> dict:
    """Every error leaves the API in this shape."""
    try:
        reason = HTTPStatus(status_code).phrase
    except ValueError:
        reason = "Error"
    body = {
        "success": False,
        "statusCode": status_code,
        "error": reason,
        "message": message,
    }
    body.update({k: v for k, v in extra.items() if v is not None})
    body.update({
        "timestamp": _timestamp(),
        "path": request.url.path,
        "method": request.method,
    })
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = getattr(exc, "message", None) or str(exc.detail)
    body = error_body(
        request,
        exc.status_code,
        message,
        field=getattr(exc, "field", None),
        details=getattr(exc, "details", None),
    )
    if exc.status_code >= 500:
        logger.error("%s %s -> %d %s", request.method, request.url.path, exc.status_code, message)
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content=error_body(request, 400, "; ".join(parts)))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(request, 500, "Internal server error"))


# ============================================================
# APPLICATION FACTORY
# ============================================================

def create_app(
    settings: Optional[Settings] = None,
    mongo_client: Optional[MongoClient] = None,
    http_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    `mongo_client` and `http_transport` replace the real MongoDB client and
    network transport (tests pass mongomock and httpx.MockTransport).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="PlacementPro API",
        description="""
    Campus placement management.

    ## Features
    - **Profiles**: Onboarding upsert keyed by identity id, unique roll numbers
    - **Jobs**: Coordinator postings, eligibility filtering for students
    - **Applications**: One per student and job, status tracking
    - **Institutions**: Registration and coordinator/student verification
    - **External jobs**: Adzuna listings with a demo fallback
    """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms", request.method, request.url.path, response.status_code, elapsed_ms
        )
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    client = mongo_client or create_mongo_client(settings)
    app.state.settings = settings
    app.state.mongo_client = client
    app.state.db = get_database(client, settings)
    app.state.external_jobs = ExternalJobService(settings, transport=http_transport)

    app.include_router(api_router, prefix=settings.api_prefix)

    # Startup event
    @app.on_event("startup")
    async def startup_event():
        """Initialize MongoDB indexes on startup."""
        try:
            init_mongo_indexes(app.state.db)
        except Exception as e:
            logger.warning("MongoDB index initialization failed: %s", e)

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.mongo_client.close()

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check():
        """Liveness: the process is up. Does not touch the database."""
        return {
            "status": "ok",
            "timestamp": _timestamp(),
            "service": settings.service_name,
        }

    @app.get("/health/ready", tags=["Health"])
    async def readiness_check():
        """Readiness: MongoDB answers a ping."""
        connected = test_mongo_connection(app.state.mongo_client)
        return JSONResponse(
            status_code=200 if connected else 503,
            content={
                "status": "ready" if connected else "not ready",
                "mongodb": "connected" if connected else "disconnected",
            },
        )

    return app


app = create_app()
