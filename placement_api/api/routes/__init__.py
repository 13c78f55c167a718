"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_api.api.routes.user_routes import router as user_router
from placement_api.api.routes.student_routes import router as student_router
from placement_api.api.routes.coordinator_routes import router as coordinator_router
from placement_api.api.routes.institution_routes import router as institution_router
from placement_api.api.routes.external_routes import router as external_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(user_router)
api_router.include_router(student_router)
api_router.include_router(coordinator_router)
api_router.include_router(institution_router)
api_router.include_router(external_router)
