"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.project_routes import router as project_router
from app.api.routes.internship_routes import router as internship_router
from app.api.routes.profile_routes import router as profile_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(project_router)
api_router.include_router(internship_router)
api_router.include_router(profile_router)
