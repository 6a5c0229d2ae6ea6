"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from portal.api.routes.auth_routes import router as auth_router
from portal.api.routes.profile_routes import router as profile_router
from portal.api.routes.university_routes import router as university_router
from portal.api.routes.application_routes import router as application_router
from portal.api.routes.document_routes import router as document_router
from portal.api.routes.task_routes import router as task_router
from portal.api.routes.commission_routes import router as commission_router
from portal.api.routes.stats_routes import router as stats_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(university_router)
api_router.include_router(application_router)
api_router.include_router(document_router)
api_router.include_router(task_router)
api_router.include_router(commission_router)
api_router.include_router(stats_router)
