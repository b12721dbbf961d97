"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobboard.api.routes.admin_routes import router as admin_router
from jobboard.api.routes.applicant_routes import router as applicant_router
from jobboard.api.routes.application_routes import router as application_router
from jobboard.api.routes.auth_routes import router as auth_router
from jobboard.api.routes.category_routes import router as category_router
from jobboard.api.routes.job_routes import archived_router, router as job_router
from jobboard.api.routes.message_routes import router as message_router
from jobboard.api.routes.notification_routes import router as notification_router
from jobboard.api.routes.profile_routes import router as profile_router
from jobboard.api.routes.settings_routes import router as settings_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(settings_router)
api_router.include_router(profile_router)
api_router.include_router(applicant_router)
api_router.include_router(category_router)
api_router.include_router(job_router)
api_router.include_router(archived_router)
api_router.include_router(application_router)
api_router.include_router(notification_router)
api_router.include_router(message_router)
api_router.include_router(admin_router)
