"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placement_hub.api.routes.auth_routes import router as auth_router
from placement_hub.api.routes.student_routes import router as student_router
from placement_hub.api.routes.company_routes import router as company_router
from placement_hub.api.routes.staff_routes import router as staff_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(company_router)
api_router.include_router(staff_router)
