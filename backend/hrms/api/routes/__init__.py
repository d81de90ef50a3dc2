"""API Routes module"""
from fastapi import APIRouter

from .roles import router as roles_router
from .employees import router as employees_router
from .org_units import router as org_units_router
from .sellers import router as sellers_router
from .salaries import router as salaries_router
from .breakup_rules import router as breakup_rules_router
from .notifications import router as notifications_router

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(roles_router, prefix="/roles", tags=["Roles"])
api_router.include_router(employees_router, tags=["Employees"])
api_router.include_router(org_units_router, prefix="/org-units", tags=["Org Units"])
api_router.include_router(sellers_router, prefix="/sellers", tags=["Sellers"])
api_router.include_router(salaries_router, prefix="/salaries", tags=["Salaries"])
api_router.include_router(breakup_rules_router, prefix="/breakup-rules", tags=["Breakup Rules"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])

__all__ = ["api_router"]
