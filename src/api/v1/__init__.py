"""
API v1 package.

Contains versioned API routes for the guest list API:
public registration/activation routes plus the admin routes under /admin.
"""

from fastapi import APIRouter

from src.api.v1.admin import router as admin_router
from src.api.v1.routes import router as public_router

router = APIRouter()
router.include_router(public_router)
router.include_router(admin_router, prefix="/admin")

__all__ = ["router"]
