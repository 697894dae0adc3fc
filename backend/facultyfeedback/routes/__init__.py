"""API route registration."""

from fastapi import APIRouter
from .auth import router as auth_router
from .student import router as student_router
from .faculty import router as faculty_router
from .feedback_periods import router as feedback_periods_router


def register_all_routes(api_router: APIRouter):
    """Include all route modules on the main API router."""
    api_router.include_router(auth_router)
    api_router.include_router(student_router)
    api_router.include_router(faculty_router)
    api_router.include_router(feedback_periods_router)
