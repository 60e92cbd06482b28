"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from riding_club.api.routes import admin, bookings, messages, profile

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(bookings.router)
api_router.include_router(admin.router)
api_router.include_router(messages.router)
api_router.include_router(profile.router)
