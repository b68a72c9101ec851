"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from lodging.api.routes import auth, hotels, booking

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(hotels.router)
api_router.include_router(booking.router)
