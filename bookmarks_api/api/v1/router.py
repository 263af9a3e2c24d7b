"""
Main API router
"""
from fastapi import APIRouter

from .endpoints import auth, groups, bookmarks

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(bookmarks.router, prefix="/bookmarks", tags=["bookmarks"])
