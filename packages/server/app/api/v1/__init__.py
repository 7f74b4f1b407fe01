"""
API v1 Router
"""

from fastapi import APIRouter
from . import comments, soups, users

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(soups.router, prefix="/soups", tags=["Soups"])
router.include_router(comments.router, prefix="/comments", tags=["Comments"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/users",
            "/users/{userId}/star-soups",
            "/users/{userId}/star-comments",
            "/soups",
            "/soups/{soupId}/star",
            "/soups/{soupId}/comments",
            "/comments/{commentId}/star",
        ],
    }
