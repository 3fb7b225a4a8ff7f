"""
User management routes.
"""
from fastapi import APIRouter, Depends
from globetrotter.schemas.user import UserResponse
from globetrotter.models.user import User
from globetrotter.api.dependencies import get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user
