"""
Budget routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from globetrotter.db.session import get_db
from globetrotter.models.user import User
from globetrotter.schemas.budget import BudgetSnapshot
from globetrotter.services import budget_service
from globetrotter.api.dependencies import get_current_user
from globetrotter.api.routes.trips import check_trip_access

router = APIRouter(prefix="/trips/{trip_id}/budget", tags=["budget"])


@router.get("", response_model=BudgetSnapshot)
async def get_budget(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Budget breakdown of scheduled activities and recorded expenses."""
    check_trip_access(trip_id, current_user.id, db)
    return budget_service.get_budget_snapshot(trip_id, db)
