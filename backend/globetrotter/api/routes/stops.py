"""
Stop management routes.
"""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from globetrotter.db.session import get_db
from globetrotter.models.user import User
from globetrotter.schemas.itinerary import StopCreate, StopUpdate, StopReorder, StopResponse
from globetrotter.services import itinerary_service
from globetrotter.api.dependencies import get_current_user
from globetrotter.api.routes.trips import check_trip_access, check_trip_owner

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips/{trip_id}/stops", tags=["stops"])


@router.get("", response_model=List[StopResponse])
async def list_stops(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get stops in order, each with its ordered activities."""
    check_trip_access(trip_id, current_user.id, db)
    return itinerary_service.get_stops(trip_id, db)


@router.post("", response_model=StopResponse, status_code=status.HTTP_201_CREATED)
async def add_stop(
    trip_id: int,
    stop_data: StopCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a stop. Without an explicit order it goes last."""
    check_trip_owner(trip_id, current_user.id, db)
    return itinerary_service.add_stop(
        trip_id,
        stop_data.city_id,
        stop_data.arrival_date,
        stop_data.departure_date,
        position=stop_data.order,
        db=db
    )


@router.put("/order", response_model=List[StopResponse])
async def reorder_stops(
    trip_id: int,
    payload: StopReorder,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Reorder all stops of a trip.
    stop_ids must contain every stop of the trip exactly once.
    """
    check_trip_owner(trip_id, current_user.id, db)
    return itinerary_service.reorder_stops(trip_id, payload.stop_ids, db)


@router.patch("/{stop_id}", response_model=StopResponse)
async def update_stop(
    trip_id: int,
    stop_id: int,
    stop_data: StopUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update stop dates or order. Other stops keep their order values."""
    check_trip_owner(trip_id, current_user.id, db)
    return itinerary_service.update_stop(
        trip_id,
        stop_id,
        arrival=stop_data.arrival_date,
        departure=stop_data.departure_date,
        order=stop_data.order,
        db=db
    )


@router.delete("/{stop_id}")
async def remove_stop(
    trip_id: int,
    stop_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a stop and the activities scheduled in it."""
    check_trip_owner(trip_id, current_user.id, db)
    itinerary_service.remove_stop(trip_id, stop_id, db)
    logger.info(f"User {current_user.id} removed stop {stop_id} from trip {trip_id}")
    return {"message": "Stop deleted successfully"}
