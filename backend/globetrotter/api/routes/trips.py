"""
Trip management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload, selectinload
from typing import List
from datetime import date
from globetrotter.core.config import settings
from globetrotter.core.utils import build_share_url
from globetrotter.db.session import get_db
from globetrotter.models.user import User
from globetrotter.models.trip import Trip, TripStop
from globetrotter.schemas.trip import (
    TripCreate, TripUpdate, TripResponse, TripDetailResponse, TripOwner, VisibilityUpdate
)
from globetrotter.schemas.itinerary import StopResponse
from globetrotter.schemas.share import ShareResponse, ShareRecordResponse
from globetrotter.services import itinerary_service, share_service
from globetrotter.api.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])


def _load_trip(trip_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )
    return trip


def check_trip_access(trip_id: int, user_id: int, db: Session) -> Trip:
    """Trip the user may read: their own, or anyone's that is not PRIVATE."""
    trip = _load_trip(trip_id, db)
    if not share_service.can_view(trip, user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied to this trip"
        )
    return trip


def check_trip_owner(trip_id: int, user_id: int, db: Session) -> Trip:
    """Trip the user may modify: only their own."""
    trip = _load_trip(trip_id, db)
    if not share_service.is_owner(trip, user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the trip owner can do this"
        )
    return trip


def build_trip_detail(trip: Trip) -> TripDetailResponse:
    """Trip with ordered stops and the owner's display name only."""
    return TripDetailResponse(
        **TripResponse.model_validate(trip).model_dump(),
        owner=TripOwner(id=trip.owner.id, name=trip.owner.display_name),
        stops=[StopResponse.model_validate(stop) for stop in trip.stops]
    )


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new trip."""
    trip = itinerary_service.create_trip(
        owner_id=current_user.id,
        name=trip_data.name,
        start_date=trip_data.start_date,
        end_date=trip_data.end_date,
        budget=trip_data.budget,
        description=trip_data.description,
        cover_photo=trip_data.cover_photo,
        db=db
    )
    logger.info(f"User {current_user.id} created trip {trip.id}")
    return trip


@router.get("", response_model=List[TripResponse])
async def list_trips(
    upcoming: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the current user's trips, latest start first."""
    query = db.query(Trip).filter(Trip.user_id == current_user.id)
    if upcoming:
        query = query.filter(Trip.end_date >= date.today())
    return query.order_by(Trip.start_date.desc(), Trip.id.desc()).all()


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get trip details with its ordered itinerary."""
    check_trip_access(trip_id, current_user.id, db)

    trip = db.query(Trip).options(
        joinedload(Trip.owner),
        selectinload(Trip.stops).joinedload(TripStop.city),
        selectinload(Trip.stops).selectinload(TripStop.activities)
    ).filter(Trip.id == trip_id).first()

    return build_trip_detail(trip)


@router.patch("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update trip fields and, optionally, its visibility, in one transaction."""
    check_trip_owner(trip_id, current_user.id, db)

    changes = trip_data.model_dump(exclude_unset=True)
    visibility = changes.pop("visibility", None)

    return itinerary_service.update_trip(trip_id, changes, db, visibility=visibility)


@router.delete("/{trip_id}")
async def delete_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a trip and everything it owns."""
    check_trip_owner(trip_id, current_user.id, db)
    itinerary_service.delete_trip(trip_id, db)
    logger.info(f"User {current_user.id} deleted trip {trip_id}")
    return {"message": "Trip deleted successfully"}


@router.put("/{trip_id}/visibility", response_model=TripResponse)
async def set_visibility(
    trip_id: int,
    payload: VisibilityUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Make a trip PRIVATE, PUBLIC or SHARED."""
    return share_service.set_visibility(trip_id, current_user.id, payload.visibility, db)


@router.post("/{trip_id}/share", response_model=ShareResponse)
async def share_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Issue a new share link. Earlier links stop working."""
    record = share_service.issue_share(trip_id, current_user.id, db)
    logger.info(f"User {current_user.id} issued share record {record.id} for trip {trip_id}")
    return ShareResponse(
        share_token=record.token,
        share_url=build_share_url(settings.SHARE_BASE_URL, record.token)
    )


@router.get("/{trip_id}/shares", response_model=List[ShareRecordResponse])
async def list_shares(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Share history with view counts, for the owner."""
    check_trip_owner(trip_id, current_user.id, db)
    return share_service.list_shares(trip_id, db)
