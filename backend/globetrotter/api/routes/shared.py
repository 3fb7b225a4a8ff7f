"""
Public shared-itinerary route. No authentication.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from globetrotter.db.session import get_db
from globetrotter.schemas.trip import TripDetailResponse
from globetrotter.services import share_service
from globetrotter.api.routes.trips import build_trip_detail

router = APIRouter(prefix="/shared", tags=["shared"])


@router.get("/{token}", response_model=TripDetailResponse)
async def get_shared_trip(token: str, db: Session = Depends(get_db)):
    """Open a shared itinerary and count the view."""
    trip = share_service.resolve_shared(token, db)
    return build_trip_detail(trip)
