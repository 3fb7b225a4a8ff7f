"""
Activity catalog and scheduling routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional
from decimal import Decimal
from globetrotter.core.config import settings
from globetrotter.db.session import get_db
from globetrotter.models.user import User
from globetrotter.schemas.catalog import ActivityQuery
from globetrotter.schemas.itinerary import (
    ActivityAssign, ActivityMove, ActivityResponse, ActivityListResponse
)
from globetrotter.services import catalog_service, itinerary_service
from globetrotter.api.dependencies import get_current_user
from globetrotter.api.routes.trips import check_trip_owner

router = APIRouter(tags=["activities"])


@router.get("/activities", response_model=ActivityListResponse)
async def search_activities(
    city_id: Optional[int] = None,
    category: Optional[str] = None,
    min_cost: Optional[Decimal] = None,
    max_cost: Optional[Decimal] = None,
    max_duration: Optional[int] = None,
    search: Optional[str] = None,
    limit: int = settings.CATALOG_PAGE_LIMIT,
    offset: int = 0,
    db: Session = Depends(get_db)
):
    """Search unscheduled activities."""
    try:
        query = ActivityQuery(
            city_id=city_id,
            category=category,
            min_cost=min_cost,
            max_cost=max_cost,
            max_duration=max_duration,
            search=search,
            limit=limit,
            offset=offset
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.errors(include_url=False, include_context=False, include_input=False)
        )

    activities, total = catalog_service.search_activities(query, db)
    return ActivityListResponse(
        activities=activities,
        total=total,
        limit=query.limit,
        offset=query.offset
    )


@router.post("/trips/{trip_id}/activities", response_model=ActivityResponse)
async def assign_activity(
    trip_id: int,
    payload: ActivityAssign,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Schedule an activity in one of the trip's stops."""
    check_trip_owner(trip_id, current_user.id, db)
    return itinerary_service.assign_activity(
        trip_id,
        payload.stop_id,
        payload.activity_id,
        position=payload.order,
        start_time=payload.start_time,
        db=db
    )


@router.patch("/trips/{trip_id}/activities/{activity_id}", response_model=ActivityResponse)
async def move_activity(
    trip_id: int,
    activity_id: int,
    payload: ActivityMove,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Move a scheduled activity within its stop."""
    check_trip_owner(trip_id, current_user.id, db)
    return itinerary_service.move_activity(trip_id, activity_id, payload.order, db)


@router.delete("/trips/{trip_id}/activities/{activity_id}")
async def unassign_activity(
    trip_id: int,
    activity_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Take an activity off the itinerary and back into the pool."""
    check_trip_owner(trip_id, current_user.id, db)
    itinerary_service.unassign_activity(trip_id, activity_id, db)
    return {"message": "Activity removed successfully"}
