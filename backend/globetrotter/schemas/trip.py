"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from globetrotter.models.trip import TripVisibility
from globetrotter.schemas.itinerary import StopResponse


class TripBase(BaseModel):
    """Base trip schema."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: date
    end_date: date
    budget: Decimal = Field(Decimal(0), ge=0)
    cover_photo: Optional[str] = None


class TripCreate(TripBase):
    """Schema for trip creation."""
    pass


class TripUpdate(BaseModel):
    """Schema for trip update."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    cover_photo: Optional[str] = None
    visibility: Optional[TripVisibility] = None


class VisibilityUpdate(BaseModel):
    """Schema for an explicit visibility change."""
    visibility: TripVisibility


class TripResponse(TripBase):
    """Schema for trip response. The share token is never included."""
    id: int
    user_id: int
    visibility: TripVisibility
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripOwner(BaseModel):
    """Public view of a trip owner: display name only."""
    id: int
    name: str


class TripDetailResponse(TripResponse):
    """Schema for a trip with its ordered stops and activities."""
    owner: TripOwner
    stops: List[StopResponse] = []
