"""
Pydantic schemas for stops and activities.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal


class CityBrief(BaseModel):
    id: int
    name: str
    country: str

    class Config:
        from_attributes = True


class ActivityResponse(BaseModel):
    """Schema for activity response."""
    id: int
    stop_id: Optional[int] = None
    city_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    cost: Decimal
    duration: int  # Minutes
    rating: Optional[float] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    order: int

    class Config:
        from_attributes = True


class ActivityListResponse(BaseModel):
    activities: List[ActivityResponse]
    total: int
    limit: int
    offset: int


class StopCreate(BaseModel):
    """Schema for adding a stop. Without order the stop goes last."""
    city_id: int
    arrival_date: date
    departure_date: date
    order: Optional[int] = Field(None, ge=0)


class StopUpdate(BaseModel):
    """Schema for stop update."""
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None
    order: Optional[int] = Field(None, ge=0)


class StopReorder(BaseModel):
    """Every stop id of the trip, in the desired order."""
    stop_ids: List[int]


class StopResponse(BaseModel):
    """Schema for stop response with its ordered activities."""
    id: int
    trip_id: int
    city_id: int
    city: Optional[CityBrief] = None
    arrival_date: date
    departure_date: date
    order: int
    activities: List[ActivityResponse] = []

    class Config:
        from_attributes = True


class ActivityAssign(BaseModel):
    """Schema for scheduling a pool activity in a stop."""
    activity_id: int
    stop_id: int
    start_time: Optional[datetime] = None
    order: Optional[int] = Field(None, ge=0)


class ActivityMove(BaseModel):
    """Schema for moving a scheduled activity within its stop."""
    order: int = Field(..., ge=0)
