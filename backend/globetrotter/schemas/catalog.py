"""
Pydantic schemas for catalog searches and cities.
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from globetrotter.core.config import settings


class ActivityQuery(BaseModel):
    """Filters for searching the activity pool. Every field is optional."""
    city_id: Optional[int] = None
    category: Optional[str] = None
    min_cost: Optional[Decimal] = Field(None, ge=0)
    max_cost: Optional[Decimal] = Field(None, ge=0)
    max_duration: Optional[int] = Field(None, ge=0)  # Minutes
    search: Optional[str] = None  # Case-insensitive match on name or description
    pool_only: bool = True  # Exclude activities already scheduled in a stop
    limit: int = Field(settings.CATALOG_PAGE_LIMIT, ge=1, le=settings.CATALOG_MAX_LIMIT)
    offset: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_cost_range(self):
        if self.min_cost is not None and self.max_cost is not None and self.min_cost > self.max_cost:
            raise ValueError("min_cost must not exceed max_cost")
        return self


class CityQuery(BaseModel):
    """Filters for searching cities."""
    search: Optional[str] = None  # Matches city name or country
    country: Optional[str] = None
    limit: int = Field(settings.CATALOG_PAGE_LIMIT, ge=1, le=settings.CATALOG_MAX_LIMIT)
    offset: int = Field(0, ge=0)


class CityCreate(BaseModel):
    """Schema for adding a city picked from a place search."""
    name: str = Field(..., min_length=1)
    latitude: float
    longitude: float
    address: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = Field(None, min_length=2, max_length=2)


class CityResponse(BaseModel):
    """Schema for city response."""
    id: int
    name: str
    country: str
    country_code: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    popularity: int
    cost_index: int
    created_at: datetime

    class Config:
        from_attributes = True


class CityListResponse(BaseModel):
    cities: List[CityResponse]
    total: int
    limit: int
    offset: int
