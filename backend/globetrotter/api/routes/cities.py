"""
City catalog routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional
from globetrotter.core.config import settings
from globetrotter.db.session import get_db
from globetrotter.models.user import User
from globetrotter.schemas.catalog import CityQuery, CityCreate, CityResponse, CityListResponse
from globetrotter.services import catalog_service
from globetrotter.api.dependencies import get_current_user

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get("", response_model=CityListResponse)
async def search_cities(
    search: Optional[str] = None,
    country: Optional[str] = None,
    limit: int = settings.CATALOG_PAGE_LIMIT,
    offset: int = 0,
    db: Session = Depends(get_db)
):
    """Search cities by name or country."""
    try:
        query = CityQuery(search=search, country=country, limit=limit, offset=offset)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.errors(include_url=False, include_context=False, include_input=False)
        )

    cities, total = catalog_service.search_cities(query, db)
    return CityListResponse(cities=cities, total=total, limit=query.limit, offset=query.offset)


@router.post("", response_model=CityResponse)
async def add_city(
    city_data: CityCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a city, or return the existing one with the same name and country."""
    city, created = catalog_service.get_or_create_city(city_data, db)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return city
