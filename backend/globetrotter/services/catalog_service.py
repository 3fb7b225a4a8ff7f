"""
Catalog service for searching the activity pool and the city list.
"""
from typing import List, Tuple
from urllib.parse import quote
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload
from globetrotter.models.activity import Activity
from globetrotter.models.city import City
from globetrotter.schemas.catalog import ActivityQuery, CityQuery, CityCreate


def search_activities(query: ActivityQuery, db: Session) -> Tuple[List[Activity], int]:
    """Return one page of matching activities, best rated first, and the total match count."""
    filters = []
    if query.pool_only:
        filters.append(Activity.stop_id.is_(None))
    if query.city_id is not None:
        filters.append(Activity.city_id == query.city_id)
    if query.category:
        filters.append(Activity.category == query.category)
    if query.min_cost is not None:
        filters.append(Activity.cost >= query.min_cost)
    if query.max_cost is not None:
        filters.append(Activity.cost <= query.max_cost)
    if query.max_duration is not None:
        filters.append(Activity.duration <= query.max_duration)
    if query.search:
        pattern = f"%{query.search}%"
        filters.append(or_(Activity.name.ilike(pattern), Activity.description.ilike(pattern)))

    base = db.query(Activity).filter(*filters)
    total = base.count()
    activities = base.options(
        joinedload(Activity.city)
    ).order_by(
        Activity.rating.is_(None), Activity.rating.desc(), Activity.id
    ).offset(query.offset).limit(query.limit).all()
    return activities, total


def search_cities(query: CityQuery, db: Session) -> Tuple[List[City], int]:
    """Return one page of cities, most popular first, and the total match count."""
    filters = []
    if query.search:
        pattern = f"%{query.search}%"
        filters.append(or_(City.name.ilike(pattern), City.country.ilike(pattern)))
    if query.country:
        filters.append(City.country.ilike(f"%{query.country}%"))

    base = db.query(City).filter(*filters)
    total = base.count()
    cities = base.order_by(
        City.popularity.desc(), City.name
    ).offset(query.offset).limit(query.limit).all()
    return cities, total


def get_or_create_city(data: CityCreate, db: Session) -> Tuple[City, bool]:
    """
    Find a city by case-insensitive name and country, or create it.
    Returns (city, created).
    """
    country = data.country
    if not country and data.address:
        # The last comma-separated part of a formatted address is the country
        country = data.address.split(",")[-1].strip() or None
    country = country or "Unknown"

    existing = db.query(City).filter(
        func.lower(City.name) == data.name.lower(),
        func.lower(City.country) == country.lower()
    ).first()
    if existing:
        return existing, False

    city = City(
        name=data.name,
        country=country,
        country_code=(data.country_code or "XX").upper(),
        latitude=data.latitude,
        longitude=data.longitude,
        description=data.address or f"A destination in {country}",
        image_url=f"https://source.unsplash.com/800x600/?{quote(data.name + ' ' + country)}",
        popularity=50,
        cost_index=50
    )
    db.add(city)
    db.commit()
    db.refresh(city)
    return city, True
