"""
Seed the database with catalog cities, pool activities and a sample trip.
Safe to run more than once: existing rows are reused.
"""
from datetime import date, timedelta
from decimal import Decimal
from globetrotter.db.session import SessionLocal, init_db
from globetrotter.core.security import get_password_hash
from globetrotter.models.activity import Activity
from globetrotter.models.city import City
from globetrotter.models.trip import Trip
from globetrotter.models.user import User
from globetrotter.services import itinerary_service

CITIES = [
    {"name": "Paris", "country": "France", "country_code": "FR", "latitude": 48.8566, "longitude": 2.3522,
     "popularity": 95, "cost_index": 75, "description": "The City of Light, known for its art, fashion, and culture."},
    {"name": "London", "country": "United Kingdom", "country_code": "GB", "latitude": 51.5074, "longitude": -0.1278,
     "popularity": 89, "cost_index": 82, "description": "Historic capital with modern charm."},
    {"name": "Tokyo", "country": "Japan", "country_code": "JP", "latitude": 35.6762, "longitude": 139.6503,
     "popularity": 92, "cost_index": 85, "description": "Vibrant metropolis blending tradition and innovation."},
    {"name": "Kyoto", "country": "Japan", "country_code": "JP", "latitude": 35.0116, "longitude": 135.7681,
     "popularity": 85, "cost_index": 70, "description": "Former imperial capital with temples and gardens."},
    {"name": "Barcelona", "country": "Spain", "country_code": "ES", "latitude": 41.3874, "longitude": 2.1686,
     "popularity": 87, "cost_index": 65, "description": "Coastal city with Gaudi architecture."},
    {"name": "Lisbon", "country": "Portugal", "country_code": "PT", "latitude": 38.7223, "longitude": -9.1393,
     "popularity": 80, "cost_index": 58, "description": "Coastal capital with fado music."},
]

ACTIVITIES = {
    "Paris": [
        {"name": "Eiffel Tower Summit", "category": "SIGHTSEEING", "cost": "35", "duration": 120, "rating": 4.7},
        {"name": "Louvre Museum", "category": "CULTURE", "cost": "22", "duration": 180, "rating": 4.8},
        {"name": "Seine River Cruise", "category": "SIGHTSEEING", "cost": "18", "duration": 60, "rating": 4.5},
    ],
    "London": [
        {"name": "British Museum", "category": "CULTURE", "cost": "0", "duration": 180, "rating": 4.7},
        {"name": "Tower of London", "category": "SIGHTSEEING", "cost": "33", "duration": 150, "rating": 4.6},
    ],
    "Tokyo": [
        {"name": "Tsukiji Outer Market Food Tour", "category": "FOOD", "cost": "60", "duration": 150, "rating": 4.8},
        {"name": "Tokyo Skytree", "category": "SIGHTSEEING", "cost": "18", "duration": 90, "rating": 4.6},
    ],
}


def _get_or_create_user(db, username: str, email: str, name: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user:
        return user
    user = User(username=username, email=email, name=name, hashed_password=get_password_hash("admin123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def seed():
    """Insert the sample data."""
    init_db()
    db = SessionLocal()
    try:
        user = _get_or_create_user(db, "traveler", "user@globetrotter.com", "Test User")

        cities = {}
        for data in CITIES:
            city = db.query(City).filter(City.name == data["name"], City.country == data["country"]).first()
            if not city:
                city = City(**data)
                db.add(city)
            cities[data["name"]] = city
        db.commit()
        print(f"Cities available: {len(cities)}")

        created = 0
        for city_name, activities in ACTIVITIES.items():
            city = cities[city_name]
            for data in activities:
                exists = db.query(Activity).filter(
                    Activity.city_id == city.id, Activity.name == data["name"]
                ).first()
                if exists:
                    continue
                db.add(Activity(
                    city_id=city.id,
                    name=data["name"],
                    category=data["category"],
                    cost=Decimal(data["cost"]),
                    duration=data["duration"],
                    rating=data["rating"]
                ))
                created += 1
        db.commit()
        print(f"Created {created} pool activities")

        sample = db.query(Trip).filter(Trip.user_id == user.id, Trip.name == "European Adventure").first()
        if not sample:
            start = date.today() + timedelta(days=30)
            trip = itinerary_service.create_trip(
                owner_id=user.id,
                name="European Adventure",
                start_date=start,
                end_date=start + timedelta(days=7),
                budget=Decimal("2500"),
                description="A week-long journey through beautiful European cities",
                db=db
            )
            itinerary_service.add_stop(trip.id, cities["Paris"].id, start, start + timedelta(days=2), db=db)
            itinerary_service.add_stop(
                trip.id, cities["London"].id, start + timedelta(days=2), start + timedelta(days=5), db=db
            )
            print(f"Created sample trip {trip.id}")

        print("Seeding completed successfully!")
        print("User: traveler / admin123")
    except Exception as e:
        db.rollback()
        print(f"Seeding failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
