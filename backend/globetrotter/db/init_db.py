"""
Database initialization script.
"""
from globetrotter.db.session import init_db

# Import all models so SQLAlchemy can register them
from globetrotter.models import (  # noqa: F401
    User, City, Trip, TripStop, Activity, Expense, SharedItinerary
)

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    print("Database initialized successfully!")
