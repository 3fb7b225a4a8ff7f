"""Models package - Import all models for SQLAlchemy registration."""
from globetrotter.models.user import User
from globetrotter.models.city import City
from globetrotter.models.trip import Trip, TripStop, TripVisibility
from globetrotter.models.activity import Activity
from globetrotter.models.expense import Expense, ExpenseCategory
from globetrotter.models.share import SharedItinerary

__all__ = [
    "User",
    "City",
    "Trip",
    "TripStop",
    "TripVisibility",
    "Activity",
    "Expense",
    "ExpenseCategory",
    "SharedItinerary",
]
