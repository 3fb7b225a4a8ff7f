"""
Trip and stop models for itinerary planning.
"""
from sqlalchemy import Column, String, Date, Text, Numeric, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from globetrotter.db.base import BaseModel
import enum


class TripVisibility(str, enum.Enum):
    """Who may read a trip besides its owner."""
    PRIVATE = "PRIVATE"
    PUBLIC = "PUBLIC"
    SHARED = "SHARED"


class Trip(BaseModel):
    """Trip owned by a single user."""
    __tablename__ = "trips"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    cover_photo = Column(String(500), nullable=True)
    budget = Column(Numeric(12, 2), nullable=False, default=0)  # Owner-set ceiling, never derived
    visibility = Column(SQLEnum(TripVisibility), default=TripVisibility.PRIVATE, nullable=False)
    share_token = Column(String(128), unique=True, nullable=True, index=True)

    # Relationships (deletion is done explicitly by itinerary_service.delete_trip)
    owner = relationship("User", back_populates="trips")
    stops = relationship("TripStop", back_populates="trip", order_by="TripStop.order")
    expenses = relationship("Expense", back_populates="trip")
    shares = relationship("SharedItinerary", back_populates="trip")


class TripStop(BaseModel):
    """A city visit within a trip."""
    __tablename__ = "trip_stops"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    arrival_date = Column(Date, nullable=False)
    departure_date = Column(Date, nullable=False)
    order = Column(Integer, nullable=False, default=0, index=True)  # Sibling order within the trip, gaps allowed

    # Relationships
    trip = relationship("Trip", back_populates="stops")
    city = relationship("City")
    activities = relationship("Activity", back_populates="stop", order_by="Activity.order")
