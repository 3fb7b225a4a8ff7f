"""
Activity model. Unassigned activities form the catalog pool.
"""
from sqlalchemy import Column, String, Text, Numeric, Float, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from globetrotter.db.base import BaseModel


class Activity(BaseModel):
    """An activity, either in the pool (stop_id is NULL) or scheduled in a stop."""
    __tablename__ = "activities"

    stop_id = Column(Integer, ForeignKey("trip_stops.id"), nullable=True, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True, index=True)
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    duration = Column(Integer, nullable=False, default=0)  # Minutes
    rating = Column(Float, nullable=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    order = Column(Integer, nullable=False, default=0, index=True)  # Ignored while unassigned

    # Relationships
    stop = relationship("TripStop", back_populates="activities")
    city = relationship("City")
