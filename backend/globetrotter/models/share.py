"""
Share record model. One row per issued share token.
"""
from sqlalchemy import Column, String, ForeignKey, Integer
from sqlalchemy.orm import relationship
from globetrotter.db.base import BaseModel


class SharedItinerary(BaseModel):
    """History of share tokens issued for a trip, with view accounting."""
    __tablename__ = "shared_itineraries"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    shared_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    token = Column(String(128), unique=True, nullable=False, index=True)
    view_count = Column(Integer, nullable=False, default=0)

    # Relationships
    trip = relationship("Trip", back_populates="shares")
