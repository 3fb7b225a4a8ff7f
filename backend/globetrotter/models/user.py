"""
User model for authentication and trip ownership.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from globetrotter.db.base import BaseModel


class User(BaseModel):
    """User model with immutable username."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=True)  # Display name, the only field shown on shared itineraries
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    trips = relationship("Trip", back_populates="owner")

    @property
    def display_name(self) -> str:
        return self.name or self.username
