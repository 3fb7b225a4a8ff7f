"""
City catalog model.
"""
from sqlalchemy import Column, String, Float, Integer, Text
from globetrotter.db.base import BaseModel


class City(BaseModel):
    """A destination that stops and catalog activities point at."""
    __tablename__ = "cities"

    name = Column(String(120), nullable=False, index=True)
    country = Column(String(120), nullable=False, index=True)
    country_code = Column(String(2), nullable=False, default="XX")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    popularity = Column(Integer, nullable=False, default=50)  # 0-100
    cost_index = Column(Integer, nullable=False, default=50)  # 0-100, relative cost of living
