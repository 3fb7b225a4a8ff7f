"""
Expense model for tracking spending.
"""
from sqlalchemy import Column, Numeric, Date, Text, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from globetrotter.db.base import BaseModel
import enum


class ExpenseCategory(str, enum.Enum):
    """Fixed expense categories used by the budget breakdown."""
    TRANSPORT = "TRANSPORT"
    ACCOMMODATION = "ACCOMMODATION"
    ACTIVITY = "ACTIVITY"
    MEAL = "MEAL"
    OTHER = "OTHER"


class Expense(BaseModel):
    """Expense model representing a single spending event on a trip."""
    __tablename__ = "expenses"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(SQLEnum(ExpenseCategory), nullable=False, default=ExpenseCategory.OTHER)
    description = Column(Text, nullable=True)

    # Relationships
    trip = relationship("Trip", back_populates="expenses")
