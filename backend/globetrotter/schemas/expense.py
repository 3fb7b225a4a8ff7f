"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date as dt_date, datetime
from decimal import Decimal
from globetrotter.models.expense import ExpenseCategory


class ExpenseBase(BaseModel):
    """Base expense schema."""
    date: dt_date
    amount: Decimal = Field(..., ge=0)
    category: ExpenseCategory
    description: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    """Schema for expense creation."""

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        """Accept categories in any case, e.g. "meal"."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class ExpenseResponse(ExpenseBase):
    """Schema for expense response."""
    id: int
    trip_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
