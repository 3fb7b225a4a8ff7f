"""
Pydantic schemas for the budget snapshot.
"""
from pydantic import BaseModel
from typing import Dict
from decimal import Decimal
from globetrotter.models.expense import ExpenseCategory


class BudgetBreakdown(BaseModel):
    """Spend per bucket. Activity costs and ACTIVITY expenses share one bucket."""
    transport: Decimal = Decimal(0)
    accommodation: Decimal = Decimal(0)
    activities: Decimal = Decimal(0)
    meals: Decimal = Decimal(0)
    other: Decimal = Decimal(0)


class BudgetSnapshot(BaseModel):
    """Read-only budget view of a trip."""
    total_budget: Decimal
    activity_cost: Decimal  # Sum over activities scheduled in the trip's stops
    expenses_by_category: Dict[ExpenseCategory, Decimal]
    total_expenses: Decimal
    total_estimated: Decimal  # activity_cost + total_expenses
    days: int
    cost_per_day: Decimal  # Rounded for display, the other totals are exact
    breakdown: BudgetBreakdown
    over_budget: bool
    remaining: Decimal  # Negative when over budget
