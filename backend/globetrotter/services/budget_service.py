"""
Budget service for reconciling scheduled activity costs with the expense ledger.
"""
import math
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional
from sqlalchemy.orm import Session
from globetrotter.core.config import settings
from globetrotter.core.exceptions import NotFound
from globetrotter.models.activity import Activity
from globetrotter.models.expense import Expense, ExpenseCategory
from globetrotter.models.trip import Trip, TripStop
from globetrotter.schemas.budget import BudgetBreakdown, BudgetSnapshot

ZERO = Decimal(0)


def _as_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps floats from leaking binary rounding error into the sums
    return Decimal(str(value))


def trip_days(start: date, end: date) -> int:
    """Whole days between start and end, rounded up. 0 for an empty or inverted range."""
    seconds = (end - start).total_seconds()
    return max(0, math.ceil(seconds / 86400))


def reconcile(
    budget,
    start: date,
    end: date,
    activities: Iterable,
    expenses: Iterable,
    precision: Optional[int] = None
) -> BudgetSnapshot:
    """
    Build a budget snapshot.

    activities are the trip's scheduled activities (anything with a ``cost``),
    expenses its ledger rows (anything with ``amount`` and ``category``).
    An activity cost recorded again as an ACTIVITY expense is counted twice.
    """
    if precision is None:
        precision = settings.COST_PER_DAY_PRECISION

    total_budget = _as_decimal(budget)
    activity_cost = sum((_as_decimal(a.cost) for a in activities), ZERO)

    expenses_by_category = {category: ZERO for category in ExpenseCategory}
    for expense in expenses:
        expenses_by_category[ExpenseCategory(expense.category)] += _as_decimal(expense.amount)

    total_expenses = sum(expenses_by_category.values(), ZERO)
    total_estimated = activity_cost + total_expenses

    days = trip_days(start, end)
    if days > 0:
        cost_per_day = (total_estimated / days).quantize(
            Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP
        )
    else:
        cost_per_day = ZERO

    breakdown = BudgetBreakdown(
        transport=expenses_by_category[ExpenseCategory.TRANSPORT],
        accommodation=expenses_by_category[ExpenseCategory.ACCOMMODATION],
        activities=activity_cost + expenses_by_category[ExpenseCategory.ACTIVITY],
        meals=expenses_by_category[ExpenseCategory.MEAL],
        other=expenses_by_category[ExpenseCategory.OTHER]
    )

    return BudgetSnapshot(
        total_budget=total_budget,
        activity_cost=activity_cost,
        expenses_by_category=expenses_by_category,
        total_expenses=total_expenses,
        total_estimated=total_estimated,
        days=days,
        cost_per_day=cost_per_day,
        breakdown=breakdown,
        over_budget=total_estimated > total_budget,
        remaining=total_budget - total_estimated
    )


def get_budget_snapshot(trip_id: int, db: Session) -> BudgetSnapshot:
    """Load a trip's scheduled activities and expenses and reconcile them."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFound("Trip not found")

    # Pool activities have no stop and drop out of the join
    activities = db.query(Activity).join(
        TripStop, Activity.stop_id == TripStop.id
    ).filter(
        TripStop.trip_id == trip_id
    ).all()

    expenses = db.query(Expense).filter(Expense.trip_id == trip_id).all()

    return reconcile(trip.budget, trip.start_date, trip.end_date, activities, expenses)
