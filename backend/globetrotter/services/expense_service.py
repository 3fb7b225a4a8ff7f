"""
Expense service for the per-trip expense ledger.
"""
from sqlalchemy.orm import Session
from datetime import date
from decimal import Decimal
from typing import List
from globetrotter.core.exceptions import NotFound, InvalidRange
from globetrotter.models.expense import Expense, ExpenseCategory
from globetrotter.models.trip import Trip


def create_expense(
    trip_id: int,
    amount: Decimal,
    category: ExpenseCategory,
    expense_date: date,
    description: str = None,
    db: Session = None
) -> Expense:
    """Record an expense against a trip."""
    if amount < 0:
        raise InvalidRange("Expense amount cannot be negative")
    if db.query(Trip.id).filter(Trip.id == trip_id).first() is None:
        raise NotFound("Trip not found")

    expense = Expense(
        trip_id=trip_id,
        amount=amount,
        category=ExpenseCategory(category),
        date=expense_date,
        description=description
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def list_expenses(trip_id: int, db: Session) -> List[Expense]:
    """Expenses of a trip, most recent date first."""
    return db.query(Expense).filter(
        Expense.trip_id == trip_id
    ).order_by(Expense.date.desc(), Expense.id.desc()).all()


def delete_expense(trip_id: int, expense_id: int, db: Session) -> None:
    """Delete an expense of this trip."""
    expense = db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.trip_id == trip_id
    ).first()
    if not expense:
        raise NotFound("Expense not found")

    db.delete(expense)
    db.commit()
