"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from globetrotter.db.session import get_db
from globetrotter.models.user import User
from globetrotter.schemas.expense import ExpenseCreate, ExpenseResponse
from globetrotter.services import expense_service
from globetrotter.api.dependencies import get_current_user
from globetrotter.api.routes.trips import check_trip_access, check_trip_owner

router = APIRouter(prefix="/trips/{trip_id}/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a trip's expenses, most recent first."""
    check_trip_access(trip_id, current_user.id, db)
    return expense_service.list_expenses(trip_id, db)


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record an expense."""
    check_trip_owner(trip_id, current_user.id, db)
    return expense_service.create_expense(
        trip_id,
        expense_data.amount,
        expense_data.category,
        expense_data.date,
        description=expense_data.description,
        db=db
    )


@router.delete("/{expense_id}")
async def delete_expense(
    trip_id: int,
    expense_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an expense."""
    check_trip_owner(trip_id, current_user.id, db)
    expense_service.delete_expense(trip_id, expense_id, db)
    return {"message": "Expense deleted successfully"}
