"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from globetrotter.api.routes import (
    auth, users, trips, stops, activities, expenses, budget, shared, cities
)

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(trips.router)
api_router.include_router(stops.router)
api_router.include_router(activities.router)
api_router.include_router(expenses.router)
api_router.include_router(budget.router)
api_router.include_router(shared.router)
api_router.include_router(cities.router)
