"""
Itinerary service: the trip -> stop -> activity hierarchy.

Every public function here is one unit of work. It commits once when all of
its effects have been applied and rolls back otherwise. Ownership is checked
by the caller before any of these run.
"""
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence
from sqlalchemy.orm import Session, joinedload, selectinload
from globetrotter.core.exceptions import NotFound, InvalidRange
from globetrotter.models.activity import Activity
from globetrotter.models.city import City
from globetrotter.models.expense import Expense
from globetrotter.models.share import SharedItinerary
from globetrotter.models.trip import Trip, TripStop, TripVisibility
from globetrotter.services import share_service
from globetrotter.services.ordering import OrderedCollection

TRIP_FIELDS = ("name", "description", "start_date", "end_date", "budget", "cover_photo")


@contextmanager
def unit_of_work(db: Session):
    """Commit on success, roll back on any failure."""
    try:
        yield
        db.commit()
    except Exception:
        db.rollback()
        raise


def _check_range(start: date, end: date, what: str) -> None:
    if start > end:
        raise InvalidRange(f"{what} start ({start}) is after its end ({end})")


def _check_budget(budget: Decimal) -> None:
    if budget is not None and budget < 0:
        raise InvalidRange("Budget cannot be negative")


def get_trip(trip_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFound("Trip not found")
    return trip


# Trips

def create_trip(
    owner_id: int,
    name: str,
    start_date: date,
    end_date: date,
    budget: Decimal = Decimal(0),
    description: str = None,
    cover_photo: str = None,
    db: Session = None
) -> Trip:
    """Create a PRIVATE trip owned by owner_id."""
    _check_range(start_date, end_date, "Trip")
    _check_budget(budget)

    with unit_of_work(db):
        trip = Trip(
            user_id=owner_id,
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            budget=budget if budget is not None else Decimal(0),
            cover_photo=cover_photo
        )
        db.add(trip)
    db.refresh(trip)
    return trip


def update_trip(
    trip_id: int,
    changes: Dict[str, Any],
    db: Session,
    visibility: Optional[TripVisibility] = None,
    token_factory: Callable[[], str] = share_service.generate_share_token
) -> Trip:
    """
    Apply a partial update. The merged date range is validated before writing.
    A visibility change, when given, commits in the same transaction as the
    field changes, so either both land or neither does.
    """
    changes = {k: v for k, v in changes.items() if k in TRIP_FIELDS and v is not None}

    def stage():
        trip = get_trip(trip_id, db)
        _check_range(
            changes.get("start_date", trip.start_date),
            changes.get("end_date", trip.end_date),
            "Trip"
        )
        _check_budget(changes.get("budget"))

        for field, value in changes.items():
            setattr(trip, field, value)
        if visibility is not None:
            share_service.stage_visibility(trip, visibility, db, token_factory)
        return trip

    trip = share_service.commit_with_token_retry(db, stage)
    db.refresh(trip)
    return trip


def delete_trip(trip_id: int, db: Session) -> None:
    """Delete a trip with its share records, expenses, stops and their activities."""
    get_trip(trip_id, db)

    with unit_of_work(db):
        stop_ids = [row.id for row in db.query(TripStop.id).filter(TripStop.trip_id == trip_id)]
        db.query(SharedItinerary).filter(
            SharedItinerary.trip_id == trip_id
        ).delete(synchronize_session=False)
        db.query(Expense).filter(Expense.trip_id == trip_id).delete(synchronize_session=False)
        if stop_ids:
            db.query(Activity).filter(
                Activity.stop_id.in_(stop_ids)
            ).delete(synchronize_session=False)
        db.query(TripStop).filter(TripStop.trip_id == trip_id).delete(synchronize_session=False)
        db.query(Trip).filter(Trip.id == trip_id).delete(synchronize_session=False)
    db.expire_all()


# Stops

def get_stops(trip_id: int, db: Session) -> List[TripStop]:
    """Stops in display order, each with its activities in display order."""
    get_trip(trip_id, db)
    return db.query(TripStop).options(
        joinedload(TripStop.city),
        selectinload(TripStop.activities)
    ).filter(
        TripStop.trip_id == trip_id
    ).order_by(TripStop.order, TripStop.id).all()


def add_stop(
    trip_id: int,
    city_id: int,
    arrival: date,
    departure: date,
    position: Optional[int] = None,
    db: Session = None
) -> TripStop:
    """Add a stop, last by default or at an explicit order value."""
    _check_range(arrival, departure, "Stop")
    get_trip(trip_id, db)
    if db.get(City, city_id) is None:
        raise NotFound("City not found")

    with unit_of_work(db):
        stop = TripStop(city_id=city_id, arrival_date=arrival, departure_date=departure)
        OrderedCollection.stops_of(db, trip_id).insert_at(stop, position)
    db.refresh(stop)
    return stop


def update_stop(
    trip_id: int,
    stop_id: int,
    arrival: Optional[date] = None,
    departure: Optional[date] = None,
    order: Optional[int] = None,
    db: Session = None
) -> TripStop:
    """Partial stop update. The resulting arrival/departure pair must stay ordered."""
    stop = OrderedCollection.stops_of(db, trip_id).get(stop_id)
    _check_range(
        arrival if arrival is not None else stop.arrival_date,
        departure if departure is not None else stop.departure_date,
        "Stop"
    )

    with unit_of_work(db):
        if arrival is not None:
            stop.arrival_date = arrival
        if departure is not None:
            stop.departure_date = departure
        if order is not None:
            stop.order = order
    db.refresh(stop)
    return stop


def reorder_stop(trip_id: int, stop_id: int, new_order: int, db: Session) -> TripStop:
    """Set one stop's order value as given. Siblings are left untouched."""
    return update_stop(trip_id, stop_id, order=new_order, db=db)


def reorder_stops(trip_id: int, stop_ids: Sequence[int], db: Session) -> List[TripStop]:
    """Renumber all stops of a trip to follow stop_ids."""
    get_trip(trip_id, db)
    with unit_of_work(db):
        OrderedCollection.stops_of(db, trip_id).resequence(stop_ids)
    return get_stops(trip_id, db)


def remove_stop(trip_id: int, stop_id: int, db: Session) -> None:
    """Delete a stop together with every activity scheduled in it."""
    stops = OrderedCollection.stops_of(db, trip_id)
    stops.get(stop_id)

    with unit_of_work(db):
        db.query(Activity).filter(
            Activity.stop_id == stop_id
        ).delete(synchronize_session="fetch")
        stops.remove(stop_id)
    db.expire_all()


# Activities

def _get_scheduled_activity(trip_id: int, activity_id: int, db: Session) -> Activity:
    """Activity currently assigned to one of this trip's stops."""
    activity = db.query(Activity).options(
        joinedload(Activity.stop)
    ).filter(Activity.id == activity_id).first()
    if not activity or activity.stop is None or activity.stop.trip_id != trip_id:
        raise NotFound("Activity not found in this trip")
    return activity


def assign_activity(
    trip_id: int,
    stop_id: int,
    activity_id: int,
    position: Optional[int] = None,
    start_time: Optional[datetime] = None,
    db: Session = None
) -> Activity:
    """Schedule an activity in a stop of this trip."""
    stop = OrderedCollection.stops_of(db, trip_id).get(stop_id)

    activity = db.query(Activity).options(
        joinedload(Activity.stop)
    ).filter(Activity.id == activity_id).first()
    if not activity:
        raise NotFound("Activity not found")
    if activity.stop is not None and activity.stop.trip_id != trip_id:
        raise NotFound("Activity not found in this trip")

    with unit_of_work(db):
        OrderedCollection.activities_of(db, stop.id).insert_at(activity, position)
        activity.start_time = start_time
    db.refresh(activity)
    return activity


def unassign_activity(trip_id: int, activity_id: int, db: Session) -> Activity:
    """Return a scheduled activity to the pool."""
    activity = _get_scheduled_activity(trip_id, activity_id, db)

    with unit_of_work(db):
        OrderedCollection.activities_of(db, activity.stop_id).detach(activity.id)
        activity.start_time = None
        activity.end_time = None
    db.refresh(activity)
    return activity


def move_activity(trip_id: int, activity_id: int, new_position: int, db: Session) -> Activity:
    """Move a scheduled activity within its stop, shifting later siblings."""
    activity = _get_scheduled_activity(trip_id, activity_id, db)

    with unit_of_work(db):
        OrderedCollection.activities_of(db, activity.stop_id).move(activity.id, new_position)
    db.refresh(activity)
    return activity
