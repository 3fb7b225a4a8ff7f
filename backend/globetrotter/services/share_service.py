"""
Visibility and sharing service.

Visibility moves PRIVATE -> SHARED through share issuance, and the owner can
set PRIVATE or PUBLIC at any time. A trip keeps its last share token after
leaving SHARED, but the token only resolves while the trip is SHARED. Every
issuance leaves a SharedItinerary row behind; only the token currently on
the trip resolves.
"""
import secrets
from typing import Any, Callable, List
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload
from globetrotter.core.config import settings
from globetrotter.core.exceptions import NotFound, Unauthorized, Conflict
from globetrotter.models.share import SharedItinerary
from globetrotter.models.trip import Trip, TripStop, TripVisibility


def is_owner(trip: Trip, user_id: int) -> bool:
    return trip is not None and trip.user_id == user_id


def can_view(trip: Trip, user_id: int) -> bool:
    """Owners always; everyone else only while the trip is not PRIVATE."""
    return is_owner(trip, user_id) or trip.visibility != TripVisibility.PRIVATE


def generate_share_token() -> str:
    return secrets.token_hex(settings.SHARE_TOKEN_BYTES)


def commit_with_token_retry(db: Session, stage: Callable[[], Any], attempts: int = 2):
    """
    Run stage() and commit as one transaction, returning what stage returned.

    A unique-token collision surfaces as IntegrityError at commit. The whole
    transaction is rolled back and stage() runs again with a fresh token;
    after the last attempt the caller gets Conflict. Any other failure rolls
    back and propagates. stage() must re-load everything it touches, since
    a rollback expires the session.
    """
    for _ in range(attempts):
        try:
            result = stage()
            db.commit()
        except IntegrityError:
            db.rollback()
            continue
        except Exception:
            db.rollback()
            raise
        return result

    raise Conflict("Could not issue a unique share token")


def _lock_owned_trip(trip_id: int, owner_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).with_for_update().first()
    if not trip:
        raise NotFound("Trip not found")
    if not is_owner(trip, owner_id):
        raise Unauthorized("Only the owner can share this trip")
    return trip


def stage_share(
    trip: Trip,
    db: Session,
    token_factory: Callable[[], str] = generate_share_token
) -> SharedItinerary:
    """Put a new token on the trip, switch it to SHARED and add its record. Does not commit."""
    token = token_factory()
    trip.share_token = token
    trip.visibility = TripVisibility.SHARED
    record = SharedItinerary(
        trip_id=trip.id,
        shared_by=trip.user_id,
        token=token,
        view_count=0
    )
    db.add(record)
    return record


def stage_visibility(
    trip: Trip,
    visibility: TripVisibility,
    db: Session,
    token_factory: Callable[[], str] = generate_share_token
) -> None:
    """
    Change visibility without committing. Moving to SHARED without a token
    on record stages a share so a SHARED trip always has one.
    """
    if visibility == TripVisibility.SHARED and trip.share_token is None:
        stage_share(trip, db, token_factory)
    else:
        trip.visibility = visibility


def issue_share(
    trip_id: int,
    owner_id: int,
    db: Session,
    token_factory: Callable[[], str] = generate_share_token
) -> SharedItinerary:
    """
    Issue a fresh share token and switch the trip to SHARED.

    The trip row is locked for the transaction so concurrent issuances land
    one after the other and the last one wins. A token collision is retried
    once with a new token before giving up with Conflict.
    """
    def stage():
        return stage_share(_lock_owned_trip(trip_id, owner_id, db), db, token_factory)

    record = commit_with_token_retry(db, stage)
    db.refresh(record)
    return record


def set_visibility(
    trip_id: int,
    owner_id: int,
    visibility: TripVisibility,
    db: Session,
    token_factory: Callable[[], str] = generate_share_token
) -> Trip:
    """Owner-driven visibility change."""
    def stage():
        trip = _lock_owned_trip(trip_id, owner_id, db)
        stage_visibility(trip, visibility, db, token_factory)
        return trip

    trip = commit_with_token_retry(db, stage)
    db.refresh(trip)
    return trip


def resolve_shared(token: str, db: Session) -> Trip:
    """
    Look up a SHARED trip by its current token and count the view.
    The increment is a single UPDATE so concurrent visits are never lost.
    """
    trip = db.query(Trip).filter(Trip.share_token == token).first()
    if not trip or trip.visibility != TripVisibility.SHARED:
        raise NotFound("Shared itinerary not found")

    db.execute(
        update(SharedItinerary)
        .where(SharedItinerary.token == token)
        .values(view_count=SharedItinerary.view_count + 1)
    )
    db.commit()

    return db.query(Trip).options(
        joinedload(Trip.owner),
        selectinload(Trip.stops).joinedload(TripStop.city),
        selectinload(Trip.stops).selectinload(TripStop.activities)
    ).filter(Trip.id == trip.id).first()


def list_shares(trip_id: int, db: Session) -> List[SharedItinerary]:
    """Share history of a trip, newest first."""
    return db.query(SharedItinerary).filter(
        SharedItinerary.trip_id == trip_id
    ).order_by(SharedItinerary.created_at.desc(), SharedItinerary.id.desc()).all()
