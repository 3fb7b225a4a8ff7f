"""
Tests for sibling ordering within a scope.
"""
import time
from datetime import date

import pytest

from conftest import run_side_by_side, seed_trip
from globetrotter.core.exceptions import NotFound, ScopeMismatch, InvalidRange
from globetrotter.models.trip import TripStop
from globetrotter.services.ordering import OrderedCollection


def _stop(city):
    return TripStop(city_id=city.id, arrival_date=date(2026, 5, 1), departure_date=date(2026, 5, 2))


def _orders(collection):
    return [(item.id, item.order) for item in collection.items()]


def test_append_starts_at_zero_and_counts_up(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    created = [stops.append(_stop(city)) for _ in range(3)]
    db.commit()

    assert [s.order for s in created] == [0, 1, 2]
    assert [s.trip_id for s in created] == [trip.id] * 3


def test_insert_at_takes_explicit_position_without_renumbering(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    first = stops.append(_stop(city))
    explicit = stops.insert_at(_stop(city), 10)
    default = stops.insert_at(_stop(city))
    db.commit()

    assert first.order == 0
    assert explicit.order == 10
    assert default.order == 11


def test_remove_leaves_gaps(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    a, b, c = [stops.append(_stop(city)) for _ in range(3)]
    db.commit()

    stops.remove(b.id)
    db.commit()
    assert _orders(stops) == [(a.id, 0), (c.id, 2)]

    d = stops.append(_stop(city))
    db.commit()
    assert d.order == 3


def test_get_distinguishes_missing_from_foreign(db, trip, other_trip, city):
    foreign = OrderedCollection.stops_of(db, other_trip.id).append(_stop(city))
    db.commit()

    stops = OrderedCollection.stops_of(db, trip.id)
    with pytest.raises(ScopeMismatch):
        stops.get(foreign.id)
    with pytest.raises(NotFound):
        stops.get(9999)


def test_move_shifts_later_siblings(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    a, b, c = [stops.append(_stop(city)) for _ in range(3)]
    db.commit()

    stops.move(c.id, 0)
    db.commit()

    ordered = _orders(stops)
    assert [item_id for item_id, _ in ordered] == [c.id, a.id, b.id]
    orders = [order for _, order in ordered]
    assert len(set(orders)) == len(orders)


def test_move_down_keeps_orders_unique(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    a, b, c = [stops.append(_stop(city)) for _ in range(3)]
    db.commit()

    stops.move(a.id, 2)
    db.commit()

    ordered = _orders(stops)
    assert [item_id for item_id, _ in ordered] == [b.id, a.id, c.id]
    orders = [order for _, order in ordered]
    assert len(set(orders)) == len(orders)


def test_move_rejects_negative_position(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    a = stops.append(_stop(city))
    db.commit()

    with pytest.raises(InvalidRange):
        stops.move(a.id, -1)


def test_resequence_requires_every_member_once(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    a, b, c = [stops.append(_stop(city)) for _ in range(3)]
    db.commit()

    stops.resequence([c.id, a.id, b.id])
    db.commit()
    assert _orders(stops) == [(c.id, 0), (a.id, 1), (b.id, 2)]

    with pytest.raises(ScopeMismatch):
        stops.resequence([a.id, b.id])
    with pytest.raises(ScopeMismatch):
        stops.resequence([a.id, a.id, b.id])


def test_move_raises_orders_from_target_position(db, trip, city):
    stops = OrderedCollection.stops_of(db, trip.id)
    a, b, c = [stops.append(_stop(city)) for _ in range(3)]
    db.commit()

    stops.move(c.id, 1)
    db.commit()

    assert _orders(stops) == [(a.id, 0), (c.id, 1), (b.id, 2)]


def test_concurrent_appends_never_share_an_order(file_session_factory):
    _, trip_id, city_id = seed_trip(file_session_factory)

    def append():
        session = file_session_factory()
        try:
            stops = OrderedCollection.stops_of(session, trip_id)
            order = stops.next_order()
            # Hold the transaction open so the other append has to wait for it
            time.sleep(0.2)
            stop = TripStop(city_id=city_id, arrival_date=date(2026, 5, 1), departure_date=date(2026, 5, 2))
            stops.insert_at(stop, order)
            session.commit()
            return order
        finally:
            session.close()

    orders, errors = run_side_by_side(append, append)

    assert errors == []
    assert sorted(orders) == [0, 1]

    session = file_session_factory()
    try:
        stored = [s.order for s in OrderedCollection.stops_of(session, trip_id).items()]
    finally:
        session.close()
    assert stored == [0, 1]
