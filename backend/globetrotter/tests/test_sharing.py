"""
Tests for trip visibility, share tokens and shared-link views.
"""
import re
from datetime import date

import pytest

from conftest import auth_headers, make_activity, run_side_by_side, seed_trip
from globetrotter.core.exceptions import NotFound, Unauthorized, Conflict, InvalidRange
from globetrotter.models.share import SharedItinerary
from globetrotter.models.trip import Trip, TripVisibility
from globetrotter.services import itinerary_service, share_service


def _view_count(db, token):
    db.expire_all()
    return db.query(SharedItinerary).filter(SharedItinerary.token == token).one().view_count


def test_issue_share_creates_token_and_record(db, owner, trip):
    record = share_service.issue_share(trip.id, owner.id, db)

    assert re.fullmatch(r"[0-9a-f]{64}", record.token)
    assert record.view_count == 0
    assert record.shared_by == owner.id
    db.refresh(trip)
    assert trip.visibility == TripVisibility.SHARED
    assert trip.share_token == record.token


def test_only_owner_can_issue(db, stranger, trip):
    with pytest.raises(Unauthorized):
        share_service.issue_share(trip.id, stranger.id, db)
    with pytest.raises(NotFound):
        share_service.issue_share(9999, stranger.id, db)

    db.refresh(trip)
    assert trip.visibility == TripVisibility.PRIVATE
    assert db.query(SharedItinerary).count() == 0


def test_each_view_counts_once(db, owner, trip):
    token = share_service.issue_share(trip.id, owner.id, db).token

    for expected in (1, 2, 3):
        resolved = share_service.resolve_shared(token, db)
        assert resolved.id == trip.id
        assert _view_count(db, token) == expected


@pytest.mark.parametrize("visibility", [TripVisibility.PRIVATE, TripVisibility.PUBLIC])
def test_token_stops_resolving_outside_shared(db, owner, trip, visibility):
    token = share_service.issue_share(trip.id, owner.id, db).token

    share_service.set_visibility(trip.id, owner.id, visibility, db)

    with pytest.raises(NotFound):
        share_service.resolve_shared(token, db)
    assert _view_count(db, token) == 0


def test_reissue_invalidates_previous_token(db, owner, trip):
    old = share_service.issue_share(trip.id, owner.id, db).token
    new = share_service.issue_share(trip.id, owner.id, db).token

    assert old != new
    with pytest.raises(NotFound):
        share_service.resolve_shared(old, db)
    assert share_service.resolve_shared(new, db).id == trip.id

    history = share_service.list_shares(trip.id, db)
    assert {record.token for record in history} == {old, new}


def test_unknown_token(db):
    with pytest.raises(NotFound):
        share_service.resolve_shared("deadbeef", db)


def test_setting_shared_without_token_issues_one(db, owner, trip):
    updated = share_service.set_visibility(trip.id, owner.id, TripVisibility.SHARED, db)

    assert updated.visibility == TripVisibility.SHARED
    assert updated.share_token is not None
    assert db.query(SharedItinerary).filter(SharedItinerary.trip_id == trip.id).count() == 1


def test_back_to_shared_reuses_existing_token(db, owner, trip):
    token = share_service.issue_share(trip.id, owner.id, db).token
    share_service.set_visibility(trip.id, owner.id, TripVisibility.PRIVATE, db)

    updated = share_service.set_visibility(trip.id, owner.id, TripVisibility.SHARED, db)

    assert updated.share_token == token
    assert share_service.resolve_shared(token, db).id == trip.id


def test_set_visibility_requires_owner(db, stranger, trip):
    with pytest.raises(Unauthorized):
        share_service.set_visibility(trip.id, stranger.id, TripVisibility.PUBLIC, db)


def test_token_collision_is_retried_once(db, owner, stranger, trip, other_trip):
    taken = "a" * 64
    share_service.issue_share(other_trip.id, stranger.id, db, token_factory=lambda: taken)

    tokens = iter([taken, "b" * 64])
    record = share_service.issue_share(trip.id, owner.id, db, token_factory=lambda: next(tokens))

    assert record.token == "b" * 64


def test_repeated_collision_is_a_conflict(db, owner, stranger, trip, other_trip):
    taken = "a" * 64
    share_service.issue_share(other_trip.id, stranger.id, db, token_factory=lambda: taken)

    with pytest.raises(Conflict):
        share_service.issue_share(trip.id, owner.id, db, token_factory=lambda: taken)

    db.refresh(trip)
    assert trip.visibility == TripVisibility.PRIVATE
    assert trip.share_token is None


def test_can_view(db, owner, stranger, trip):
    assert share_service.can_view(trip, owner.id)
    assert not share_service.can_view(trip, stranger.id)

    for visibility in (TripVisibility.PUBLIC, TripVisibility.SHARED):
        trip.visibility = visibility
        assert share_service.can_view(trip, stranger.id)
        assert share_service.can_view(trip, owner.id)


def test_shared_endpoint_exposes_tree_without_private_fields(client, db, owner, trip, city):
    stop = itinerary_service.add_stop(trip.id, city.id, date(2026, 5, 1), date(2026, 5, 3), db=db)
    activity = make_activity(db, "Louvre", cost="22")
    itinerary_service.assign_activity(trip.id, stop.id, activity.id, db=db)

    response = client.post(f"/api/trips/{trip.id}/share", headers=auth_headers(owner))
    assert response.status_code == 200
    body = response.json()
    token = body["share_token"]
    assert body["share_url"].endswith(f"/shared/{token}")

    response = client.get(f"/api/shared/{token}")
    assert response.status_code == 200
    assert "example.com" not in response.text
    assert token not in response.text
    data = response.json()
    assert data["owner"] == {"id": owner.id, "name": "Olivia Owner"}
    assert [s["id"] for s in data["stops"]] == [stop.id]
    assert [a["name"] for a in data["stops"][0]["activities"]] == ["Louvre"]
    assert _view_count(db, token) == 1


def test_shared_endpoint_after_going_private(client, db, owner, trip):
    token = client.post(f"/api/trips/{trip.id}/share", headers=auth_headers(owner)).json()["share_token"]

    response = client.put(
        f"/api/trips/{trip.id}/visibility",
        json={"visibility": "PRIVATE"},
        headers=auth_headers(owner)
    )
    assert response.status_code == 200
    assert response.json()["visibility"] == "PRIVATE"

    response = client.get(f"/api/shared/{token}")
    assert response.status_code == 404
    assert response.json()["details"] == "NotFound"


def test_non_owner_cannot_share(client, stranger, trip):
    response = client.post(f"/api/trips/{trip.id}/share", headers=auth_headers(stranger))
    assert response.status_code == 403
    assert response.json()["details"] == "Unauthorized"


def test_share_history_for_owner(client, owner, stranger, trip):
    client.post(f"/api/trips/{trip.id}/share", headers=auth_headers(owner))
    token = client.post(f"/api/trips/{trip.id}/share", headers=auth_headers(owner)).json()["share_token"]
    client.get(f"/api/shared/{token}")

    response = client.get(f"/api/trips/{trip.id}/shares", headers=auth_headers(owner))
    assert response.status_code == 200
    counts = {record["token"]: record["view_count"] for record in response.json()}
    assert len(counts) == 2
    assert counts[token] == 1

    response = client.get(f"/api/trips/{trip.id}/shares", headers=auth_headers(stranger))
    assert response.status_code == 403


def test_concurrent_issuance_leaves_one_current_token(file_session_factory):
    owner_id, trip_id, _ = seed_trip(file_session_factory)

    def issue():
        session = file_session_factory()
        try:
            return share_service.issue_share(trip_id, owner_id, session).token
        finally:
            session.close()

    tokens, errors = run_side_by_side(issue, issue)

    assert errors == []
    assert len(set(tokens)) == 2
    session = file_session_factory()
    try:
        assert session.query(SharedItinerary).filter(SharedItinerary.trip_id == trip_id).count() == 2
        resolving = []
        for token in tokens:
            try:
                share_service.resolve_shared(token, session)
                resolving.append(token)
            except NotFound:
                pass
        assert len(resolving) == 1
        assert session.query(Trip.share_token).filter(Trip.id == trip_id).scalar() == resolving[0]
    finally:
        session.close()


def test_trip_update_and_visibility_commit_together(db, owner, stranger, trip, other_trip):
    taken = "a" * 64
    share_service.issue_share(other_trip.id, stranger.id, db, token_factory=lambda: taken)

    with pytest.raises(Conflict):
        itinerary_service.update_trip(
            trip.id, {"name": "Grand Tour"}, db,
            visibility=TripVisibility.SHARED, token_factory=lambda: taken
        )

    db.refresh(trip)
    assert trip.name == "Europe"
    assert trip.visibility == TripVisibility.PRIVATE
    assert trip.share_token is None

    updated = itinerary_service.update_trip(
        trip.id, {"name": "Grand Tour"}, db, visibility=TripVisibility.SHARED
    )
    assert updated.name == "Grand Tour"
    assert updated.visibility == TripVisibility.SHARED
    assert share_service.resolve_shared(updated.share_token, db).id == trip.id


def test_invalid_trip_update_keeps_visibility(db, trip):
    with pytest.raises(InvalidRange):
        itinerary_service.update_trip(
            trip.id, {"end_date": date(2026, 4, 1)}, db, visibility=TripVisibility.PUBLIC
        )

    db.refresh(trip)
    assert trip.visibility == TripVisibility.PRIVATE
