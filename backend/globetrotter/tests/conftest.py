"""
Shared pytest fixtures.
"""
import os
import threading

# Must be set before globetrotter.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import globetrotter.models  # noqa: F401
from globetrotter.core.security import create_access_token
from globetrotter.db.base import Base
from globetrotter.db.session import get_db, use_immediate_transactions
from globetrotter.main import app
from globetrotter.models.activity import Activity
from globetrotter.models.city import City
from globetrotter.models.user import User
from globetrotter.services import itinerary_service


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, username: str, name: str = None) -> User:
    # Users created here never log in with a password, so skip bcrypt
    user = User(
        username=username,
        email=f"{username}@example.com",
        name=name,
        hashed_password="not-a-real-hash"
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": user.username, "user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


def make_activity(db, name: str = "Museum visit", cost="0", city: City = None, **kwargs) -> Activity:
    activity = Activity(
        name=name,
        cost=Decimal(cost),
        duration=kwargs.pop("duration", 60),
        city_id=city.id if city else None,
        **kwargs
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity


@pytest.fixture
def owner(db):
    return make_user(db, "owner", name="Olivia Owner")


@pytest.fixture
def stranger(db):
    return make_user(db, "stranger")


@pytest.fixture
def city(db):
    city = City(name="Paris", country="France", country_code="FR", popularity=95, cost_index=75)
    db.add(city)
    db.commit()
    db.refresh(city)
    return city


@pytest.fixture
def other_city(db):
    city = City(name="London", country="United Kingdom", country_code="GB", popularity=89, cost_index=82)
    db.add(city)
    db.commit()
    db.refresh(city)
    return city


@pytest.fixture
def trip(db, owner):
    return itinerary_service.create_trip(
        owner_id=owner.id,
        name="Europe",
        start_date=date(2026, 5, 1),
        end_date=date(2026, 5, 8),
        budget=Decimal("1000"),
        db=db
    )


@pytest.fixture
def other_trip(db, stranger):
    return itinerary_service.create_trip(
        owner_id=stranger.id,
        name="Elsewhere",
        start_date=date(2026, 6, 1),
        end_date=date(2026, 6, 3),
        db=db
    )


@pytest.fixture
def file_session_factory(tmp_path):
    """
    Sessions on a SQLite file, each on its own connection, for tests where
    two transactions must run side by side.
    """
    engine = use_immediate_transactions(create_engine(
        f"sqlite:///{tmp_path / 'globetrotter.db'}",
        connect_args={"check_same_thread": False}
    ))
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def run_side_by_side(*calls):
    """Start every call in its own thread at the same moment and collect results and errors."""
    barrier = threading.Barrier(len(calls))
    results, errors = [None] * len(calls), []

    def run(idx, call):
        barrier.wait()
        try:
            results[idx] = call()
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=run, args=(idx, call)) for idx, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results, errors


def seed_trip(session_factory):
    """Commit an owner, a city and a trip through a short-lived session and return their ids."""
    session = session_factory()
    try:
        owner = make_user(session, "owner")
        city = City(name="Paris", country="France", country_code="FR")
        session.add(city)
        session.commit()
        trip = itinerary_service.create_trip(
            owner_id=owner.id, name="Europe",
            start_date=date(2026, 5, 1), end_date=date(2026, 5, 8), db=session
        )
        return owner.id, trip.id, city.id
    finally:
        session.close()
