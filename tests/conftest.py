"""Pytest configuration and fixtures."""

from typing import Dict, Iterable

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from propchat.database.schema import Base, Property


@pytest.fixture
def session():
    """Create a temporary in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def broken_session():
    """Session on a database whose schema was never created (every query fails)."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seed():
    """Insert property rows (dicts of Property columns) in the given order."""

    def _seed(session, rows: Iterable[Dict]) -> None:
        for row in rows:
            session.add(Property(**row))
            # flush per row so autoincrement ids follow list order
            session.flush()
        session.commit()

    return _seed


@pytest.fixture
def sample_properties():
    """The three-record store used by the misspelling and top-owner scenarios."""
    return [
        {"name": "Ocean View", "slug": "ocean-view", "owner": "Alice"},
        {"name": "Ocean Vista", "slug": "ocean-vista", "owner": "Alice"},
        {"name": "Mountain Lodge", "slug": "mountain-lodge", "owner": "Bob"},
    ]


@pytest.fixture
def new_jersey_properties():
    """Twelve New Jersey properties followed by three elsewhere."""
    rows = [
        {
            "name": f"Shore House {i:02d}",
            "slug": f"shore-house-{i:02d}",
            "address": f"{i} Beach Ave, Cape May, New Jersey",
            "owner": "Dana",
        }
        for i in range(1, 13)
    ]
    rows += [
        {"name": "Lake Cabin", "slug": "lake-cabin", "address": "1 Lake Rd, Burlington, Vermont", "owner": "Eve"},
        {"name": "City Loft", "slug": "city-loft", "address": "9 Main St, Albany, New York", "owner": "Eve"},
        {"name": "Desert Casita", "slug": "desert-casita", "address": "5 Mesa Dr, Sedona, Arizona", "owner": "Finn"},
    ]
    return rows
