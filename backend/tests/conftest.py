"""Pytest configuration and fixtures for tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, enable_sqlite_foreign_keys, get_db
from app.dependencies import get_current_user
from app.models.listing import Listing, ListingImage
from app.models.user import User
from app.services.geocoding_client import GeocodingClient, get_geocoding_client

POINT = {"type": "Point", "coordinates": [77.2090, 28.6139]}


@pytest.fixture
def engine():
    """Create an in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    # Import all models so they're registered
    import app.models  # noqa: F401

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    """Provide a database session shared by the test and the app."""
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Keep stored images out of the working tree."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture
def owner(db: Session) -> User:
    user = User(username="ananya", email="ananya@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def geocoder() -> MagicMock:
    client = MagicMock(spec=GeocodingClient)
    client.geocode_point = AsyncMock(return_value=POINT)
    return client


@pytest.fixture
def make_listing(db: Session, owner: User):
    """Insert a listing with sensible defaults."""

    def _make(**overrides) -> Listing:
        defaults = dict(
            title="Cozy Beachfront Cottage",
            description="Wake up to the sound of waves.",
            location="Malibu",
            country="United States",
            price=1500,
            category="trending",
            geometry=POINT,
            owner_id=owner.id,
        )
        image = overrides.pop("image", ListingImage(url="/media/upload/beach.jpg", filename="beach.jpg"))
        defaults.update(overrides)
        listing = Listing(**defaults)
        listing.image = image
        db.add(listing)
        db.commit()
        db.refresh(listing)
        return listing

    return _make


@pytest.fixture
def client(db: Session, owner: User, geocoder: MagicMock):
    from app.main import app

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: owner
    app.dependency_overrides[get_geocoding_client] = lambda: geocoder
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _listing_form(**overrides) -> dict[str, str]:
    fields = {
        "title": "Mountain Retreat",
        "description": "Quiet cabin with a view.",
        "location": "Manali",
        "country": "India",
        "price": "2500",
        "category": "mountains",
    }
    fields.update(overrides)
    return {f"listing[{key}]": value for key, value in fields.items()}


@pytest.fixture
def listing_form():
    """Build form fields as the new/edit pages submit them."""
    return _listing_form

