"""Listing store operations and the create/update flows built on them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from app.models.listing import ALL_CATEGORIES, Listing, ListingImage, is_category
from app.models.review import Review
from app.utils.exceptions import ListingNotFoundError, PersistenceError, UserInputError
from app.utils.file_handling import remove_listing_image, save_listing_image

if TYPE_CHECKING:
    from fastapi import UploadFile
    from sqlalchemy.orm import Session

    from app.schemas.listing import ListingPayload
    from app.services.geocoding_client import GeocodingClient

logger = logging.getLogger(__name__)


def find_listings(db: Session, **criteria: Any) -> list[Listing]:
    """Listings whose columns equal every given criterion, oldest first."""
    stmt = select(Listing).filter_by(**criteria).order_by(Listing.id)
    return list(db.scalars(stmt))


def get_listing(db: Session, listing_id: int, expand: bool = False) -> Listing | None:
    """Fetch one listing; ``expand`` also loads owner, reviews and review authors."""
    stmt = select(Listing).where(Listing.id == listing_id)
    if expand:
        stmt = stmt.options(
            selectinload(Listing.owner),
            selectinload(Listing.reviews).selectinload(Review.author),
        )
    return db.scalars(stmt).first()


def require_listing(db: Session, listing_id: int, expand: bool = False) -> Listing:
    listing = get_listing(db, listing_id, expand=expand)
    if listing is None:
        raise ListingNotFoundError("Listing you requested for does not exist!")
    return listing


def listings_for_category(db: Session, category: str | None) -> list[Listing]:
    """All listings for a missing or ``"all"`` category, else that category only.

    An unknown category raises UserInputError before any query runs.
    """
    if not category or category == ALL_CATEGORIES:
        return find_listings(db)
    if not is_category(category):
        raise UserInputError("Invalid category!")
    return find_listings(db, category=category)


def listings_in_country(db: Session, country: str) -> list[Listing]:
    return find_listings(db, country=country)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to %s", action)
        raise PersistenceError("Something went wrong") from e


async def create_listing(
    db: Session,
    payload: ListingPayload,
    owner_id: int,
    geocoder: GeocodingClient,
    upload: UploadFile | None = None,
) -> Listing:
    """Geocode, store the uploaded image, then persist the new listing.

    The stored image is removed again if the insert fails.
    """
    geometry = await geocoder.geocode_point(payload.location)

    image: ListingImage | None = None
    if upload is not None:
        image = await save_listing_image(upload)
    elif payload.image is not None:
        image = payload.image.to_image()

    listing = Listing(**payload.field_values())
    listing.owner_id = owner_id
    listing.image = image
    listing.geometry = geometry
    db.add(listing)
    try:
        _commit(db, "create listing")
    except PersistenceError:
        if upload is not None and image is not None:
            remove_listing_image(image.filename)
        raise
    db.refresh(listing)

    logger.info("Created listing id=%d owner_id=%d", listing.id, owner_id)
    return listing


async def update_listing(
    db: Session,
    listing_id: int,
    payload: ListingPayload,
    upload: UploadFile | None = None,
) -> Listing:
    """Replace every field of a listing.

    The image comes from, in order: the upload, ``payload.image.url``, the
    stored image. Geometry and owner are never changed.
    """
    listing = require_listing(db, listing_id)

    image = listing.image
    if payload.image is not None:
        image = payload.image.to_image() or image
    uploaded: ListingImage | None = None
    if upload is not None:
        uploaded = await save_listing_image(upload)
        image = uploaded

    for field, value in payload.field_values().items():
        setattr(listing, field, value)
    listing.image = image
    try:
        _commit(db, f"update listing id={listing_id}")
    except PersistenceError:
        if uploaded is not None:
            remove_listing_image(uploaded.filename)
        raise
    db.refresh(listing)

    logger.info("Updated listing id=%d", listing.id)
    return listing


def delete_listing(db: Session, listing_id: int) -> Listing | None:
    """Hard-delete a listing and its reviews. Returns None if it did not exist."""
    listing = get_listing(db, listing_id)
    if listing is None:
        logger.info("Delete requested for missing listing id=%d", listing_id)
        return None
    db.delete(listing)
    _commit(db, f"delete listing id={listing_id}")
    logger.info("Deleted listing id=%d", listing_id)
    return listing
