from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from app.models.review import Review
from app.services.listing_service import require_listing
from app.utils.exceptions import PersistenceError, ReviewNotFoundError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from app.schemas.review import ReviewPayload

logger = logging.getLogger(__name__)


def create_review(
    db: Session, listing_id: int, payload: ReviewPayload, author_id: int
) -> Review:
    listing = require_listing(db, listing_id)
    review = Review(rating=payload.rating, comment=payload.comment, author_id=author_id)
    listing.reviews.append(review)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to add review to listing id=%d", listing_id)
        raise PersistenceError("Something went wrong") from e
    db.refresh(review)
    logger.info("Added review id=%d to listing id=%d", review.id, listing_id)
    return review


def delete_review(db: Session, listing_id: int, review_id: int) -> None:
    review = (
        db.query(Review)
        .filter(Review.listing_id == listing_id, Review.id == review_id)
        .first()
    )
    if not review:
        raise ReviewNotFoundError("Review does not exist!")
    db.delete(review)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to delete review id=%d", review_id)
        raise PersistenceError("Something went wrong") from e
