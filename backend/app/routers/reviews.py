from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.review import ReviewForm
from app.services import review_service
from app.utils.exceptions import ListingNotFoundError, ReviewNotFoundError
from app.utils.flash import flash
from app.utils.forms import read_nested_form

router = APIRouter(prefix="/listings/{listing_id}/reviews")


@router.post("")
async def create_review(
    request: Request,
    listing_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    payload = ReviewForm.model_validate(await read_nested_form(request)).review
    try:
        review_service.create_review(db, listing_id, payload, author_id=user.id)
    except ListingNotFoundError as e:
        flash(request, "error", e.message)
        return RedirectResponse("/listings", status_code=303)
    flash(request, "success", "New Review Created!")
    return RedirectResponse(f"/listings/{listing_id}", status_code=303)


@router.delete("/{review_id}")
def delete_review(
    request: Request,
    listing_id: int,
    review_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Response:
    try:
        review_service.delete_review(db, listing_id, review_id)
    except ReviewNotFoundError as e:
        flash(request, "error", e.message)
    else:
        flash(request, "success", "Review Deleted!")
    return RedirectResponse(f"/listings/{listing_id}", status_code=303)
