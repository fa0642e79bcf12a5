from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.database import get_db
from app.dependencies import get_current_user
from app.models.listing import ALL_CATEGORIES, is_category
from app.models.user import User
from app.schemas.listing import ListingForm, ListingPayload
from app.services import listing_service
from app.services.geocoding_client import GeocodingClient, get_geocoding_client
from app.templating import templates
from app.utils.exceptions import ListingNotFoundError, UserInputError
from app.utils.file_handling import preview_image_url
from app.utils.flash import flash
from app.utils.forms import pop_upload, read_nested_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings")

INDEX_URL = "/listings"


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


async def _read_listing_form(request: Request) -> tuple[ListingPayload, UploadFile | None]:
    data = await read_nested_form(request)
    upload = pop_upload(data)
    return ListingForm.model_validate(data).listing, upload


@router.get("")
def index(
    request: Request,
    category: str | None = None,
    db: Session = Depends(get_db),
) -> Response:
    try:
        listings = listing_service.listings_for_category(db, category)
    except UserInputError as e:
        flash(request, "error", e.message)
        return redirect(INDEX_URL)

    filtered = bool(category) and category != ALL_CATEGORIES
    if filtered and not listings:
        return templates.TemplateResponse(
            request, "listings/nolisting.html", {"query": None, "country": None}
        )
    return templates.TemplateResponse(
        request,
        "listings/index.html",
        {"listings": listings, "current_category": category or ALL_CATEGORIES},
    )


@router.get("/new")
def new_listing_form(
    request: Request, user: User = Depends(get_current_user)
) -> Response:
    return templates.TemplateResponse(request, "listings/new.html", {})


@router.post("")
async def create_listing(
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
) -> Response:
    payload, upload = await _read_listing_form(request)
    try:
        await listing_service.create_listing(
            db, payload, owner_id=user.id, geocoder=geocoder, upload=upload
        )
    except UserInputError as e:
        flash(request, "error", e.message)
        return redirect(f"{INDEX_URL}/new")
    flash(request, "success", "New Listing Created!")
    return redirect(INDEX_URL)


@router.get("/category")
def search_by_category(
    request: Request,
    category: str | None = None,
    db: Session = Depends(get_db),
) -> Response:
    if not is_category(category):
        return PlainTextResponse("Invalid category", status_code=400)
    try:
        listings = listing_service.find_listings(db, category=category)
    except SQLAlchemyError:
        logger.exception("Category search failed for '%s'", category)
        return PlainTextResponse("Server Error", status_code=500)
    if not listings:
        return PlainTextResponse(
            "No listings found for this category", status_code=404
        )
    return templates.TemplateResponse(
        request,
        "listings/index.html",
        {"listings": listings, "current_category": category},
    )


@router.get("/search")
def search_listings(
    request: Request,
    query: str | None = None,
    country: str | None = None,
    db: Session = Depends(get_db),
) -> Response:
    if not query and not country:
        flash(request, "error", "Please enter a search query or select a country.")
        return redirect(INDEX_URL)

    # The free-text box is matched against the country column; ``country``
    # itself only round-trips to the results page.
    try:
        if query:
            listings = listing_service.listings_in_country(db, query)
        else:
            listings = listing_service.find_listings(db)
    except SQLAlchemyError:
        logger.exception("Search failed for query=%r country=%r", query, country)
        return PlainTextResponse("Server Error", status_code=500)

    context = {"query": query, "country": country}
    if not listings:
        return templates.TemplateResponse(
            request, "listings/nolisting.html", context, status_code=404
        )
    return templates.TemplateResponse(
        request, "listings/search_results.html", {"listings": listings, **context}
    )


@router.get("/{listing_id}")
def show_listing(
    request: Request, listing_id: int, db: Session = Depends(get_db)
) -> Response:
    listing = listing_service.get_listing(db, listing_id, expand=True)
    if listing is None:
        flash(request, "error", "Listing you requested for does not exist!")
        return redirect(INDEX_URL)
    return templates.TemplateResponse(request, "listings/show.html", {"listing": listing})


@router.get("/{listing_id}/edit")
def edit_listing_form(
    request: Request, listing_id: int, db: Session = Depends(get_db)
) -> Response:
    listing = listing_service.get_listing(db, listing_id)
    if listing is None:
        flash(request, "error", "Listing you requested for does not exist!")
        return redirect(INDEX_URL)
    original_image_url = preview_image_url(listing.image.url) if listing.image else None
    return templates.TemplateResponse(
        request,
        "listings/edit.html",
        {"listing": listing, "original_image_url": original_image_url},
    )


@router.put("/{listing_id}")
async def update_listing(
    request: Request, listing_id: int, db: Session = Depends(get_db)
) -> Response:
    payload, upload = await _read_listing_form(request)
    try:
        await listing_service.update_listing(db, listing_id, payload, upload=upload)
    except ListingNotFoundError as e:
        flash(request, "error", e.message)
        return redirect(INDEX_URL)
    except UserInputError as e:
        flash(request, "error", e.message)
        return redirect(f"{INDEX_URL}/{listing_id}/edit")
    flash(request, "success", "Listing Updated!")
    return redirect(f"{INDEX_URL}/{listing_id}")


@router.delete("/{listing_id}")
def delete_listing(
    request: Request, listing_id: int, db: Session = Depends(get_db)
) -> Response:
    listing_service.delete_listing(db, listing_id)
    flash(request, "success", "Listing Deleted!")
    return redirect(INDEX_URL)
