from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator  # noqa: TC003
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from pydantic import ValidationError
from starlette.middleware.sessions import SessionMiddleware

from app.config import settings
from app.database import create_tables
from app.routers import health, listings, media, reviews
from app.schemas.listing import field_errors
from app.templating import templates
from app.utils.exceptions import ListingAppError
from app.utils.flash import flash
from app.utils.middleware import MethodOverrideMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Import models so Base.metadata knows about them
    import app.models  # noqa: F401

    create_tables()
    os.makedirs(settings.upload_dir, exist_ok=True)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)
app.add_middleware(MethodOverrideMiddleware)

app.include_router(health.router, tags=["health"])
app.include_router(listings.router, tags=["listings"])
app.include_router(reviews.router, tags=["reviews"])
app.include_router(media.router, tags=["media"])


@app.get("/", include_in_schema=False)
def root() -> RedirectResponse:
    return RedirectResponse("/listings")


@app.exception_handler(ValidationError)
async def payload_error_handler(request: Request, exc: ValidationError) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": "Please correct the highlighted fields.", "errors": field_errors(exc)},
        status_code=400,
    )


@app.exception_handler(ListingAppError)
async def listing_error_handler(request: Request, exc: ListingAppError) -> Response:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def path_error_handler(request: Request, exc: RequestValidationError) -> Response:
    """Ids that are not integers can never match a row; treat them as missing."""
    path_params = {err["loc"][1] for err in exc.errors() if err["loc"][0] == "path"}
    if not path_params:
        return await request_validation_exception_handler(request, exc)
    if path_params == {"review_id"}:
        flash(request, "error", "Review does not exist!")
    else:
        flash(request, "error", "Listing you requested for does not exist!")
    return RedirectResponse("/listings", status_code=303)
