from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.models.listing import Category, ListingImage


class ListingImagePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Key must be present; an empty or null value means "no new URL"
    url: str | None
    filename: str | None = None

    def to_image(self) -> ListingImage | None:
        if not self.url:
            return None
        return ListingImage(url=self.url, filename=self.filename or "listingimage")


class ListingPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    country: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    category: Category
    image: ListingImagePayload | None = None

    def field_values(self) -> dict[str, Any]:
        """Scalar columns, without the image."""
        return self.model_dump(exclude={"image"}, mode="json")


class ListingForm(BaseModel):
    model_config = ConfigDict(extra="forbid")

    listing: ListingPayload


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten pydantic errors into ``{"listing.price": "message"}``."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"])
        errors.setdefault(path, err["msg"])
    return errors
