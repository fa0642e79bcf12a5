from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review
    from app.models.user import User


class Category(StrEnum):
    TRENDING = "trending"
    ROOMS = "rooms"
    ICONIC_CITIES = "iconic-cities"
    MOUNTAINS = "mountains"
    CASTLES = "castles"
    AMAZING_POOLS = "amazing-pools"
    FARMS = "farms"
    CAMPING = "camping"
    ARCTIC = "arctic"
    DOMES = "domes"
    BOATS = "boats"


CATEGORIES: tuple[str, ...] = tuple(c.value for c in Category)

# Query value meaning "no category filter"
ALL_CATEGORIES = "all"


def is_category(value: str | None) -> bool:
    return value in CATEGORIES


@dataclass(frozen=True)
class ListingImage:
    url: str
    filename: str = ""


class Listing(Base):
    """A rentable property. Geometry is a GeoJSON point set once at creation."""

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    image_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    geometry: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now()
    )

    owner: Mapped["User"] = relationship(back_populates="listings")
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="Review.created_at",
    )

    @property
    def image(self) -> ListingImage | None:
        if not self.image_url:
            return None
        return ListingImage(url=self.image_url, filename=self.image_filename or "")

    @image.setter
    def image(self, value: ListingImage | None) -> None:
        if value is None:
            self.image_url = None
            self.image_filename = None
        else:
            self.image_url = value.url
            self.image_filename = value.filename
