from app.models.listing import Category, Listing, ListingImage
from app.models.review import Review
from app.models.user import User

__all__ = [
    "Category",
    "Listing",
    "ListingImage",
    "Review",
    "User",
]
