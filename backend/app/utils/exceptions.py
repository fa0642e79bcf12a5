"""Errors raised by the listing services and translated by the routers."""


class ListingAppError(Exception):
    """Base class; ``message`` is safe to show to the user."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UserInputError(ListingAppError):
    """Invalid category, missing search terms or an unresolvable location."""

    status_code = 400


class ListingNotFoundError(ListingAppError):
    status_code = 404


class ReviewNotFoundError(ListingAppError):
    status_code = 404


class UpstreamError(ListingAppError):
    """The geocoding service failed or was unreachable."""

    status_code = 502


class PersistenceError(ListingAppError):
    status_code = 500
