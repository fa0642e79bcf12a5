"""Mapbox forward-geocoding client used to place new listings on the map."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from app.config import settings
from app.utils.exceptions import UpstreamError, UserInputError

logger = logging.getLogger(__name__)


class GeocodingClient:
    """HTTP client for the Mapbox ``mapbox.places`` endpoint.

    Works as an async context manager to share one ``httpx.AsyncClient``;
    without it a one-off client is opened per lookup.
    """

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._token = access_token if access_token is not None else settings.mapbox_token
        self._base_url = (base_url or settings.mapbox_geocoding_url).rstrip("/")
        self._timeout = timeout or settings.geocoding_timeout
        self._shared_http: httpx.AsyncClient | None = None

    async def __aenter__(self) -> GeocodingClient:
        if self._shared_http is not None:
            raise RuntimeError("GeocodingClient context manager is not reentrant")
        self._shared_http = httpx.AsyncClient(timeout=self._timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._shared_http is not None:
            await self._shared_http.aclose()
            self._shared_http = None

    async def forward_geocode(self, query: str, limit: int = 1) -> dict[str, Any]:
        """Return the raw FeatureCollection for ``query``."""
        if not self._token:
            raise UpstreamError("Geocoding is not configured")

        url = f"{self._base_url}/{quote(query, safe='')}.json"
        params = {"access_token": self._token, "limit": str(limit)}
        try:
            async with self._http_client() as http:
                response = await http.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Geocoding HTTP error for '%s': %s", query, e.response.status_code
            )
            raise UpstreamError(
                f"Geocoding service returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error("Geocoding request error for '%s': %s", query, e)
            raise UpstreamError("Geocoding service is unreachable") from e
        except ValueError as e:
            logger.error("Geocoding returned malformed JSON for '%s'", query)
            raise UpstreamError("Geocoding service returned an invalid response") from e

    async def geocode_point(self, location: str) -> dict[str, Any]:
        """Geometry of the best match for ``location``.

        Raises UserInputError when nothing matches.
        """
        data = await self.forward_geocode(location, limit=1)
        features = data.get("features") or []
        if not features or not features[0].get("geometry"):
            logger.warning("No geocoding results for '%s'", location)
            raise UserInputError(f"Could not find a location matching '{location}'")
        return features[0]["geometry"]

    @contextlib.asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._shared_http is not None:
            yield self._shared_http
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as http:
                yield http


def get_geocoding_client() -> GeocodingClient:
    return GeocodingClient()
