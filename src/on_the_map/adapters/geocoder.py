"""Address geocoding adapter."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from on_the_map.domain.errors import AddressNotFoundError, DecodeError, TransportError

DEFAULT_MAPBOX_BASE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"

_logger = logging.getLogger(__name__)


class MapboxFeature(BaseModel):
    """A single place match; ``center`` is ``[longitude, latitude]``."""

    center: tuple[float, float]


class MapboxResponse(BaseModel):
    """Mapbox places response."""

    features: list[MapboxFeature] = []


class Geocoder(Protocol):
    """Interface for resolving a typed address to coordinates."""

    async def geocode(self, address: str) -> tuple[float, float]:
        """Return ``(latitude, longitude)`` for an address."""


@dataclass
class HttpxMapboxGeocoder(Geocoder):
    """Geocoder backed by the Mapbox places API."""

    access_token: str
    http_client: httpx.AsyncClient
    base_url: str = DEFAULT_MAPBOX_BASE_URL
    timeout: float | None = None

    @classmethod
    def create(
        cls,
        access_token: str,
        base_url: str = DEFAULT_MAPBOX_BASE_URL,
        timeout: float | None = None,
    ) -> "HttpxMapboxGeocoder":
        """Create a geocoder with a managed httpx session."""
        return cls(
            access_token=access_token,
            http_client=httpx.AsyncClient(),
            base_url=base_url,
            timeout=timeout,
        )

    async def geocode(self, address: str) -> tuple[float, float]:
        """Resolve an address using the first Mapbox feature."""
        query = address.strip()
        if not query:
            raise AddressNotFoundError()
        path = quote(query, safe="")
        url = f"{self.base_url.rstrip('/')}/{path}.json"
        try:
            response = await self.http_client.get(
                url,
                params={"access_token": self.access_token, "limit": 1},
                timeout=self.timeout,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"Geocoding request failed: {exc}") from exc
        if response.is_error:
            _logger.warning(
                "geocoding failed with status %s for %r", response.status_code, query
            )
            raise AddressNotFoundError()

        try:
            payload = MapboxResponse.model_validate_json(response.content)
        except ValidationError as exc:
            _logger.error("could not decode geocoding response: %s", exc)
            raise DecodeError("Unexpected response from the geocoding service") from exc
        if not payload.features:
            _logger.info("no geocoding match for %r", query)
            raise AddressNotFoundError()
        longitude, latitude = payload.features[0].center
        return float(latitude), float(longitude)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
