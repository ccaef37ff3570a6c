"""Location workflows connecting the API client, store and renderers."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from on_the_map.adapters.geocoder import Geocoder
from on_the_map.adapters.udacity_client import OnTheMapClient
from on_the_map.domain.errors import AddressNotFoundError
from on_the_map.domain.locations import (
    NewLocationSubmission,
    StudentLocation,
    StudentProfile,
)
from on_the_map.services.location_store import LocationStore

_logger = logging.getLogger(__name__)


class LocationRenderer(Protocol):
    """Anything that displays the current set of locations."""

    def render(self, locations: list[StudentLocation]) -> None:
        """Redraw using the given locations, newest first."""


@dataclass
class LocationService:
    """Keeps the local store in step with the backend."""

    client: OnTheMapClient
    store: LocationStore
    geocoder: Geocoder
    renderers: list[LocationRenderer] = field(default_factory=list)

    def add_renderer(self, renderer: LocationRenderer) -> None:
        self.renderers.append(renderer)

    async def refresh(self) -> list[StudentLocation]:
        """Fetch locations, merge them into the store and redraw."""
        locations = await self.client.get_locations()
        added = self.store.merge_fetched(locations)
        self.store.sort_by_recency()
        _logger.info(
            "refreshed locations: fetched=%s added=%s total=%s",
            len(locations),
            added,
            len(self.store),
        )
        return self._notify()

    async def geocode(self, address: str) -> tuple[float, float]:
        """Resolve a typed address to ``(latitude, longitude)``."""
        if not address.strip():
            raise AddressNotFoundError()
        return await self.geocoder.geocode(address)

    async def submit(
        self,
        profile: StudentProfile,
        map_string: str,
        media_url: str,
        coordinate: tuple[float, float],
    ) -> StudentLocation:
        """Post the user's location, showing it locally while in flight.

        The local entry is removed again if the backend rejects the post.
        """
        latitude, longitude = coordinate
        submission = NewLocationSubmission(
            unique_key=profile.unique_key,
            first_name=profile.first_name,
            last_name=profile.last_name,
            map_string=map_string,
            media_url=media_url,
            latitude=latitude,
            longitude=longitude,
        )
        pending = StudentLocation.pending(submission)
        self.store.append_local(pending)
        self._notify()

        try:
            receipt = await self.client.post_location(submission)
        except asyncio.CancelledError:
            _logger.info("posting location cancelled for %s", profile.unique_key)
            self.store.remove(pending)
            self._notify()
            raise
        except Exception:
            _logger.exception("error posting location for %s", profile.unique_key)
            self.store.remove(pending)
            self._notify()
            raise

        confirmed = self.store.reconcile(pending, receipt)
        _logger.info("posted location %s", receipt.object_id)
        self._notify()
        return confirmed

    async def submit_address(
        self, profile: StudentProfile, address: str, media_url: str
    ) -> StudentLocation:
        """Geocode a typed address and post it as the user's location."""
        coordinate = await self.geocode(address)
        return await self.submit(
            profile,
            map_string=address.strip(),
            media_url=media_url,
            coordinate=coordinate,
        )

    def _notify(self) -> list[StudentLocation]:
        snapshot = self.store.snapshot()
        for renderer in self.renderers:
            renderer.render(snapshot)
        return snapshot
