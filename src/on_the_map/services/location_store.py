"""In-memory collection of known student locations."""

import logging
import threading
from collections.abc import Iterable, Iterator
from datetime import datetime

from on_the_map.domain.locations import (
    LocationReceipt,
    StudentLocation,
    parse_timestamp,
)

_logger = logging.getLogger(__name__)


class LocationStore:
    """Ordered, append-only view of every location seen by this process.

    De-duplication compares whole records and only happens when fetched
    locations are merged in; entries already present are never removed by a
    merge.
    """

    def __init__(self, locations: Iterable[StudentLocation] = ()) -> None:
        self._lock = threading.Lock()
        self._locations: list[StudentLocation] = list(locations)

    def __len__(self) -> int:
        with self._lock:
            return len(self._locations)

    def __iter__(self) -> Iterator[StudentLocation]:
        return iter(self.snapshot())

    def snapshot(self) -> list[StudentLocation]:
        """Return a copy of the current ordering."""
        with self._lock:
            return list(self._locations)

    def merge_fetched(self, locations: Iterable[StudentLocation]) -> int:
        """Append fetched locations not already present; return how many."""
        added = 0
        with self._lock:
            for location in locations:
                if location in self._locations:
                    continue
                self._locations.append(location)
                added += 1
        _logger.debug("merged %s new location(s)", added)
        return added

    def append_local(self, location: StudentLocation) -> None:
        """Append a location the server hasn't confirmed yet."""
        with self._lock:
            self._locations.append(location)

    def reconcile(
        self, pending: StudentLocation, receipt: LocationReceipt
    ) -> StudentLocation:
        """Stamp a pending entry with the fields the server assigned."""
        confirmed = pending.with_receipt(receipt)
        with self._lock:
            try:
                index = self._locations.index(pending)
            except ValueError:
                _logger.warning(
                    "pending location for %s missing, appending confirmed copy",
                    pending.full_name,
                )
                self._locations.append(confirmed)
            else:
                self._locations[index] = confirmed
        return confirmed

    def remove(self, location: StudentLocation) -> bool:
        """Remove the first entry equal to ``location``."""
        with self._lock:
            try:
                self._locations.remove(location)
            except ValueError:
                return False
        return True

    def sort_by_recency(self) -> None:
        """Order entries newest first by ``updated_at``.

        Entries whose timestamp doesn't parse are placed ahead of every dated
        entry. The sort is stable.
        """
        _logger.debug("sorting locations")
        with self._lock:
            self._locations.sort(key=_recency_key, reverse=True)


def _recency_key(location: StudentLocation) -> tuple[bool, datetime | float]:
    updated_at = parse_timestamp(location.updated_at)
    if updated_at is None:
        return (True, 0.0)
    return (False, updated_at)
