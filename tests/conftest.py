"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest

from on_the_map.adapters.geocoder import Geocoder
from on_the_map.adapters.udacity_client import OnTheMapClient
from on_the_map.config import Settings
from on_the_map.domain.errors import AddressNotFoundError
from on_the_map.domain.locations import (
    LocationReceipt,
    NewLocationSubmission,
    StudentLocation,
    StudentProfile,
)
from on_the_map.domain.sessions import Session
from on_the_map.services.location_store import LocationStore
from on_the_map.services.locations import LocationService
from on_the_map.services.session_state import SessionState

SECURITY_BANNER = b")]}'\n"


def make_location(**overrides: object) -> StudentLocation:
    """Build a location with sensible defaults."""
    values: dict[str, object] = {
        "object_id": "obj-1",
        "unique_key": "key-1",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "map_string": "London, UK",
        "media_url": "https://example.com/ada",
        "latitude": 51.5072,
        "longitude": -0.1276,
        "created_at": "2020-01-01T00:00:00.000+0000",
        "updated_at": "2020-01-01T00:00:00.000+0000",
    }
    values.update(overrides)
    return StudentLocation(**values)  # type: ignore[arg-type]


def location_payload(location: StudentLocation) -> dict[str, object]:
    """Render a location the way the backend sends it."""
    return {
        "objectId": location.object_id,
        "uniqueKey": location.unique_key,
        "firstName": location.first_name,
        "lastName": location.last_name,
        "mapString": location.map_string,
        "mediaURL": location.media_url,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "createdAt": location.created_at,
        "updatedAt": location.updated_at,
    }


@dataclass
class FakeOnTheMapClient(OnTheMapClient):
    """Fake API client with in-memory responses."""

    session_state: SessionState = field(default_factory=SessionState)
    locations: list[StudentLocation] = field(default_factory=list)
    receipt: LocationReceipt = field(
        default_factory=lambda: LocationReceipt(
            object_id="server-id", created_at="2024-05-01T12:00:00.000Z"
        )
    )
    post_error: Exception | None = None
    posted: list[NewLocationSubmission] = field(default_factory=list)
    logins: list[tuple[str, str]] = field(default_factory=list)

    async def create_session(self, email: str, password: str) -> Session:
        self.logins.append((email, password))
        session = Session(
            session_id="session-1", expiration="2030-01-01", user_id="user-1"
        )
        self.session_state.set(session)
        return session

    async def delete_session(self) -> None:
        self.session_state.clear()

    async def get_locations(
        self,
        limit: int | None = None,
        order: str | None = None,
        unique_key: str | None = None,
    ) -> list[StudentLocation]:
        return list(self.locations)

    async def post_location(
        self, submission: NewLocationSubmission
    ) -> LocationReceipt:
        self.posted.append(submission)
        if self.post_error is not None:
            raise self.post_error
        return self.receipt


@dataclass
class FakeGeocoder(Geocoder):
    """Fake geocoder resolving addresses from a lookup table."""

    known: dict[str, tuple[float, float]] = field(
        default_factory=lambda: {"Mountain View, CA": (37.386, -122.0838)}
    )
    queries: list[str] = field(default_factory=list)

    async def geocode(self, address: str) -> tuple[float, float]:
        self.queries.append(address)
        try:
            return self.known[address.strip()]
        except KeyError:
            raise AddressNotFoundError() from None


@dataclass
class RecordingRenderer:
    """Renderer that remembers every location set it was given."""

    frames: list[list[StudentLocation]] = field(default_factory=list)

    def render(self, locations: list[StudentLocation]) -> None:
        self.frames.append(locations)


@pytest.fixture(autouse=True)
def _reset_app_logger() -> Iterator[None]:
    logger = logging.getLogger("on_the_map")
    logger.propagate = True
    yield
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url="https://api.test/v1/",
        mapbox_token="mapbox-token",
        log_level="DEBUG",
    )


@pytest.fixture
def profile() -> StudentProfile:
    return StudentProfile(unique_key="abc", first_name="Grace", last_name="Hopper")


@pytest.fixture
def api_client() -> FakeOnTheMapClient:
    return FakeOnTheMapClient()


@pytest.fixture
def location_service(api_client: FakeOnTheMapClient) -> LocationService:
    return LocationService(
        client=api_client,
        store=LocationStore(),
        geocoder=FakeGeocoder(),
    )
