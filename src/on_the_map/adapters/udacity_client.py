"""On The Map API client."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from on_the_map.adapters.json_transport import DEFAULT_HEADERS, JsonTransport
from on_the_map.adapters.udacity_models import (
    DeleteSessionResponse,
    LocationReceiptPayload,
    LocationsResponse,
    NewLocationPayload,
    SessionResponse,
)
from on_the_map.domain.errors import MissingResultsError
from on_the_map.domain.locations import (
    LocationReceipt,
    NewLocationSubmission,
    StudentLocation,
)
from on_the_map.domain.sessions import Credentials, Session
from on_the_map.services.session_state import SessionState

DEFAULT_BASE_URL = "https://onthemap-api.udacity.com/v1/"
DEFAULT_SESSION_PROVIDER = "udacity"
SECURITY_BANNER_LENGTH = 5
_XSRF_COOKIE = "XSRF-TOKEN"

_logger = logging.getLogger(__name__)


class OnTheMapClient(Protocol):
    """Interface for On The Map backend interactions."""

    session_state: SessionState

    async def create_session(self, email: str, password: str) -> Session:
        """Log in and record the resulting session."""

    async def delete_session(self) -> None:
        """Log out and clear the recorded session."""

    async def get_locations(
        self,
        limit: int | None = None,
        order: str | None = None,
        unique_key: str | None = None,
    ) -> list[StudentLocation]:
        """Return the shared list of student locations."""

    async def post_location(
        self, submission: NewLocationSubmission
    ) -> LocationReceipt:
        """Post a new student location and return the server-assigned fields."""


@dataclass
class HttpxOnTheMapClient(OnTheMapClient):
    """On The Map client built on the JSON transport."""

    transport: JsonTransport
    base_url: str = DEFAULT_BASE_URL
    session_provider: str = DEFAULT_SESSION_PROVIDER
    session_state: SessionState = field(default_factory=SessionState)

    @classmethod
    def create(
        cls,
        base_url: str = DEFAULT_BASE_URL,
        session_provider: str = DEFAULT_SESSION_PROVIDER,
        timeout: float | None = None,
    ) -> "HttpxOnTheMapClient":
        """Create a client with a managed httpx session."""
        return cls(
            transport=JsonTransport.create(timeout=timeout),
            base_url=base_url,
            session_provider=session_provider,
        )

    @property
    def session_url(self) -> str:
        return _endpoint(self.base_url, "session")

    @property
    def locations_url(self) -> str:
        return _endpoint(self.base_url, "StudentLocation")

    async def create_session(self, email: str, password: str) -> Session:
        """Log in with an email and password."""
        credentials = Credentials(email=email, password=password)
        response = await self.transport.request(
            self.session_url,
            "POST",
            SessionResponse,
            body=_credentials_envelope(self.session_provider, credentials),
            strip_prefix=SECURITY_BANNER_LENGTH,
        )
        session = Session(
            session_id=response.session.id,
            expiration=response.session.expiration,
            user_id=response.account.key,
        )
        self.session_state.set(session)
        _logger.debug("set session user id to %s", session.user_id)
        return session

    async def delete_session(self) -> None:
        """Log out of the current session."""
        headers = dict(DEFAULT_HEADERS)
        xsrf_token = self.transport.http_client.cookies.get(_XSRF_COOKIE)
        if xsrf_token:
            headers["X-XSRF-TOKEN"] = xsrf_token
        response = await self.transport.request(
            self.session_url,
            "DELETE",
            DeleteSessionResponse,
            headers=headers,
            strip_prefix=SECURITY_BANNER_LENGTH,
        )
        _logger.debug("logged out of session %s", response.session.id)
        self.session_state.clear()

    async def get_locations(
        self,
        limit: int | None = None,
        order: str | None = None,
        unique_key: str | None = None,
    ) -> list[StudentLocation]:
        """Fetch student locations.

        A null ``results`` value is treated as no locations; a missing key is
        an error.
        """
        params: dict[str, str | int] = {}
        if limit is not None:
            params["limit"] = limit
        if order is not None:
            params["order"] = order
        if unique_key is not None:
            params["uniqueKey"] = unique_key
        response = await self.transport.request(
            self.locations_url,
            "GET",
            LocationsResponse,
            params=params or None,
        )
        if "results" not in response.model_fields_set:
            _logger.error("couldn't get student locations")
            raise MissingResultsError()
        if response.results is None:
            _logger.warning("student locations was null")
            return []
        return [payload.to_domain() for payload in response.results]

    async def post_location(
        self, submission: NewLocationSubmission
    ) -> LocationReceipt:
        """Post a new student location."""
        response = await self.transport.request(
            self.locations_url,
            "POST",
            LocationReceiptPayload,
            body=NewLocationPayload.from_domain(submission),
        )
        _logger.debug("posted location %s", response.object_id)
        return response.to_domain()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.transport.close()


def _endpoint(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path}"


def _credentials_envelope(
    provider: str, credentials: Credentials
) -> dict[str, dict[str, str]]:
    """Wrap credentials in the provider-keyed object the backend expects."""
    return {
        provider: {
            "username": credentials.email,
            "password": credentials.password,
        }
    }
