"""Login and logout workflow."""

import logging
from dataclasses import dataclass

from on_the_map.adapters.json_transport import RequestHandle
from on_the_map.adapters.udacity_client import OnTheMapClient
from on_the_map.domain.errors import InvalidCredentialsError
from on_the_map.domain.sessions import Session

_logger = logging.getLogger(__name__)


@dataclass
class AuthService:
    """Authenticates the user against the backend."""

    client: OnTheMapClient

    @property
    def current_session(self) -> Session | None:
        return self.client.session_state.current

    async def login(self, email: str, password: str) -> Session:
        """Create a session for the given credentials."""
        if not email.strip() or not password:
            raise InvalidCredentialsError("Email and password are required")
        session = await self.client.create_session(email.strip(), password)
        _logger.info("logged in as %s", session.user_id)
        return session

    def begin_login(self, email: str, password: str) -> RequestHandle[Session]:
        """Start a login that the caller may cancel."""
        return RequestHandle.start(self.login(email, password))

    async def logout(self) -> None:
        """Delete the current session."""
        await self.client.delete_session()
        _logger.info("logged out")
