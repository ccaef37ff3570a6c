"""Domain models for authenticated sessions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """Server-issued session bundle identifying an authenticated user."""

    session_id: str
    expiration: str
    user_id: str


@dataclass(frozen=True)
class Credentials:
    """Login input, only used to build a request payload."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, password='***')"
