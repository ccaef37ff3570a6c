"""Holder for the current authenticated session."""

import threading

from on_the_map.domain.sessions import Session


class SessionState:
    """Current session, replaced or cleared as a whole record."""

    def __init__(self, session: Session | None = None) -> None:
        self._lock = threading.Lock()
        self._session = session

    @property
    def current(self) -> Session | None:
        with self._lock:
            return self._session

    @property
    def is_active(self) -> bool:
        return self.current is not None

    def set(self, session: Session) -> None:
        """Replace the current session."""
        with self._lock:
            self._session = session

    def clear(self) -> None:
        """Forget the current session."""
        with self._lock:
            self._session = None
