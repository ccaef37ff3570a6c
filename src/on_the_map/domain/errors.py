"""Error taxonomy for On The Map operations."""


class OnTheMapError(Exception):
    """Base error whose message is safe to show to the user verbatim."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TransportError(OnTheMapError):
    """No response was received, or the request was cancelled."""

    def __init__(self, message: str, cancelled: bool = False) -> None:
        super().__init__(message)
        self.cancelled = cancelled


class SerializationError(OnTheMapError):
    """An outgoing request body could not be encoded as JSON."""


class DecodeError(OnTheMapError):
    """A response body did not match the expected shape."""


class ApiError(OnTheMapError):
    """A well-formed error response returned by the backend."""

    def __init__(self, http_status_code: int, status_code: int, message: str) -> None:
        super().__init__(message)
        self.http_status_code = http_status_code
        self.status_code = status_code

    def __repr__(self) -> str:
        return (
            f"ApiError(http_status_code={self.http_status_code}, "
            f"status_code={self.status_code}, message={self.message!r})"
        )


class MissingResultsError(OnTheMapError):
    """The locations response carried no ``results`` key at all."""

    def __init__(
        self, message: str = "couldn't get results from student locations"
    ) -> None:
        super().__init__(message)


class AddressNotFoundError(OnTheMapError):
    """A typed address could not be resolved to coordinates."""

    def __init__(
        self, message: str = "The address you entered could not be found"
    ) -> None:
        super().__init__(message)


class InvalidCredentialsError(OnTheMapError):
    """Login input was rejected before contacting the backend."""
