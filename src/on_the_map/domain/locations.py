"""Domain models for student locations."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


@dataclass(frozen=True)
class StudentProfile:
    """Identity stamped onto locations the user submits."""

    unique_key: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class LocationReceipt:
    """Server-assigned fields returned after posting a location."""

    object_id: str
    created_at: str


@dataclass(frozen=True)
class NewLocationSubmission:
    """A location as sent to the backend, without server-assigned fields."""

    unique_key: str
    first_name: str
    last_name: str
    map_string: str
    media_url: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class StudentLocation:
    """A student's self-reported location and shared link.

    Equality is structural: two locations are the same entry only when every
    field matches, identifiers included.
    """

    object_id: str
    unique_key: str
    first_name: str
    last_name: str
    map_string: str
    media_url: str
    latitude: float
    longitude: float
    created_at: str
    updated_at: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def coordinate(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    @classmethod
    def pending(
        cls, submission: NewLocationSubmission, now: datetime | None = None
    ) -> "StudentLocation":
        """Build a local entry for a submission the server hasn't confirmed."""
        stamp = format_timestamp(now or datetime.now(tz=UTC))
        return cls(
            object_id="",
            unique_key=submission.unique_key,
            first_name=submission.first_name,
            last_name=submission.last_name,
            map_string=submission.map_string,
            media_url=submission.media_url,
            latitude=submission.latitude,
            longitude=submission.longitude,
            created_at=stamp,
            updated_at=stamp,
        )

    def with_receipt(self, receipt: LocationReceipt) -> "StudentLocation":
        """Return a copy carrying the server-assigned id and timestamps."""
        return replace(
            self,
            object_id=receipt.object_id,
            created_at=receipt.created_at,
            updated_at=receipt.created_at,
        )


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``yyyy-MM-ddTHH:mm:ss.SSS+0000`` in UTC."""
    moment = value.astimezone(UTC)
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{millis:03d}+0000"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a backend timestamp, returning None when it is malformed."""
    if not value:
        return None
    try:
        return datetime.strptime(value, TIMESTAMP_FORMAT)
    except ValueError:
        return None
