"""Pydantic models for On The Map API payloads."""

from pydantic import BaseModel, ConfigDict, Field

from on_the_map.domain.locations import (
    LocationReceipt,
    NewLocationSubmission,
    StudentLocation,
)


class ErrorPayload(BaseModel):
    """Error body returned for any non-success status."""

    status: int
    error: str


class AccountPayload(BaseModel):
    """Account block of a session response."""

    registered: bool
    key: str


class SessionPayload(BaseModel):
    """Session block of a session response."""

    id: str
    expiration: str


class SessionResponse(BaseModel):
    """Response to creating a session."""

    account: AccountPayload
    session: SessionPayload


class DeleteSessionResponse(BaseModel):
    """Response to deleting a session."""

    session: SessionPayload


class LocationPayload(BaseModel):
    """A student location as it appears on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    object_id: str = Field(alias="objectId")
    unique_key: str = Field(alias="uniqueKey")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    map_string: str = Field(alias="mapString")
    media_url: str = Field(alias="mediaURL")
    latitude: float
    longitude: float
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    def to_domain(self) -> StudentLocation:
        return StudentLocation(**self.model_dump())


class LocationsResponse(BaseModel):
    """Response to listing student locations.

    ``results`` distinguishes an explicit null from a missing key through
    ``model_fields_set``.
    """

    results: list[LocationPayload] | None = None


class NewLocationPayload(BaseModel):
    """Body for posting a new student location."""

    model_config = ConfigDict(populate_by_name=True)

    unique_key: str = Field(alias="uniqueKey")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    map_string: str = Field(alias="mapString")
    media_url: str = Field(alias="mediaURL")
    latitude: float
    longitude: float

    @classmethod
    def from_domain(cls, submission: NewLocationSubmission) -> "NewLocationPayload":
        return cls(
            unique_key=submission.unique_key,
            first_name=submission.first_name,
            last_name=submission.last_name,
            map_string=submission.map_string,
            media_url=submission.media_url,
            latitude=submission.latitude,
            longitude=submission.longitude,
        )


class LocationReceiptPayload(BaseModel):
    """Response to posting a new student location."""

    created_at: str = Field(alias="createdAt")
    object_id: str = Field(alias="objectId")

    def to_domain(self) -> LocationReceipt:
        return LocationReceipt(object_id=self.object_id, created_at=self.created_at)
