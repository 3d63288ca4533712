"""Analytics and site models."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TrackRequest(BaseModel):
    """Body of an interaction tracking call."""

    type: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")
    details: dict[str, Any] | None = None

    model_config = ConfigDict(populate_by_name=True)

    @property
    def is_complete(self) -> bool:
        return bool(self.type and self.session_id and self.details)


class Interaction(BaseModel):
    """A user interaction stored in the analytics database."""

    type: str
    session_id: str = Field(alias="sessionId")
    details: dict[str, Any]
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ArtistViews(BaseModel):
    """Total event views for one artist."""

    artist: str
    views: int


class PushSubscription(BaseModel):
    """A Web Push subscription as sent by the browser."""

    endpoint: str | None = None
    expiration_time: int | None = Field(default=None, alias="expirationTime")
    keys: dict[str, str] | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
