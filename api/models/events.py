"""Event models and search outcomes."""

from typing import Any, Literal

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Event(BaseModel):
    """A flamenco performance listing as stored in the events collection."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(alias="_id")
    name: str | None = None
    artist: str | None = None
    date: str | None = Field(default=None, description="ISO 8601 date (YYYY-MM-DD)")
    time: str | None = None
    venue: str | None = None
    city: str | None = None
    province: str | None = Field(default=None, alias="provincia")
    country: str | None = None
    night_plan: str | None = Field(default=None, alias="nightPlan")
    content_status: str | None = Field(default=None, alias="contentStatus")
    blog_post_url: str | None = Field(default=None, alias="blogPostUrl")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    def to_response(self) -> dict[str, Any]:
        """Serialize with the stored field names."""
        return self.model_dump(by_alias=True, mode="json")


class EventResults(BaseModel):
    """Ordered, deduplicated events matching a search."""

    events: list[Event]
    is_ambiguous: Literal[False] = False

    def to_response(self) -> dict[str, Any]:
        return {
            "events": [event.to_response() for event in self.events],
            "isAmbiguous": False,
        }


class AmbiguityNotice(BaseModel):
    """A term that needs disambiguation before searching."""

    search_term: str
    options: list[str]
    is_ambiguous: Literal[True] = True

    def to_response(self) -> dict[str, Any]:
        return {
            "isAmbiguous": True,
            "searchTerm": self.search_term,
            "options": self.options,
        }


SearchOutcome = EventResults | AmbiguityNotice
