"""Search request models for event discovery."""

from enum import Enum

from pydantic import BaseModel, Field


class SearchType(str, Enum):
    """How a free-text search term is interpreted."""

    AMBIGUOUS = "ambiguous"
    CITY = "city"
    COUNTRY = "country"
    ARTIST = "artist"
    TEXT = "text"


class SortOrder(str, Enum):
    """Requested direction for date sorting."""

    ASC = "asc"
    DESC = "desc"


class GeoFilter(BaseModel):
    """A validated search point with its radius."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    radius_km: float = Field(gt=0, description="Search radius in kilometers")

    @property
    def radius_meters(self) -> float:
        """Radius converted for the geospatial stage."""
        return self.radius_km * 1000


class SearchRequest(BaseModel):
    """Structured search request built from the endpoint query string."""

    search: str | None = Field(default=None, description="Free-text term")
    artist: str | None = None
    city: str | None = None
    country: str | None = None
    date_from: str | None = Field(default=None, description="ISO date lower bound")
    date_to: str | None = Field(default=None, description="ISO date upper bound")
    timeframe: str | None = Field(default=None, description="'week' limits to the next 7 days")
    preferred_option: SearchType | None = Field(
        default=None, description="Disambiguation choice from a previous ambiguous response"
    )
    geo: GeoFilter | None = None
    sort: str | None = Field(default=None, description="Explicit sort field ('date')")
    order: SortOrder | None = None
    featured: bool = False

    @property
    def term(self) -> str | None:
        """Trimmed search term, None when blank."""
        if self.search is None:
            return None
        stripped = self.search.strip()
        return stripped or None


class Classification(BaseModel):
    """Outcome of classifying a search term."""

    search_type: SearchType
    term: str
    options: list[str] = Field(
        default_factory=list, description="Candidate categories when ambiguous"
    )
    matched_values: list[str] = Field(
        default_factory=list,
        description="Canonical reference names the term matched by containment",
    )
