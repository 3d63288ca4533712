"""API data models for the Duende events API."""

from .analytics import ArtistViews, Interaction, PushSubscription, TrackRequest
from .events import AmbiguityNotice, Event, EventResults, SearchOutcome
from .search import Classification, GeoFilter, SearchRequest, SearchType, SortOrder
from .trips import BatchRunSummary, NightPlanResult, TripPlanRequest

__all__ = [
    "AmbiguityNotice",
    "ArtistViews",
    "BatchRunSummary",
    "Classification",
    "Event",
    "EventResults",
    "GeoFilter",
    "Interaction",
    "NightPlanResult",
    "PushSubscription",
    "SearchOutcome",
    "SearchRequest",
    "SearchType",
    "SortOrder",
    "TrackRequest",
    "TripPlanRequest",
]
