"""
Services for the Duende events API.

Event search
------------
A search runs through three pure steps and one query::

    from api.services import (
        EventQueryPlanner,
        PipelineAssembler,
        TermClassifier,
        get_event_store,
        get_reference_data,
    )

    planner = EventQueryPlanner(
        executor=get_event_store(),
        classifier=TermClassifier(get_reference_data()),
        assembler=PipelineAssembler(),
    )
    outcome = await planner.search(request)

``TermClassifier`` decides how to read the free-text term,
``PipelineAssembler`` turns the request into ordered aggregation
stages and ``EventStore`` runs them.

Available Services
------------------
- MongoConnectionProvider: Shared MongoDB client with explicit close
- EventStore: Events collection (search executor, counts, night plans)
- AnalyticsStore: Interaction tracking and view summaries
- SiteStore: Site config and push subscriptions
- ContentGenerator: Night plans and trip itineraries via LLM agents
- NightPlanService: Cached and batch night plan generation
- TripPlanner: Itineraries around events in a destination
"""

from .analytics import AnalyticsStore, get_analytics_store
from .content import ContentGenerator, get_content_generator
from .database import (
    MongoConnectionProvider,
    close_connection_provider,
    get_connection_provider,
)
from .errors import (
    ContentGenerationError,
    DatabaseNotConfiguredError,
    InvalidGeolocationError,
    InvalidIdentifierError,
)
from .event_store import EventStore, get_event_store
from .night_plans import NightPlanService
from .pipeline import PipelineAssembler, eligibility_filter
from .query_planner import EventQueryPlanner, parse_geolocation
from .reference_data import ReferenceData, get_reference_data, load_reference_data
from .site_store import SiteStore, get_site_store
from .term_classifier import TermClassifier
from .trips import TripPlanner

__all__ = [
    "AnalyticsStore",
    "get_analytics_store",
    "ContentGenerator",
    "get_content_generator",
    "MongoConnectionProvider",
    "close_connection_provider",
    "get_connection_provider",
    "ContentGenerationError",
    "DatabaseNotConfiguredError",
    "InvalidGeolocationError",
    "InvalidIdentifierError",
    "EventStore",
    "get_event_store",
    "NightPlanService",
    "PipelineAssembler",
    "eligibility_filter",
    "EventQueryPlanner",
    "parse_geolocation",
    "ReferenceData",
    "get_reference_data",
    "load_reference_data",
    "SiteStore",
    "get_site_store",
    "TermClassifier",
    "TripPlanner",
]
