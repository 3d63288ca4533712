"""API endpoints for the Duende flamenco events finder."""

import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

from dotenv import load_dotenv
from fastapi import BackgroundTasks, Body, Depends, FastAPI, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import configure_logging, get_settings
from api.models import (
    Interaction,
    PushSubscription,
    SearchRequest,
    SearchType,
    SortOrder,
    TrackRequest,
    TripPlanRequest,
)
from api.services.analytics import AnalyticsStore, get_analytics_store
from api.services.content import ContentGenerator, get_content_generator
from api.services.database import close_connection_provider
from api.services.errors import InvalidGeolocationError, InvalidIdentifierError
from api.services.event_store import EventStore, get_event_store
from api.services.night_plans import NightPlanService
from api.services.pipeline import PipelineAssembler, eligibility_filter
from api.services.query_planner import EventQueryPlanner, parse_geolocation
from api.services.reference_data import get_reference_data
from api.services.site_store import SiteStore, get_site_store
from api.services.term_classifier import TermClassifier
from api.services.trips import TripPlanner

load_dotenv()

# Configure logging from settings (uses LOG_LEVEL env var)
configure_logging()
logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error."
NO_STORE = "no-store, max-age=0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the shared database client on shutdown."""
    yield
    await close_connection_provider()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


def _error(status_code: int, message: str, key: str = "error") -> JSONResponse:
    return JSONResponse(status_code=status_code, content={key: message})


def _parse_enum(enum_cls: Any, value: str | None) -> Any:
    """Lenient enum parsing: unknown values are treated as absent."""
    if not value:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None


def _parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


def _is_admin(secret: str | None) -> bool:
    expected = get_settings().admin_secret_key
    if not expected or not secret:
        return False
    return secrets.compare_digest(secret, expected)


def get_query_planner(store: EventStore = Depends(get_event_store)) -> EventQueryPlanner:
    """Build the search planner on top of the event store."""
    settings = get_settings()
    return EventQueryPlanner(
        executor=store,
        classifier=TermClassifier(
            get_reference_data(), loose_country_match=settings.loose_country_match
        ),
        assembler=PipelineAssembler(
            search_index=settings.search_index_name,
            fuzzy_max_edits=settings.fuzzy_max_edits,
        ),
    )


def get_night_plan_service(
    store: EventStore = Depends(get_event_store),
    generator: ContentGenerator = Depends(get_content_generator),
) -> NightPlanService:
    return NightPlanService(store, generator)


def get_trip_planner(
    store: EventStore = Depends(get_event_store),
    generator: ContentGenerator = Depends(get_content_generator),
) -> TripPlanner:
    return TripPlanner(store, generator)


@app.get("/")
def root():
    """Root endpoint."""
    return {"status": "ok"}


@app.get("/health")
def health():
    """Health check endpoint, with which backing services are configured."""
    settings = get_settings()
    return {
        "status": "healthy",
        "database": settings.has_database,
        "content_generation": settings.has_content_generation,
    }


@app.get("/api/events")
async def search_events(
    response: Response,
    search: str | None = None,
    artist: str | None = None,
    city: str | None = None,
    country: str | None = None,
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    timeframe: str | None = None,
    preferred_option: str | None = Query(default=None, alias="preferredOption"),
    lat: str | None = None,
    lon: str | None = None,
    radius: str | None = None,
    sort: str | None = None,
    order: str | None = None,
    featured: str | None = None,
    planner: EventQueryPlanner = Depends(get_query_planner),
):
    """Search upcoming events.

    Returns ``{events, isAmbiguous: false}``, or
    ``{isAmbiguous: true, searchTerm, options}`` when the term needs a
    ``preferredOption`` before it can be searched.
    """
    try:
        geo = parse_geolocation(lat, lon, radius)
    except InvalidGeolocationError as e:
        logger.info("[Search] Rejected geolocation lat=%s lon=%s radius=%s", lat, lon, radius)
        return _error(400, str(e), key="message")

    request = SearchRequest(
        search=search,
        artist=artist or None,
        city=city or None,
        country=country or None,
        date_from=date_from or None,
        date_to=date_to or None,
        timeframe=(timeframe or "").strip().lower() or None,
        preferred_option=_parse_enum(SearchType, preferred_option),
        geo=geo,
        sort=(sort or "").strip().lower() or None,
        order=_parse_enum(SortOrder, order),
        featured=_parse_flag(featured),
    )

    try:
        outcome = await planner.search(request)
        body = outcome.to_response()
    except Exception as e:
        logger.error("Error searching events: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)

    response.headers["Cache-Control"] = (
        f"s-maxage={get_settings().search_cache_seconds}, stale-while-revalidate"
    )
    return body


@app.get("/api/events/count")
async def count_events(response: Response, store: EventStore = Depends(get_event_store)):
    """Count events eligible for listing."""
    response.headers["Cache-Control"] = NO_STORE
    try:
        total = await store.count_matching(eligibility_filter(date.today()))
    except Exception as e:
        logger.error("Error counting events: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)
    return {"total": total}


@app.get("/api/config")
async def site_config(store: SiteStore = Depends(get_site_store)):
    """Front-end configuration (welcome modal and similar switches)."""
    try:
        config = await store.get_config()
    except Exception as e:
        logger.error("Error loading site config: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)
    return config


@app.post("/api/analytics/track", status_code=201)
async def track_interaction(
    request: TrackRequest,
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """Record a user interaction such as an event view."""
    if not request.is_complete:
        return _error(400, "Missing type, sessionId or details.")

    interaction = Interaction(
        type=request.type, session_id=request.session_id, details=request.details
    )
    try:
        await store.record(interaction)
    except Exception as e:
        logger.error("Error recording interaction: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)
    return {"msg": "Interaction recorded."}


@app.get("/api/analytics/summary/total-views")
async def total_views(store: AnalyticsStore = Depends(get_analytics_store)):
    """Total number of recorded event views."""
    try:
        count = await store.count_event_views()
    except Exception as e:
        logger.error("Error counting event views: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)
    return {"totalViews": count}


@app.get("/api/analytics/top-artists")
async def top_artists(
    response: Response,
    limit: int | None = Query(default=None, ge=1, le=50),
    store: AnalyticsStore = Depends(get_analytics_store),
):
    """Artists ranked by event views."""
    try:
        artists = await store.top_artists(limit or get_settings().top_artists_limit)
    except Exception as e:
        logger.error("Error ranking artists: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)

    response.headers["Cache-Control"] = "s-maxage=3600, stale-while-revalidate"
    return [artist.model_dump() for artist in artists]


@app.post("/api/subscribe", status_code=201)
async def subscribe(
    subscription: PushSubscription | None = Body(default=None),
    store: SiteStore = Depends(get_site_store),
):
    """Store a Web Push subscription."""
    if subscription is None or not subscription.endpoint:
        return _error(400, "Subscription object is missing or invalid.")

    try:
        await store.save_subscription(subscription)
    except Exception as e:
        logger.error("Error saving subscription: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)
    return {"success": True}


@app.get("/api/generate-night-plan")
async def generate_night_plan(
    response: Response,
    event_id: str | None = Query(default=None, alias="eventId"),
    service: NightPlanService = Depends(get_night_plan_service),
):
    """Get or generate the night plan for an event."""
    response.headers["Cache-Control"] = NO_STORE
    if not event_id:
        return _error(400, "Missing event id.")

    try:
        result = await service.get_or_generate(event_id)
    except InvalidIdentifierError:
        return _error(400, "Invalid event id.")
    except Exception as e:
        logger.error("Error generating night plan: %s", e, exc_info=True)
        return _error(500, "Error generating content.")

    if result is None:
        return _error(404, "Event not found.")
    return result.model_dump()


@app.post("/api/admin/run-batch-generator")
async def run_batch_generator(
    secret: str | None = None,
    service: NightPlanService = Depends(get_night_plan_service),
):
    """Generate night plans for the next batch of upcoming events."""
    if not _is_admin(secret):
        return _error(401, "Unauthorized")

    try:
        summary = await service.run_batch()
    except Exception as e:
        logger.error("Batch generation failed: %s", e, exc_info=True)
        return _error(500, "Batch generation failed.")
    return summary.model_dump()


@app.post("/api/admin/regenerate-all-plans", status_code=202)
async def regenerate_all_plans(
    background_tasks: BackgroundTasks,
    secret: str | None = None,
    service: NightPlanService = Depends(get_night_plan_service),
):
    """Clear every night plan and regenerate them in the background."""
    if not _is_admin(secret):
        return _error(401, "Unauthorized")

    try:
        events = await service.prepare_regeneration()
    except Exception as e:
        logger.error("Regeneration failed to start: %s", e, exc_info=True)
        return _error(500, "Regeneration failed to start.")

    background_tasks.add_task(service.regenerate, events)
    return {
        "message": f"Regenerating {len(events)} events. Check the logs for progress.",
        "count": len(events),
    }


@app.post("/api/trip-planner")
async def trip_planner(
    request: TripPlanRequest,
    planner: TripPlanner = Depends(get_trip_planner),
):
    """Build a flamenco itinerary for a destination and date range."""
    if not request.is_complete:
        return _error(400, "Missing destination, startDate or endDate.")

    try:
        text = await planner.plan(request)
    except Exception as e:
        logger.error("Error planning trip: %s", e, exc_info=True)
        return _error(500, INTERNAL_ERROR)
    return {"text": text}
