"""Trip planner: an itinerary around the shows in a destination."""

import logging

from api.agents.trip_planner import NO_EVENTS_MESSAGE
from api.models.trips import TripPlanRequest
from api.services.content import ContentGenerator
from api.services.event_store import EventStore

logger = logging.getLogger(__name__)


class TripPlanner:
    """Find shows for a trip and ask the content service for an itinerary."""

    def __init__(self, store: EventStore, generator: ContentGenerator):
        self.store = store
        self.generator = generator

    async def plan(self, request: TripPlanRequest) -> str:
        """Build the itinerary text for a complete trip request.

        Raises:
            ValueError: If the destination or either date is missing
        """
        if not request.is_complete:
            raise ValueError("Trip request needs destination, startDate and endDate")

        events = await self.store.find_for_trip(
            request.destination, request.start_date, request.end_date
        )
        logger.info(
            "🧳 [Trip] destination=%s from=%s to=%s events=%d",
            request.destination,
            request.start_date,
            request.end_date,
            len(events),
        )
        if not events:
            return NO_EVENTS_MESSAGE

        return await self.generator.trip_plan(
            request.destination, request.start_date, request.end_date, events
        )
