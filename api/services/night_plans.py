"""
Night plan content for events.

Plans are generated lazily on first request and cached on the event
document. Admin batch runs pre-generate plans for upcoming events; a
failure on one event is logged and never stops the batch.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any

from api.config import Settings, get_settings
from api.models.trips import BatchRunSummary, NightPlanResult
from api.services.content import ContentGenerator
from api.services.errors import ContentGenerationError
from api.services.event_store import EventStore

logger = logging.getLogger(__name__)

MARKDOWN_HEADING = "##"


class NightPlanService:
    """Serve, generate and batch-generate night plans."""

    def __init__(
        self,
        store: EventStore,
        generator: ContentGenerator,
        settings: Settings | None = None,
        today: Callable[[], date] = date.today,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.store = store
        self.generator = generator
        self.settings = settings or get_settings()
        self._today = today
        self._sleep = sleep

    async def get_or_generate(self, event_id: str) -> NightPlanResult | None:
        """Get the cached plan for an event, generating it if needed.

        Returns:
            NightPlanResult, or None if the event does not exist

        Raises:
            InvalidIdentifierError: If the id is malformed
        """
        event = await self.store.find_by_id(event_id)
        if event is None:
            return None

        if event.get("nightPlan"):
            logger.info("✅ [NightPlan] Returning cached plan for: %s", event.get("name"))
            return NightPlanResult(content=event["nightPlan"], source="cache")

        logger.info("🔥 [NightPlan] Generating plan for: %s", event.get("name"))
        content = await self.generator.night_plan(event)
        await self.store.set_night_plan(event["_id"], content)
        logger.info("💾 [NightPlan] Saved plan for: %s", event.get("name"))
        return NightPlanResult(content=content, source="generated")

    async def generate_and_save(self, event: dict[str, Any]) -> str:
        """Generate a plan for an event and store it.

        Raises:
            ContentGenerationError: If the content has no Markdown heading
        """
        content = await self.generator.night_plan(event)
        if MARKDOWN_HEADING not in content:
            raise ContentGenerationError(f"Invalid plan content for event {event.get('name')}")
        await self.store.set_night_plan(event["_id"], content)
        return content

    async def process(self, events: list[dict[str, Any]]) -> BatchRunSummary:
        """Generate plans for events in sequence, skipping failures."""
        summary = BatchRunSummary(processed=len(events))

        for index, event in enumerate(events):
            if index:
                await self._sleep(self.settings.night_plan_pause_seconds)
            try:
                await self.generate_and_save(event)
                summary.generated += 1
                logger.info("💾 [NightPlan] Batch saved plan for: %s", event.get("name"))
            except Exception as e:
                summary.failed += 1
                logger.error(
                    "[NightPlan] Failed for event %s (%s): %s",
                    event.get("_id"),
                    event.get("name"),
                    e,
                )

        return summary

    async def run_batch(self) -> BatchRunSummary:
        """Generate plans for the next batch of upcoming events without one."""
        events = await self.store.find_upcoming(
            self._today(),
            missing_night_plan=True,
            limit=self.settings.night_plan_batch_size,
        )
        if not events:
            logger.info("✅ [NightPlan] No events left without a plan")
            return BatchRunSummary(message="Process complete. No events left to generate.")

        logger.info("⚙️ [NightPlan] Processing batch of %d events", len(events))
        summary = await self.process(events)
        summary.message = (
            f"{summary.generated} plans generated in this batch "
            f"({summary.failed} failed). Run again to continue."
        )
        logger.info(summary.message)
        return summary

    async def prepare_regeneration(self) -> list[dict[str, Any]]:
        """Clear all stored plans and return the upcoming events to regenerate."""
        cleared = await self.store.clear_night_plans()
        logger.info("[NightPlan] Cleared %d existing plans", cleared)
        return await self.store.find_upcoming(self._today())

    async def regenerate(self, events: list[dict[str, Any]]) -> BatchRunSummary:
        """Regenerate plans for the given events; meant to run in the background."""
        logger.info("--- [NightPlan] Regenerating %d plans ---", len(events))
        summary = await self.process(events)
        logger.info(
            "--- [NightPlan] Regeneration finished: %d generated, %d failed ---",
            summary.generated,
            summary.failed,
        )
        return summary
