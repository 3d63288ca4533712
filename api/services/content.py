"""
Content generation service.

Wraps the night plan and trip planner agents behind a small async
interface so endpoints and batch jobs never touch the Agents SDK
directly.
"""

import logging
import time
from typing import Any

from agents import Agent, Runner, set_default_openai_key

from api.agents.night_plan import build_night_plan_prompt, night_plan_agent
from api.agents.trip_planner import build_trip_prompt, trip_planner_agent
from api.config import Settings, get_settings
from api.services.errors import ContentGenerationError

logger = logging.getLogger(__name__)


class ContentGenerator:
    """Generate night plans and trip itineraries with LLM agents."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        if self.settings.openai_api_key:
            set_default_openai_key(self.settings.openai_api_key)
        self._night_plan_agent = night_plan_agent.clone(model=self.settings.content_model)
        self._trip_planner_agent = trip_planner_agent.clone(model=self.settings.content_model)

    async def _run(self, agent: Agent, prompt: str) -> str:
        start = time.perf_counter()
        result = await Runner.run(agent, prompt)
        text = str(result.final_output or "").strip()
        logger.debug(
            "[Content] Agent complete | agent=%s duration=%.2fs length=%d",
            agent.name,
            time.perf_counter() - start,
            len(text),
        )
        if not text:
            raise ContentGenerationError(f"{agent.name} returned no content")
        return text

    async def night_plan(self, event: dict[str, Any]) -> str:
        """Write a night plan for one event."""
        return await self._run(self._night_plan_agent, build_night_plan_prompt(event))

    async def trip_plan(
        self,
        destination: str,
        start_date: str,
        end_date: str,
        events: list[dict[str, Any]],
    ) -> str:
        """Write an itinerary around the given events."""
        prompt = build_trip_prompt(destination, start_date, end_date, events)
        return await self._run(self._trip_planner_agent, prompt)


_generator: ContentGenerator | None = None


def get_content_generator() -> ContentGenerator:
    """Get the process-wide content generator."""
    global _generator
    if _generator is None:
        _generator = ContentGenerator()
    return _generator
