"""LLM agents for generated event content."""

from .night_plan import night_plan_agent
from .trip_planner import trip_planner_agent

__all__ = ["night_plan_agent", "trip_planner_agent"]
