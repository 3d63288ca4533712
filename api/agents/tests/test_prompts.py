"""Tests for agent prompt integrity."""

from api.agents.night_plan import (
    NIGHT_PLAN_AGENT_INSTRUCTIONS,
    build_night_plan_prompt,
    night_plan_agent,
)
from api.agents.trip_planner import (
    TRIP_PLANNER_AGENT_INSTRUCTIONS,
    build_trip_prompt,
    format_event_day,
    trip_planner_agent,
)


class TestNightPlanAgentPrompt:
    """Test night plan agent prompt content."""

    def test_prompt_requires_markdown_headings(self):
        """Plans must start with a Markdown heading."""
        assert "##" in NIGHT_PLAN_AGENT_INSTRUCTIONS
        assert "DIRECTAMENTE" in NIGHT_PLAN_AGENT_INSTRUCTIONS

    def test_prompt_prohibits_fabrication(self):
        assert "No inventes" in NIGHT_PLAN_AGENT_INSTRUCTIONS

    def test_agent_has_correct_model(self):
        assert night_plan_agent.model == "gpt-4o-mini"

    def test_event_prompt(self):
        prompt = build_night_plan_prompt(
            {"name": "Gala", "artist": "Farruquito", "venue": "Tablao", "city": "Sevilla"}
        )
        assert "- Artista: Farruquito" in prompt
        assert "- Lugar: Tablao, Sevilla" in prompt


class TestTripPlannerAgentPrompt:
    """Test trip planner agent prompt content."""

    def test_prompt_includes_glossary_section(self):
        assert "Glosario Flamenco para el Viajero" in TRIP_PLANNER_AGENT_INSTRUCTIONS

    def test_prompt_prohibits_fabrication(self):
        assert "Nunca inventes" in TRIP_PLANNER_AGENT_INSTRUCTIONS

    def test_agent_has_correct_model(self):
        assert trip_planner_agent.model == "gpt-4o-mini"

    def test_format_event_day(self):
        """2024-06-15 was a Saturday."""
        assert format_event_day("2024-06-15") == "sábado 15"

    def test_format_event_day_passthrough(self):
        assert format_event_day("pronto") == "pronto"

    def test_trip_prompt_lists_events(self):
        prompt = build_trip_prompt(
            "Jerez",
            "2024-06-14",
            "2024-06-16",
            [{"date": "2024-06-14", "name": "Gala", "artist": "Sara Baras", "venue": "Villamarta"}],
        )
        assert "visitar Jerez desde el 2024-06-14 hasta el 2024-06-16" in prompt
        assert '- viernes 14: "Gala" con Sara Baras en Villamarta.' in prompt
