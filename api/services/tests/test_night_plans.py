"""Tests for night plan generation and batch runs."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from api.config import Settings
from api.services.errors import ContentGenerationError, InvalidIdentifierError
from api.services.night_plans import NightPlanService

PLAN = "## Un Pellizco de Sabiduría\nTexto"


def _event(event_id: str, **overrides):
    event = {"_id": event_id, "name": f"Evento {event_id}", "artist": "Argentina"}
    event.update(overrides)
    return event


@pytest.fixture
def store():
    store = MagicMock()
    store.find_by_id = AsyncMock(return_value=None)
    store.set_night_plan = AsyncMock()
    store.clear_night_plans = AsyncMock(return_value=0)
    store.find_upcoming = AsyncMock(return_value=[])
    return store


@pytest.fixture
def generator():
    generator = MagicMock()
    generator.night_plan = AsyncMock(return_value=PLAN)
    return generator


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def service(store, generator, sleep):
    return NightPlanService(
        store,
        generator,
        settings=Settings(night_plan_batch_size=10, night_plan_pause_seconds=0.5),
        today=lambda: date(2024, 6, 1),
        sleep=sleep,
    )


class TestGetOrGenerate:
    """Tests for on-demand plans."""

    @pytest.mark.asyncio
    async def test_missing_event(self, service, generator):
        assert await service.get_or_generate("0" * 24) is None
        generator.night_plan.assert_not_called()

    @pytest.mark.asyncio
    async def test_cached_plan(self, service, store, generator):
        store.find_by_id.return_value = _event("a", nightPlan="## Guardado")

        result = await service.get_or_generate("a")

        assert result.source == "cache"
        assert result.content == "## Guardado"
        generator.night_plan.assert_not_called()

    @pytest.mark.asyncio
    async def test_generates_and_saves(self, service, store):
        store.find_by_id.return_value = _event("a")

        result = await service.get_or_generate("a")

        assert result.source == "generated"
        assert result.content == PLAN
        store.set_night_plan.assert_awaited_once_with("a", PLAN)

    @pytest.mark.asyncio
    async def test_invalid_id_propagates(self, service, store):
        store.find_by_id.side_effect = InvalidIdentifierError("bad")
        with pytest.raises(InvalidIdentifierError):
            await service.get_or_generate("bad")


class TestGenerateAndSave:
    """Tests for content validation before saving."""

    @pytest.mark.asyncio
    async def test_rejects_content_without_heading(self, service, store, generator):
        generator.night_plan.return_value = "Hola, aquí tienes tu plan"
        with pytest.raises(ContentGenerationError):
            await service.generate_and_save(_event("a"))
        store.set_night_plan.assert_not_called()


class TestBatch:
    """Tests for batch processing."""

    @pytest.mark.asyncio
    async def test_no_events_left(self, service, store):
        summary = await service.run_batch()
        assert summary.processed == 0
        assert "No events left" in summary.message

    @pytest.mark.asyncio
    async def test_batch_queries_upcoming_without_plan(self, service, store):
        await service.run_batch()
        store.find_upcoming.assert_awaited_once_with(
            date(2024, 6, 1), missing_night_plan=True, limit=10
        )

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_batch(self, service, store, generator, sleep):
        store.find_upcoming.return_value = [_event("a"), _event("b"), _event("c")]
        generator.night_plan.side_effect = [PLAN, RuntimeError("rate limited"), "sin título"]

        summary = await service.run_batch()

        assert summary.processed == 3
        assert summary.generated == 1
        assert summary.failed == 2
        store.set_night_plan.assert_awaited_once_with("a", PLAN)

    @pytest.mark.asyncio
    async def test_pauses_between_events(self, service, store, sleep):
        store.find_upcoming.return_value = [_event("a"), _event("b"), _event("c")]

        await service.run_batch()

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)

    @pytest.mark.asyncio
    async def test_regeneration_clears_then_lists(self, service, store):
        store.find_upcoming.return_value = [_event("a")]

        events = await service.prepare_regeneration()

        store.clear_night_plans.assert_awaited_once()
        store.find_upcoming.assert_awaited_once_with(date(2024, 6, 1))
        assert events == [_event("a")]

    @pytest.mark.asyncio
    async def test_regenerate(self, service, store):
        summary = await service.regenerate([_event("a"), _event("b")])
        assert summary.generated == 2
        assert store.set_night_plan.await_count == 2
