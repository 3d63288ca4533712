"""
Event query planner.

Runs one search request end to end:

    classify term -> assemble pipeline -> execute -> normalize

Everything before execution is pure and synchronous; the store call is
the only await. Geolocation is validated before anything else so a bad
request never reaches the store.
"""

import logging
import math
import time
from collections.abc import Callable
from datetime import date
from typing import Any, Protocol

from pydantic import ValidationError

from api.models.events import AmbiguityNotice, Event, EventResults, SearchOutcome
from api.models.search import Classification, GeoFilter, SearchRequest, SearchType
from api.services.errors import InvalidGeolocationError
from api.services.pipeline import PipelineAssembler
from api.services.term_classifier import TermClassifier

logger = logging.getLogger(__name__)

# Content publication fields that consumers expect on every event
STATUS_FIELDS = ("contentStatus", "blogPostUrl")


class QueryExecutor(Protocol):
    """Anything that can run an aggregation pipeline."""

    async def execute_pipeline(self, stages: list[dict[str, Any]]) -> list[dict[str, Any]]: ...


def parse_geolocation(
    lat: str | None, lon: str | None, radius: str | None
) -> GeoFilter | None:
    """Parse geolocation query parameters.

    Geolocation is only considered when all three values are present.

    Returns:
        GeoFilter, or None when geolocation was not requested

    Raises:
        InvalidGeolocationError: If any value is not a usable number
    """
    values = [lat, lon, radius]
    if not all(v is not None and str(v).strip() for v in values):
        return None

    try:
        latitude, longitude, radius_km = (float(str(v).strip()) for v in values)
    except ValueError as e:
        raise InvalidGeolocationError("Invalid geolocation parameters.") from e

    if not all(math.isfinite(v) for v in (latitude, longitude, radius_km)):
        raise InvalidGeolocationError("Invalid geolocation parameters.")

    try:
        return GeoFilter(latitude=latitude, longitude=longitude, radius_km=radius_km)
    except ValidationError as e:
        raise InvalidGeolocationError("Geolocation parameters are out of range.") from e


def normalize_event(document: dict[str, Any]) -> Event:
    """Ensure publication status fields exist, defaulting to None."""
    for name in STATUS_FIELDS:
        document.setdefault(name, None)
    return Event.model_validate(document)


class EventQueryPlanner:
    """Plan and execute event searches.

    Usage:
        planner = EventQueryPlanner(
            executor=get_event_store(),
            classifier=TermClassifier(get_reference_data()),
            assembler=PipelineAssembler(),
        )
        outcome = await planner.search(request)
    """

    def __init__(
        self,
        executor: QueryExecutor,
        classifier: TermClassifier,
        assembler: PipelineAssembler,
        today: Callable[[], date] = date.today,
    ):
        self.executor = executor
        self.classifier = classifier
        self.assembler = assembler
        self._today = today

    def classify(self, request: SearchRequest) -> Classification | None:
        """Classify the request's term, if any.

        With active geolocation only ambiguity is checked; the term is
        otherwise used as a plain substring filter.
        """
        term = request.term
        if term is None:
            return None

        classification = self.classifier.classify(term, request.preferred_option)
        if classification.search_type == SearchType.AMBIGUOUS:
            return classification
        if request.geo is not None:
            return None
        return classification

    def plan(self, request: SearchRequest) -> AmbiguityNotice | list[dict[str, Any]]:
        """Build the pipeline for a request, or an ambiguity notice."""
        classification = self.classify(request)
        if classification is not None and classification.search_type == SearchType.AMBIGUOUS:
            return AmbiguityNotice(search_term=request.search or "", options=classification.options)
        return self.assembler.assemble(request, classification, self._today())

    async def search(self, request: SearchRequest) -> SearchOutcome:
        """Run a search request.

        Returns:
            EventResults, or AmbiguityNotice when the term needs a choice
        """
        planned = self.plan(request)
        if isinstance(planned, AmbiguityNotice):
            logger.info(
                "🤔 [Search] Ambiguous term | term=%s options=%s",
                planned.search_term,
                planned.options,
            )
            return planned

        start = time.perf_counter()
        documents = await self.executor.execute_pipeline(planned)
        events = [normalize_event(doc) for doc in documents]
        logger.info(
            "🔍 [Search] Complete | term=%s geo=%s stages=%d results=%d duration=%.2fs",
            request.term,
            request.geo is not None,
            len(planned),
            len(events),
            time.perf_counter() - start,
        )
        return EventResults(events=events)
