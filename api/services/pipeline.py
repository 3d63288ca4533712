"""
Aggregation pipeline assembly for event search.

Translates a classified SearchRequest into the ordered list of stages
run against the events collection. The executor is stage-order
sensitive, so stages are always emitted in this order:

1. ``$geoNear`` - only with valid geolocation, must be first
2. ``$search`` (+ score projection) - TEXT/ARTIST without geolocation
3. ``$match`` - eligibility, classification and explicit filters
4. ``$group`` + ``$replaceRoot`` - one event per (date, artist, name)
5. ``$sort`` - distance, relevance or date
"""

import re
from datetime import date, timedelta
from typing import Any

from api.models.search import Classification, GeoFilter, SearchRequest, SearchType, SortOrder

Stage = dict[str, Any]

PLACEHOLDER_VALUES: list[Any] = [None, "", "N/A"]
REQUIRED_FIELDS = ("name", "artist", "time", "venue")
DISTANCE_FIELD = "dist.calculated"
SCORE_FIELD = "searchScore"
WEEK_DAYS = 7
ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}\Z")


def is_iso_date(value: str | None) -> bool:
    """Check for a YYYY-MM-DD calendar date."""
    if not value:
        return False
    if not ISO_DATE_RE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def contains_pattern(value: str) -> dict[str, str]:
    """Case-insensitive substring match on literal user text."""
    return {"$regex": re.escape(value), "$options": "i"}


def exact_pattern(value: str) -> dict[str, str]:
    """Case-insensitive anchored full match on literal user text."""
    return {"$regex": f"^{re.escape(value)}$", "$options": "i"}


def eligibility_filter(today: date) -> dict[str, Any]:
    """Conditions every listed event must satisfy."""
    match: dict[str, Any] = {"date": {"$gte": today.isoformat()}}
    for name in REQUIRED_FIELDS:
        match[name] = {"$nin": list(PLACEHOLDER_VALUES)}
    return match


class PipelineAssembler:
    """Build aggregation stages for a search."""

    def __init__(self, search_index: str = "buscador", fuzzy_max_edits: int = 1):
        self.search_index = search_index
        self.fuzzy_max_edits = fuzzy_max_edits

    def assemble(
        self,
        request: SearchRequest,
        classification: Classification | None,
        today: date,
    ) -> list[Stage]:
        """Assemble the ordered pipeline.

        Args:
            request: Search request with validated geolocation
            classification: Classified term, None when there is no term or
                geolocation is active
            today: Server calendar date used for the eligibility bound

        Returns:
            Ordered aggregation stages
        """
        if classification is not None and classification.search_type == SearchType.AMBIGUOUS:
            raise ValueError("Ambiguous terms cannot be assembled into a pipeline")

        stages: list[Stage] = []
        geo_active = request.geo is not None
        text_active = False

        if request.geo is not None:
            stages.append(self._geo_stage(request.geo))
        elif classification is not None and classification.search_type in (
            SearchType.TEXT,
            SearchType.ARTIST,
        ):
            stages.extend(self._text_stages(classification))
            text_active = True

        stages.append({"$match": self._match_filter(request, classification, today)})
        stages.extend(self._dedup_stages())
        stages.append(self._sort_stage(request, geo_active=geo_active, text_active=text_active))
        return stages

    def _geo_stage(self, geo: GeoFilter) -> Stage:
        return {
            "$geoNear": {
                "near": {"type": "Point", "coordinates": [geo.longitude, geo.latitude]},
                "distanceField": DISTANCE_FIELD,
                "maxDistance": geo.radius_meters,
                "spherical": True,
            }
        }

    def _text_stages(self, classification: Classification) -> list[Stage]:
        path: str | dict[str, str]
        if classification.search_type == SearchType.ARTIST:
            path = "artist"
        else:
            path = {"wildcard": "*"}

        return [
            {
                "$search": {
                    "index": self.search_index,
                    "text": {
                        "query": classification.term,
                        "path": path,
                        "fuzzy": {"maxEdits": self.fuzzy_max_edits},
                    },
                }
            },
            # Relevance is only readable right after $search
            {"$addFields": {SCORE_FIELD: {"$meta": "searchScore"}}},
        ]

    def _match_filter(
        self,
        request: SearchRequest,
        classification: Classification | None,
        today: date,
    ) -> dict[str, Any]:
        match = eligibility_filter(today)
        clauses: list[dict[str, Any]] = []
        term = request.term

        if request.geo is not None and term:
            pattern = contains_pattern(term)
            clauses.append(
                {"$or": [{f: pattern} for f in ("name", "artist", "city", "venue")]}
            )
        elif classification is not None:
            if classification.search_type == SearchType.CITY:
                pattern = contains_pattern(classification.term)
                clauses.append({"$or": [{"city": pattern}, {"provincia": pattern}]})
            elif classification.search_type == SearchType.COUNTRY:
                clauses.append(self._country_clause(classification))

        if request.artist:
            clauses.append({"artist": contains_pattern(request.artist)})
        if request.city:
            pattern = contains_pattern(request.city)
            clauses.append({"$or": [{"city": pattern}, {"provincia": pattern}]})
        if request.country:
            clauses.append({"country": exact_pattern(request.country)})
        if request.featured:
            clauses.append({"featured": True})

        date_range = match["date"]
        if is_iso_date(request.date_from):
            # dateFrom narrows the default bound, never widens it
            date_range["$gte"] = max(request.date_from, date_range["$gte"])
        if is_iso_date(request.date_to):
            date_range["$lte"] = request.date_to
        elif request.timeframe == "week":
            date_range["$lte"] = (today + timedelta(days=WEEK_DAYS)).isoformat()

        if clauses:
            match["$and"] = clauses
        return match

    def _country_clause(self, classification: Classification) -> dict[str, Any]:
        names = classification.matched_values or [classification.term]
        if len(names) == 1:
            return {"country": exact_pattern(names[0])}
        return {"$or": [{"country": exact_pattern(name)} for name in names]}

    def _dedup_stages(self) -> list[Stage]:
        return [
            {
                "$group": {
                    "_id": {"date": "$date", "artist": "$artist", "name": "$name"},
                    "firstEvent": {"$first": "$$ROOT"},
                }
            },
            {"$replaceRoot": {"newRoot": "$firstEvent"}},
        ]

    def _sort_stage(self, request: SearchRequest, geo_active: bool, text_active: bool) -> Stage:
        # $group drops input order, so the primary order is re-applied here
        if geo_active:
            return {"$sort": {DISTANCE_FIELD: 1}}

        explicit_date = request.sort == "date" or request.order is not None
        if text_active and not explicit_date:
            return {"$sort": {SCORE_FIELD: -1, "date": 1}}

        direction = -1 if request.order == SortOrder.DESC else 1
        return {"$sort": {"date": direction}}
