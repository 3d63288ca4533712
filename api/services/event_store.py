"""
Event collection access.

EventStore is the query executor for search: it runs assembled
aggregation pipelines and the handful of direct queries used by the
count, night plan and trip planner endpoints.
"""

import logging
import time
from datetime import date
from typing import Any

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection

from api.services.database import MongoConnectionProvider, get_connection_provider
from api.services.errors import InvalidIdentifierError
from api.services.pipeline import PLACEHOLDER_VALUES, REQUIRED_FIELDS, contains_pattern

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"


def parse_event_id(event_id: str) -> ObjectId:
    """Convert an event id string to an ObjectId.

    Raises:
        InvalidIdentifierError: If the id is not a valid ObjectId
    """
    if not ObjectId.is_valid(event_id):
        raise InvalidIdentifierError(f"Invalid event id: {event_id!r}")
    return ObjectId(event_id)


class EventStore:
    """Reads and updates the events collection."""

    def __init__(self, provider: MongoConnectionProvider):
        self.provider = provider

    async def _collection(self) -> AsyncCollection:
        db = await self.provider.get_database()
        return db[EVENTS_COLLECTION]

    async def execute_pipeline(self, stages: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Run an aggregation pipeline and return all matching documents."""
        collection = await self._collection()
        start = time.perf_counter()
        cursor = await collection.aggregate(stages)
        documents = await cursor.to_list()
        logger.debug(
            "[EventStore] Pipeline complete | stages=%d results=%d duration=%.3fs",
            len(stages),
            len(documents),
            time.perf_counter() - start,
        )
        return documents

    async def count_matching(self, filter: dict[str, Any]) -> int:
        """Count events matching a filter."""
        collection = await self._collection()
        return await collection.count_documents(filter)

    async def find_by_id(self, event_id: str) -> dict[str, Any] | None:
        """Get a single event by id.

        Raises:
            InvalidIdentifierError: If the id is malformed
        """
        oid = parse_event_id(event_id)
        collection = await self._collection()
        return await collection.find_one({"_id": oid})

    async def set_night_plan(self, event_id: Any, content: str) -> None:
        """Store generated night plan content on an event."""
        oid = event_id if isinstance(event_id, ObjectId) else parse_event_id(event_id)
        collection = await self._collection()
        await collection.update_one({"_id": oid}, {"$set": {"nightPlan": content}})

    async def clear_night_plans(self) -> int:
        """Remove every stored night plan.

        Returns:
            Number of events modified
        """
        collection = await self._collection()
        result = await collection.update_many(
            {"nightPlan": {"$exists": True}},
            {"$unset": {"nightPlan": ""}},
        )
        return result.modified_count

    async def find_upcoming(
        self,
        today: date,
        missing_night_plan: bool = False,
        limit: int = 0,
    ) -> list[dict[str, Any]]:
        """Get events dated today or later.

        Args:
            today: Lower date bound
            missing_night_plan: Only events without generated content
            limit: Maximum number of events, 0 for no limit
        """
        query: dict[str, Any] = {"date": {"$gte": today.isoformat()}}
        if missing_night_plan:
            query["nightPlan"] = {"$exists": False}

        collection = await self._collection()
        cursor = collection.find(query)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list()

    async def find_for_trip(
        self, destination: str, start_date: str, end_date: str
    ) -> list[dict[str, Any]]:
        """Get listable events in a destination within a date range, by date."""
        query: dict[str, Any] = {
            "city": contains_pattern(destination),
            "date": {"$gte": start_date, "$lte": end_date},
        }
        for name in REQUIRED_FIELDS:
            query[name] = {"$nin": list(PLACEHOLDER_VALUES)}

        collection = await self._collection()
        cursor = collection.find(query).sort("date", 1)
        return await cursor.to_list()


def get_event_store() -> EventStore:
    """FastAPI dependency returning a store on the shared connection."""
    return EventStore(get_connection_provider())
