"""
Analytics storage: interaction tracking and view summaries.

Interactions live in the analytics database, separate from events.
Top artists are computed from event views joined to the per-event
metrics collection kept alongside them.
"""

import logging
from typing import Any

from api.models.analytics import ArtistViews, Interaction
from api.services.database import MongoConnectionProvider, get_connection_provider

logger = logging.getLogger(__name__)

INTERACTIONS_COLLECTION = "interactions"
EVENT_METRICS_COLLECTION = "eventmetrics"
EVENT_VIEW = "eventView"


def top_artists_pipeline(limit: int) -> list[dict[str, Any]]:
    """Aggregation over interactions ranking artists by event views."""
    return [
        {"$match": {"type": EVENT_VIEW, "details.eventId": {"$exists": True}}},
        {"$group": {"_id": "$details.eventId", "views": {"$sum": 1}}},
        {
            "$lookup": {
                "from": EVENT_METRICS_COLLECTION,
                "localField": "_id",
                "foreignField": "eventId",
                "as": "metricDetails",
            }
        },
        {"$unwind": "$metricDetails"},
        {"$match": {"metricDetails.artist": {"$nin": [None, ""]}}},
        {"$group": {"_id": "$metricDetails.artist", "totalViews": {"$sum": "$views"}}},
        {"$sort": {"totalViews": -1, "_id": 1}},
        {"$limit": limit},
        {"$project": {"_id": 0, "artist": "$_id", "views": "$totalViews"}},
    ]


class AnalyticsStore:
    """Records interactions and summarizes views."""

    def __init__(self, provider: MongoConnectionProvider):
        self.provider = provider

    async def _interactions(self):
        db = await self.provider.get_analytics_database()
        return db[INTERACTIONS_COLLECTION]

    async def record(self, interaction: Interaction) -> None:
        """Store one interaction."""
        collection = await self._interactions()
        await collection.insert_one(interaction.to_document())
        logger.debug(
            "[Analytics] Recorded | type=%s session=%s",
            interaction.type,
            interaction.session_id,
        )

    async def count_event_views(self) -> int:
        """Count every recorded event view."""
        collection = await self._interactions()
        return await collection.count_documents({"type": EVENT_VIEW})

    async def top_artists(self, limit: int) -> list[ArtistViews]:
        """Rank artists by total event views."""
        collection = await self._interactions()
        cursor = await collection.aggregate(top_artists_pipeline(limit))
        rows = await cursor.to_list()
        return [ArtistViews.model_validate(row) for row in rows]


def get_analytics_store() -> AnalyticsStore:
    """FastAPI dependency returning an analytics store on the shared connection."""
    return AnalyticsStore(get_connection_provider())
