"""
MongoDB connection provider.

Creates one AsyncMongoClient per process on first use and reuses it
across requests. The FastAPI lifespan calls ``close()`` on shutdown.
Components receive the provider (or a store built on it) as a
constructor dependency rather than reaching for module state.
"""

import asyncio
import logging

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from api.config import Settings, get_settings
from api.services.errors import DatabaseNotConfiguredError

logger = logging.getLogger(__name__)


class MongoConnectionProvider:
    """Lazily connects to MongoDB and hands out database handles.

    Usage:
        provider = MongoConnectionProvider(settings)
        db = await provider.get_database()
        events = db["events"]
        ...
        await provider.close()
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._client: AsyncMongoClient | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def get_client(self) -> AsyncMongoClient:
        """Get or create the client.

        Raises:
            DatabaseNotConfiguredError: If MONGO_URI is not set
        """
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                if not self.settings.mongo_uri:
                    raise DatabaseNotConfiguredError("MONGO_URI not configured")
                logger.info("🔌 [Database] Creating MongoDB client")
                self._client = AsyncMongoClient(self.settings.mongo_uri)
        return self._client

    async def get_database(self, name: str | None = None) -> AsyncDatabase:
        """Get a database handle, the events database by default."""
        client = await self.get_client()
        return client[name or self.settings.events_db_name]

    async def get_analytics_database(self) -> AsyncDatabase:
        """Get the database holding user interactions."""
        return await self.get_database(self.settings.analytics_db_name)

    async def close(self) -> None:
        """Close the client if one was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("[Database] MongoDB client closed")


# Process-wide provider
_provider: MongoConnectionProvider | None = None


def get_connection_provider() -> MongoConnectionProvider:
    """Get the process-wide connection provider."""
    global _provider
    if _provider is None:
        _provider = MongoConnectionProvider()
    return _provider


async def close_connection_provider() -> None:
    """Close and forget the process-wide provider."""
    global _provider
    if _provider is not None:
        await _provider.close()
        _provider = None
