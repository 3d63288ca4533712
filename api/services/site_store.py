"""Site configuration and push subscription storage."""

import logging
from typing import Any

from api.models.analytics import PushSubscription
from api.services.database import MongoConnectionProvider, get_connection_provider

logger = logging.getLogger(__name__)

CONFIG_COLLECTION = "config"
MAIN_CONFIG_ID = "main_config"
SUBSCRIPTIONS_COLLECTION = "push_subscriptions"

DEFAULT_SITE_CONFIG: dict[str, Any] = {"welcomeModal_enabled": False}


class SiteStore:
    """Front-end configuration and Web Push subscriptions."""

    def __init__(self, provider: MongoConnectionProvider):
        self.provider = provider

    async def get_config(self) -> dict[str, Any]:
        """Get the main site config, or the defaults when none is stored."""
        db = await self.provider.get_database()
        config = await db[CONFIG_COLLECTION].find_one({"_id": MAIN_CONFIG_ID})
        if not config:
            return dict(DEFAULT_SITE_CONFIG)
        return config

    async def save_subscription(self, subscription: PushSubscription) -> None:
        """Insert or update a subscription keyed by its endpoint."""
        db = await self.provider.get_database()
        await db[SUBSCRIPTIONS_COLLECTION].update_one(
            {"endpoint": subscription.endpoint},
            {"$set": subscription.to_document()},
            upsert=True,
        )
        logger.info("[Subscribe] Saved subscription: %s", subscription.endpoint)


def get_site_store() -> SiteStore:
    """FastAPI dependency returning a site store on the shared connection."""
    return SiteStore(get_connection_provider())
