"""Redis-backed cross-references from Trello cards to Discord messages.

Each card gets one Redis set holding the ids of the Discord messages that
were sent for it. The archival branch reads the set to delete those
messages again.
"""

import logging
from typing import Iterable, List, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class CrossReferenceStore:
    """Stores card id -> Discord message id links."""

    key_prefix = "trellocord:xref"

    def __init__(self, redis_url: Optional[str] = None, client: Optional[redis.Redis] = None):
        """Initialize the store with a Redis connection."""
        self.redis = client or redis.from_url(redis_url or "redis://localhost:6379", decode_responses=True)

    def _key(self, card_id: str) -> str:
        return f"{self.key_prefix}:{card_id}"

    async def put(self, card_id: str, message_id: str) -> None:
        """Record that a Discord message was sent for a card."""
        await self.redis.sadd(self._key(card_id), message_id)
        logger.info(f"Stored cross-reference {card_id} -> {message_id}")

    async def list_by(self, card_id: str) -> List[str]:
        """Return the Discord message ids recorded for a card."""
        members = await self.redis.smembers(self._key(card_id))
        return sorted(members)

    async def remove(self, card_id: str, message_ids: Iterable[str]) -> None:
        """Forget message ids once their Discord messages are gone."""
        ids = list(message_ids)
        if not ids:
            return
        await self.redis.srem(self._key(card_id), *ids)
        logger.info(f"Removed {len(ids)} cross-reference(s) for card {card_id}")

    async def close(self) -> None:
        await self.redis.aclose()
