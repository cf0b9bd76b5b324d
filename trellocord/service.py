from __future__ import annotations

import logging
from typing import Optional

import httpx
from redis.exceptions import RedisError

from .config import RelayConfig
from .exceptions import ConfigurationError, DeliveryError
from .models import InboundEvent
from .relay.assets import AssetFetcher
from .relay.dispatcher import DiscordDispatcher
from .relay.router import ActionRouter, Produce, SoftReject, Suppress
from .relay.store import CrossReferenceStore
from .relay.trello_client import TrelloClient

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_WRONG_ACTION = "Wrong Action Type"
STATUS_CONFIGURATION_ERROR = "Configuration Error"
STATUS_DELIVERY_FAILED = "Delivery Failed"


class RelayService:
    """Coordinates routing, delivery and cross-reference bookkeeping."""

    def __init__(
        self,
        cfg: RelayConfig,
        http: Optional[httpx.AsyncClient] = None,
        store: Optional[CrossReferenceStore] = None,
    ) -> None:
        self.config = cfg
        self.http = http or httpx.AsyncClient(timeout=cfg.request_timeout, follow_redirects=True)
        self.store = store or CrossReferenceStore(cfg.redis_url)
        self.trello = TrelloClient(cfg.trello, self.http)
        self.assets = AssetFetcher(self.trello, cfg.asset_dir, cfg.public_base_url)
        self.dispatcher = DiscordDispatcher(cfg, self.http)
        self.router = ActionRouter(cfg, self.trello, self.assets, self.store, self.dispatcher)

    async def handle(self, event: InboundEvent) -> str:
        """Route an event and deliver the resulting message.

        Returns the plain-text status sent back to Trello.
        """
        try:
            result = await self.router.route(event)
        except ConfigurationError as e:
            logger.error(str(e))
            return STATUS_CONFIGURATION_ERROR
        except httpx.HTTPError as e:
            logger.error(f"Trello request failed for {event.kind.value} on card {event.card_id}: {e}")
            return STATUS_WRONG_ACTION

        if isinstance(result, (SoftReject, Suppress)):
            logger.info(f"{event.kind.value} on card {event.card_id}: {result.reason}")
            return STATUS_WRONG_ACTION

        return await self._deliver(result)

    async def _deliver(self, result: Produce) -> str:
        try:
            message_id = await self.dispatcher.send(result.board_id, result.message)
        except ConfigurationError as e:
            logger.error(str(e))
            return STATUS_CONFIGURATION_ERROR
        except (httpx.HTTPError, DeliveryError) as e:
            logger.error(f"Discord delivery failed for board {result.board_id}: {e}")
            return STATUS_DELIVERY_FAILED

        # Needed so the message can be removed when the card is archived
        if result.track:
            try:
                await self.store.put(result.card_id, message_id)
            except RedisError as e:
                logger.error(f"Sent message {message_id} for card {result.card_id} but could not record it: {e}")

        return STATUS_OK

    async def close(self) -> None:
        await self.http.aclose()
        await self.store.close()
