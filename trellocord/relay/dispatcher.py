from __future__ import annotations

import logging

import httpx

from ..config import RelayConfig
from ..exceptions import ConfigurationError, DeliveryError
from ..models import WebhookMessage

logger = logging.getLogger(__name__)


class DiscordDispatcher:
    """Sends and deletes messages through the Discord webhook of a board."""

    def __init__(self, cfg: RelayConfig, http: httpx.AsyncClient) -> None:
        self.config = cfg
        self._http = http

    def resolve_endpoint(self, board_id: str) -> str:
        destination = self.config.find_destination(board_id)
        if destination is None:
            raise ConfigurationError(f"No Discord destination configured for board {board_id}")
        return destination.hook.rstrip("/")

    async def send(self, board_id: str, message: WebhookMessage) -> str:
        """Send a message and return the id Discord assigned to it."""
        endpoint = self.resolve_endpoint(board_id)
        response = await self._http.post(
            endpoint,
            params={"wait": "true"},
            json=message.to_payload(),
        )
        response.raise_for_status()

        message_id = response.json().get("id")
        if not message_id:
            raise DeliveryError("Discord did not return a message id")
        logger.info(f"Sent Discord message {message_id} for board {board_id}")
        return str(message_id)

    async def delete(self, board_id: str, message_id: str) -> None:
        endpoint = self.resolve_endpoint(board_id)
        response = await self._http.delete(f"{endpoint}/messages/{message_id}")
        response.raise_for_status()
        logger.info(f"Deleted Discord message {message_id} for board {board_id}")
