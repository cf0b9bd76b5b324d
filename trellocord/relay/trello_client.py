from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

import httpx

from ..config import TrelloConfig
from ..models import TrelloCardDetail


class TrelloClient:
    """Thin async wrapper around the Trello REST API."""

    def __init__(self, cfg: TrelloConfig, http: httpx.AsyncClient) -> None:
        self._cfg = cfg
        self._http = http

    async def fetch_card(self, card_id: str) -> TrelloCardDetail:
        response = await self._http.get(
            f"{self._cfg.api_url}/cards/{card_id}",
            params=self._cfg.auth_params(),
        )
        response.raise_for_status()
        return TrelloCardDetail.model_validate(response.json())

    async def fetch_attachments(self, card_id: str) -> List[Dict[str, Any]]:
        response = await self._http.get(
            f"{self._cfg.api_url}/cards/{card_id}/attachments",
            params=self._cfg.auth_params(),
        )
        response.raise_for_status()
        return response.json()

    def attachment_download_url(self, card_id: str, attachment_id: str, name: str) -> str:
        return (
            f"{self._cfg.api_url}/cards/{card_id}/attachments/{attachment_id}"
            f"/previews/preview/download/{quote(name)}"
        )

    async def download(self, url: str) -> bytes:
        """Download a binary resource with OAuth header authentication."""
        response = await self._http.get(url, headers=self._cfg.oauth_header())
        response.raise_for_status()
        return response.content
