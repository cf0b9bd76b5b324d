"""Fetch remote images from Trello and cache them in the public asset directory."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

import filetype
import httpx

from .trello_client import TrelloClient

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+", re.IGNORECASE)


def normalize_filename(name: str, extension: str) -> str:
    """Build a safe asset filename from a display name and sniffed extension."""
    stem = _EXTENSION_RE.sub("", name)
    stem = _NON_ALNUM_RE.sub("_", stem).lower()
    return f"{stem}.{extension}"


class AssetFetcher:
    """Downloads images and stores them under the shared asset directory."""

    def __init__(self, trello: TrelloClient, asset_dir: str | Path, public_base_url: str) -> None:
        self.trello = trello
        self.asset_dir = Path(asset_dir)
        self.public_base_url = public_base_url.rstrip("/")

    def public_url(self, name: str) -> str:
        return f"{self.public_base_url}/img/{name}"

    async def fetch(self, url: str, desired_name: str) -> Optional[str]:
        """Fetch an image and return its stored name, or None if unavailable.

        The content type is sniffed from the downloaded bytes; anything that
        is not an image is discarded.
        """
        try:
            content = await self.trello.download(url)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to download asset {url}: {e}")
            return None

        kind = filetype.guess(content)
        if kind is None or not kind.mime.startswith("image/"):
            logger.info(f"Ignoring non-image asset {desired_name} ({kind.mime if kind else 'unknown'})")
            return None

        name = normalize_filename(desired_name, kind.extension)
        try:
            await asyncio.to_thread(self._write, name, content)
        except OSError as e:
            logger.error(f"Failed to store asset {name}: {e}")
            return None

        logger.info(f"Stored asset {name} ({len(content)} bytes)")
        return name

    def _write(self, name: str, content: bytes) -> None:
        self.asset_dir.mkdir(parents=True, exist_ok=True)
        (self.asset_dir / name).write_bytes(content)
