"""Trello webhook relaying.

This module handles:
- Receiving Trello webhooks
- Validating webhook signatures
- Routing card events into Discord messages
- Tracking sent messages so archived cards can be cleaned up
"""

from .router import ActionRouter, Produce, SoftReject, Suppress
from .assets import AssetFetcher, normalize_filename
from .dispatcher import DiscordDispatcher
from .store import CrossReferenceStore
from .trello_client import TrelloClient

__all__ = [
    "ActionRouter",
    "Produce",
    "SoftReject",
    "Suppress",
    "AssetFetcher",
    "normalize_filename",
    "DiscordDispatcher",
    "CrossReferenceStore",
    "TrelloClient",
]
