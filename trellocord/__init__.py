"""Trellocord - relay Trello board activity to Discord.

This package is organised as follows:

- trellocord.relay: Webhook reception, routing and delivery
- trellocord.models: Trello payload, event and Discord message models
- trellocord.common: Shared utilities (signatures, logging)
"""

__version__ = "1.0.0"

from . import common
from . import models

__all__ = [
    "common",
    "models",
]
