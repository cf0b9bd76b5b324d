"""Shared models for webhook relaying."""

from .trello_models import (
    TrelloWebhook,
    TrelloAction,
    TrelloActionData,
    TrelloBoardModel,
    TrelloCard,
    TrelloCardDetail,
    TrelloMember,
)

from .events import (
    ActionKind,
    CardEvent,
    CommentAdded,
    AttachmentAdded,
    CardCreated,
    CardMoved,
    LabelAdded,
    CardArchived,
    InboundEvent,
    extract_event,
    parse_webhook,
)

from .discord_models import (
    Embed,
    EmbedAuthor,
    EmbedField,
    EmbedFooter,
    EmbedMedia,
    WebhookMessage,
)

__all__ = [
    # Trello payload models
    "TrelloWebhook",
    "TrelloAction",
    "TrelloActionData",
    "TrelloBoardModel",
    "TrelloCard",
    "TrelloCardDetail",
    "TrelloMember",
    # Typed events
    "ActionKind",
    "CardEvent",
    "CommentAdded",
    "AttachmentAdded",
    "CardCreated",
    "CardMoved",
    "LabelAdded",
    "CardArchived",
    "InboundEvent",
    "extract_event",
    "parse_webhook",
    # Discord message models
    "Embed",
    "EmbedAuthor",
    "EmbedField",
    "EmbedFooter",
    "EmbedMedia",
    "WebhookMessage",
]
