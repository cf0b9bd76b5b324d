"""Typed card events extracted from Trello webhook payloads.

Each allow-listed action kind has its own model carrying only the fields
that kind provides. `extract_event` selects the variant from the
`display.translationKey` discriminator before reading any fields.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from ..exceptions import PayloadError
from .trello_models import TrelloWebhook


class ActionKind(str, Enum):
    """Trello action kinds the relay handles."""

    COMMENT_ADDED = "action_comment_on_card"
    ATTACHMENT_ADDED = "action_add_attachment_to_card"
    CARD_CREATED = "action_create_card"
    CARD_MOVED = "action_move_card_from_list_to_list"
    LABEL_ADDED = "action_add_label_to_card"
    CARD_ARCHIVED = "action_archived_card"

    @classmethod
    def from_key(cls, key: str) -> Optional["ActionKind"]:
        try:
            return cls(key)
        except ValueError:
            return None


class CardEvent(BaseModel):
    """Fields shared by every card event."""
    model_config = ConfigDict(frozen=True)

    board_id: str
    board_name: Optional[str] = None
    board_url: Optional[str] = None
    card_id: str
    card_name: Optional[str] = None
    card_short_link: Optional[str] = None
    list_name: Optional[str] = None
    author_name: Optional[str] = None
    author_avatar_url: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def card_url(self) -> str:
        return f"https://trello.com/c/{self.card_short_link}"


class CommentAdded(CardEvent):
    kind: Literal[ActionKind.COMMENT_ADDED] = ActionKind.COMMENT_ADDED
    text: str = ""


class AttachmentAdded(CardEvent):
    kind: Literal[ActionKind.ATTACHMENT_ADDED] = ActionKind.ATTACHMENT_ADDED
    attachment_id: Optional[str] = None
    attachment_name: Optional[str] = None
    attachment_url: Optional[str] = None


class CardCreated(CardEvent):
    kind: Literal[ActionKind.CARD_CREATED] = ActionKind.CARD_CREATED


class CardMoved(CardEvent):
    kind: Literal[ActionKind.CARD_MOVED] = ActionKind.CARD_MOVED
    list_before: Optional[str] = None
    list_after: Optional[str] = None


class LabelAdded(CardEvent):
    kind: Literal[ActionKind.LABEL_ADDED] = ActionKind.LABEL_ADDED
    label_text: Optional[str] = None
    label_color: Optional[str] = None


class CardArchived(CardEvent):
    kind: Literal[ActionKind.CARD_ARCHIVED] = ActionKind.CARD_ARCHIVED


InboundEvent = Union[
    CommentAdded,
    AttachmentAdded,
    CardCreated,
    CardMoved,
    LabelAdded,
    CardArchived,
]


def _common_fields(webhook: TrelloWebhook) -> dict:
    action = webhook.action
    data = action.data
    if data.card is None:
        raise PayloadError("Action data has no card")

    list_name = data.list.name if data.list else None
    if list_name is None and data.listAfter:
        list_name = data.listAfter.name

    return {
        "board_id": webhook.model.id,
        "board_name": webhook.model.name,
        "board_url": webhook.model.shortUrl,
        "card_id": data.card.id,
        "card_name": data.card.name,
        "card_short_link": data.card.shortLink,
        "list_name": list_name,
        "author_name": action.memberCreator.fullName,
        "author_avatar_url": action.memberCreator.avatarUrl,
        "timestamp": action.date,
    }


def parse_webhook(payload: dict) -> TrelloWebhook:
    """Validate a raw payload, raising PayloadError on a malformed shape."""
    try:
        return TrelloWebhook.model_validate(payload)
    except ValidationError as e:
        raise PayloadError(f"Malformed webhook payload: {e.error_count()} validation errors") from e


def extract_event(webhook: TrelloWebhook) -> Optional[InboundEvent]:
    """Map a webhook to its typed event, or None when the kind is not handled."""
    kind = ActionKind.from_key(webhook.action.display.translationKey)
    if kind is None:
        return None

    common = _common_fields(webhook)
    data = webhook.action.data

    if kind is ActionKind.COMMENT_ADDED:
        return CommentAdded(text=data.text or "", **common)

    if kind is ActionKind.ATTACHMENT_ADDED:
        attachment = data.attachment
        return AttachmentAdded(
            attachment_id=attachment.id if attachment else None,
            attachment_name=attachment.name if attachment else None,
            attachment_url=attachment.previewUrl if attachment else None,
            **common,
        )

    if kind is ActionKind.CARD_CREATED:
        return CardCreated(**common)

    if kind is ActionKind.CARD_MOVED:
        return CardMoved(
            list_before=data.listBefore.name if data.listBefore else None,
            list_after=data.listAfter.name if data.listAfter else None,
            **common,
        )

    if kind is ActionKind.LABEL_ADDED:
        label = data.label
        return LabelAdded(
            label_text=data.text if data.text is not None else (label.name if label else None),
            label_color=data.value if data.value is not None else (label.color if label else None),
            **common,
        )

    return CardArchived(**common)
