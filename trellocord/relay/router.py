"""Per-action routing of card events into Discord messages.

`ActionRouter.route` is a dispatch table keyed by action kind. Every branch
returns one of three outcomes:

- `Produce`: a message that should be sent to the board's destination,
- `SoftReject`: the event is not wanted here (answered 200, nothing sent),
- `Suppress`: the branch did its work itself and nothing should be sent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, Union

import httpx
from pydantic import ValidationError

from ..config import BoardPolicy, RelayConfig
from ..models import (
    ActionKind,
    AttachmentAdded,
    CardArchived,
    CardCreated,
    CardMoved,
    CommentAdded,
    Embed,
    EmbedAuthor,
    EmbedField,
    EmbedFooter,
    EmbedMedia,
    InboundEvent,
    LabelAdded,
    WebhookMessage,
)
from .assets import AssetFetcher
from .dispatcher import DiscordDispatcher
from .store import CrossReferenceStore
from .trello_client import TrelloClient

logger = logging.getLogger(__name__)


@dataclass
class Produce:
    board_id: str
    card_id: str
    message: WebhookMessage
    track: bool = False


@dataclass
class SoftReject:
    reason: str


@dataclass
class Suppress:
    reason: str


RouteResult = Union[Produce, SoftReject, Suppress]


def replace_mentions(text: str, users: Dict[str, str]) -> Tuple[str, Optional[str]]:
    """Swap `@username` tokens for Discord mention tags.

    Returns the rewritten text and a space separated mention string for the
    message content, since mentions inside an embed do not notify anyone.
    """
    mentions: List[str] = []
    for username, discord_id in users.items():
        pattern = re.compile(rf"(?<![\w@])@{re.escape(username)}(?!\w)")
        tag = f"<@{discord_id}>"
        text, count = pattern.subn(tag, text)
        if count:
            mentions.append(tag)
    return text, (" ".join(mentions) if mentions else None)


class ActionRouter:
    """Turns a card event into a route result."""

    def __init__(
        self,
        cfg: RelayConfig,
        trello: TrelloClient,
        assets: AssetFetcher,
        store: CrossReferenceStore,
        dispatcher: DiscordDispatcher,
    ) -> None:
        self.config = cfg
        self.trello = trello
        self.assets = assets
        self.store = store
        self.dispatcher = dispatcher

        self._branches: Dict[ActionKind, Callable[..., Awaitable[RouteResult]]] = {
            ActionKind.COMMENT_ADDED: self._comment_added,
            ActionKind.ATTACHMENT_ADDED: self._attachment_added,
            ActionKind.CARD_CREATED: self._card_created,
            ActionKind.CARD_MOVED: self._card_moved,
            ActionKind.LABEL_ADDED: self._label_added,
        }

    async def route(self, event: InboundEvent) -> RouteResult:
        policy = self.config.policy_for(event.board_id)
        if not policy.allows(event.kind):
            logger.info(f"Board {event.board_id} does not accept {event.kind.value}")
            return SoftReject("Wrong Action Type")

        if isinstance(event, CardArchived):
            return await self._card_archived(event, policy)

        embed = self.default_embed(event)
        await self._apply_cover(event, embed)
        return await self._branches[event.kind](event, embed, policy)

    def default_embed(self, event: InboundEvent) -> Embed:
        return Embed(
            author=EmbedAuthor(name=f"Trello :: {event.board_name}"),
            thumbnail=EmbedMedia(url=f"{event.author_avatar_url}/60.png"),
            timestamp=event.timestamp,
            footer=EmbedFooter(text=self.config.footer_text),
            fields=[
                EmbedField(name="List", value=f"[{event.list_name}]({event.board_url})"),
                EmbedField(name="Card", value=f"[{event.card_name}]({event.card_url})"),
            ],
        )

    async def _apply_cover(self, event: InboundEvent, embed: Embed) -> None:
        """Use the card cover as thumbnail instead of the author avatar."""
        try:
            card = await self.trello.fetch_card(event.card_id)
        except (httpx.HTTPError, ValidationError) as e:
            logger.warning(f"Could not fetch card {event.card_id}: {e}")
            return

        cover_url = card.cover_thumbnail_url()
        if not cover_url:
            return

        cover = await self.assets.fetch(cover_url, f"{event.card_id}_cover_thumb")
        if cover:
            embed.thumbnail = EmbedMedia(url=self.assets.public_url(cover))

    def _produce(self, event: InboundEvent, embed: Embed, policy: BoardPolicy,
                 content: Optional[str] = None) -> Produce:
        return Produce(
            board_id=event.board_id,
            card_id=event.card_id,
            message=WebhookMessage(content=content, embeds=[embed]),
            track=policy.track_messages,
        )

    async def _comment_added(self, event: CommentAdded, embed: Embed, policy: BoardPolicy) -> RouteResult:
        embed.title = f"New Comment By {event.author_name}"
        embed.description, mentions = replace_mentions(event.text, self.config.users)
        return self._produce(event, embed, policy, content=mentions)

    async def _attachment_added(self, event: AttachmentAdded, embed: Embed, policy: BoardPolicy) -> RouteResult:
        embed.title = "New Image Added"
        if event.attachment_id and event.attachment_name:
            url = self.trello.attachment_download_url(event.card_id, event.attachment_id, event.attachment_name)
            image = await self.assets.fetch(url, event.attachment_name)
            if image:
                embed.image = EmbedMedia(url=self.assets.public_url(image))
        return self._produce(event, embed, policy)

    async def _card_created(self, event: CardCreated, embed: Embed, policy: BoardPolicy) -> RouteResult:
        embed.title = f"New Card Added By {event.author_name}"
        return self._produce(event, embed, policy)

    async def _card_moved(self, event: CardMoved, embed: Embed, policy: BoardPolicy) -> RouteResult:
        embed.title = f"Card Moved to {event.list_after}"
        embed.drop_field("List")
        embed.description = (
            f"[{event.card_name}]({event.card_url}) has been moved from "
            f"**{event.list_before}** to **{event.list_after}**"
        )
        return self._produce(event, embed, policy)

    async def _label_added(self, event: LabelAdded, embed: Embed, policy: BoardPolicy) -> RouteResult:
        if policy.is_release_label(event.label_color, event.label_text):
            return await self._release_graphic(event, embed, policy)

        if policy.release_label_text is not None:
            # Boards with a release label only announce that label
            return SoftReject("Wrong Action Type")

        embed.title = f"Label Added To {event.card_name}"
        embed.drop_field("List")
        embed.description = (
            f"The label **{event.label_text}** has been added to "
            f"**[{event.card_name}]({event.card_url})**"
        )
        return self._produce(event, embed, policy)

    async def _release_graphic(self, event: LabelAdded, embed: Embed, policy: BoardPolicy) -> RouteResult:
        attachments = await self.trello.fetch_attachments(event.card_id)
        url = attachments[0].get("url") if attachments else None
        if not url:
            logger.info(f"Card {event.card_id} has no attachment to release")
            return SoftReject("Wrong Action Type")

        release = Embed(
            title=policy.release_title,
            description=f"**[Download Graphic]({url})**",
            image=EmbedMedia(url=url),
            footer=embed.footer,
            timestamp=embed.timestamp,
        )
        if policy.gallery_url:
            release.description += f"\n\n[View All Graphics]({policy.gallery_url})"
        return self._produce(event, release, policy)

    async def _card_archived(self, event: CardArchived, policy: BoardPolicy) -> RouteResult:
        """Delete every Discord message recorded for the archived card."""
        message_ids = await self.store.list_by(event.card_id)
        removed: List[str] = []
        for message_id in message_ids:
            try:
                await self.dispatcher.delete(event.board_id, message_id)
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    removed.append(message_id)
                    continue
                logger.error(f"Failed to delete Discord message {message_id}: {e}")
                continue
            except httpx.HTTPError as e:
                logger.error(f"Failed to delete Discord message {message_id}: {e}")
                continue
            removed.append(message_id)

        await self.store.remove(event.card_id, removed)
        logger.info(f"Archived card {event.card_id}: deleted {len(removed)}/{len(message_ids)} message(s)")
        return Suppress("No message needed")
