"""Pydantic models for Trello webhook payloads and API responses."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class TrelloList(BaseModel):
    """A Trello list reference."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None


class TrelloCard(BaseModel):
    """A Trello card reference as embedded in action data."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    shortLink: Optional[str] = None
    idShort: Optional[int] = None


class TrelloAttachment(BaseModel):
    """Attachment information for attachment actions."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    previewUrl: Optional[str] = None


class TrelloLabel(BaseModel):
    """Label information for label actions."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None


class TrelloActionData(BaseModel):
    """The polymorphic `data` block of a Trello action.

    Which sub-structures are present depends on the action type, so
    every one of them is optional.
    """
    model_config = ConfigDict(extra="ignore")

    card: Optional[TrelloCard] = None
    list: Optional[TrelloList] = None
    listBefore: Optional[TrelloList] = None
    listAfter: Optional[TrelloList] = None
    attachment: Optional[TrelloAttachment] = None
    label: Optional[TrelloLabel] = None
    text: Optional[str] = None
    value: Optional[str] = None


class TrelloDisplay(BaseModel):
    """Display information; `translationKey` identifies the action kind."""
    model_config = ConfigDict(extra="ignore")

    translationKey: str


class TrelloMember(BaseModel):
    """The member who created the action."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    username: Optional[str] = None
    fullName: Optional[str] = None
    avatarUrl: Optional[str] = None


class TrelloAction(BaseModel):
    """A Trello action."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
    display: TrelloDisplay
    data: TrelloActionData = TrelloActionData()
    memberCreator: TrelloMember


class TrelloBoardModel(BaseModel):
    """The model (board) the webhook is registered on."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    shortUrl: Optional[str] = None


class TrelloWebhook(BaseModel):
    """Complete Trello webhook payload."""
    model_config = ConfigDict(extra="ignore")

    action: TrelloAction
    model: TrelloBoardModel


class TrelloScaledImage(BaseModel):
    """One size of a scaled card cover."""
    model_config = ConfigDict(extra="ignore")

    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class TrelloCover(BaseModel):
    """Card cover information."""
    model_config = ConfigDict(extra="ignore")

    idAttachment: Optional[str] = None
    scaled: Optional[List[TrelloScaledImage]] = None


class TrelloCardDetail(BaseModel):
    """Card detail as returned by GET /cards/{id}."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    cover: Optional[TrelloCover] = None

    def cover_thumbnail_url(self) -> Optional[str]:
        """Return the URL of the cover size used for thumbnails, if any."""
        if not self.cover or not self.cover.scaled:
            return None
        scaled = self.cover.scaled
        return scaled[2].url if len(scaled) > 2 else scaled[-1].url
