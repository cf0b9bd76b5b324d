"""Pydantic models for Discord webhook messages."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class EmbedAuthor(BaseModel):
    name: Optional[str] = None


class EmbedMedia(BaseModel):
    """Thumbnail or image reference."""
    url: str


class EmbedFooter(BaseModel):
    text: str


class EmbedField(BaseModel):
    name: str
    value: str


class Embed(BaseModel):
    """A Discord rich embed, built fresh for every request."""
    title: Optional[str] = None
    description: Optional[str] = None
    author: Optional[EmbedAuthor] = None
    thumbnail: Optional[EmbedMedia] = None
    image: Optional[EmbedMedia] = None
    fields: Optional[List[EmbedField]] = None
    footer: Optional[EmbedFooter] = None
    timestamp: Optional[str] = None

    def drop_field(self, name: str) -> None:
        """Remove every field with the given name."""
        if self.fields is not None:
            self.fields = [f for f in self.fields if f.name != name]


class WebhookMessage(BaseModel):
    """Body of a Discord webhook execute call."""
    content: Optional[str] = None
    embeds: List[Embed] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize without unset values so absent keys stay absent."""
        return self.model_dump(exclude_none=True)
