"""Message and embed builders for interaction responses and follow-ups."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from slashkit.builders.components import ActionRowBuilder
from slashkit.models.enums import MessageFlags


class EmbedField(BaseModel):
    name: str
    value: str
    inline: bool = False


class EmbedFooter(BaseModel):
    text: str
    icon_url: str | None = None


class EmbedAuthor(BaseModel):
    name: str
    url: str | None = None
    icon_url: str | None = None


class EmbedMedia(BaseModel):
    url: str


class Embed(BaseModel):
    title: str | None = None
    description: str | None = None
    url: str | None = None
    timestamp: str | None = None  # ISO8601
    color: int | None = None
    footer: EmbedFooter | None = None
    image: EmbedMedia | None = None
    thumbnail: EmbedMedia | None = None
    author: EmbedAuthor | None = None
    fields: list[EmbedField] | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class MessageBuilder:
    """Builds the ``data`` object of a message response."""

    def __init__(self, content: str | Embed | dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = {}
        if isinstance(content, Embed):
            self.add_embeds(content)
        elif isinstance(content, str):
            self.set_content(content)
        elif content is not None:
            self.data = dict(content)

    def set_content(self, content: str) -> MessageBuilder:
        self.data["content"] = content
        return self

    def set_tts(self, tts: bool) -> MessageBuilder:
        self.data["tts"] = tts
        return self

    def set_allowed_mentions(self, allowed_mentions: dict[str, Any]) -> MessageBuilder:
        self.data["allowed_mentions"] = allowed_mentions
        return self

    def _set_flag(self, flag: MessageFlags, value: bool) -> MessageBuilder:
        flags = int(self.data.get("flags", 0))
        self.data["flags"] = flags | int(flag) if value else flags & ~int(flag)
        return self

    def set_ephemeral(self, value: bool = True) -> MessageBuilder:
        return self._set_flag(MessageFlags.EPHEMERAL, value)

    def suppress_embeds(self, value: bool = True) -> MessageBuilder:
        return self._set_flag(MessageFlags.SUPPRESS_EMBEDS, value)

    def add_embeds(self, *embeds: Embed) -> MessageBuilder:
        self.data.setdefault("embeds", []).extend(e.to_json() for e in embeds)
        return self

    def add_components(self, *rows: ActionRowBuilder) -> MessageBuilder:
        self.data.setdefault("components", []).extend(r.to_json() for r in rows)
        return self

    def set_components(self, components: list[dict[str, Any]] | None = None) -> MessageBuilder:
        self.data["components"] = list(components or [])
        return self

    def to_json(self) -> dict[str, Any]:
        return self.data
