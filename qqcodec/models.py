"""Typed inbound message events."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, MutableMapping

from qqcodec.core.decoder import decode_message
from qqcodec.core.encoder import Sendable
from qqcodec.elements import Element

if TYPE_CHECKING:
    from qqcodec.transports.base import SendResult, Transport


@dataclass
class Sender:
    user_id: str = ""
    user_name: str = ""
    permissions: list[str] = field(default_factory=list)


@dataclass
class MessageEvent(ABC):
    transport: "Transport" = field(repr=False, compare=False)
    message_id: str = ""
    user_id: str = ""
    sender: Sender = field(default_factory=Sender)
    event_id: str | None = None
    guild_id: str | None = None
    channel_id: str | None = None
    group_id: str | None = None
    raw_message: str = ""
    message: list[Element] = field(default_factory=list)
    message_reference: dict[str, str] | None = None

    message_type: ClassVar[str] = ""

    @abstractmethod
    async def reply(self, message: Sendable) -> "SendResult": ...

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_type": self.message_type,
            "message_id": self.message_id,
            "user_id": self.user_id,
            "sender": {
                "user_id": self.sender.user_id,
                "user_name": self.sender.user_name,
                "permissions": list(self.sender.permissions),
            },
            "event_id": self.event_id,
            "guild_id": self.guild_id,
            "channel_id": self.channel_id,
            "group_id": self.group_id,
            "raw_message": self.raw_message,
            "message": [e.to_dict() for e in self.message],
            "message_reference": self.message_reference,
        }


@dataclass
class PrivateMessageEvent(MessageEvent):
    message_type: ClassVar[str] = "private"

    async def reply(self, message: Sendable) -> "SendResult":
        return await self.transport.send_private_message(self.user_id, message, self)


@dataclass
class GroupMessageEvent(MessageEvent):
    message_type: ClassVar[str] = "group"

    async def reply(self, message: Sendable) -> "SendResult":
        return await self.transport.send_group_message(self.group_id or "", message, self)


@dataclass
class DirectMessageEvent(MessageEvent):
    message_type: ClassVar[str] = "direct"

    async def reply(self, message: Sendable) -> "SendResult":
        return await self.transport.send_direct_message(self.guild_id or "", message, self)


@dataclass
class GuildMessageEvent(MessageEvent):
    message_type: ClassVar[str] = "guild"

    async def reply(self, message: Sendable) -> "SendResult":
        return await self.transport.send_guild_message(self.channel_id or "", message, self)

    async def as_announce(self) -> Any:
        """Set this message as the guild announcement."""
        return await self.transport.set_channel_announce(
            self.guild_id or "", self.channel_id or "", self.message_id
        )

    async def pin(self) -> Any:
        return await self.transport.pin_channel_message(self.channel_id or "", self.message_id)


EVENT_TYPES: dict[str, type[MessageEvent]] = {
    cls.message_type: cls
    for cls in (PrivateMessageEvent, GroupMessageEvent, DirectMessageEvent, GuildMessageEvent)
}


def parse_message_event(
    sub_type: str,
    payload: MutableMapping[str, Any],
    transport: "Transport",
    event_id: str | None = None,
) -> MessageEvent:
    """Build a message event from a platform message payload.

    Decoding consumes ``attachments`` and ``mentions`` from ``payload``.
    """
    cls = EVENT_TYPES.get(sub_type)
    if cls is None:
        raise ValueError(f"unknown message type: {sub_type!r}")

    author = payload.get("author") or {}
    user_id = str(
        author.get("user_openid")
        or author.get("member_openid")
        or author.get("id")
        or ""
    )
    member = payload.get("member") or {}
    decoded = decode_message(payload)

    return cls(
        transport=transport,
        message_id=str(payload.get("id", "")),
        user_id=user_id,
        sender=Sender(
            user_id=user_id,
            user_name=str(author.get("username", "")),
            permissions=[str(r) for r in member.get("roles", [])],
        ),
        event_id=event_id,
        guild_id=payload.get("guild_id"),
        channel_id=payload.get("channel_id"),
        group_id=payload.get("group_openid") or payload.get("group_id"),
        raw_message=decoded.brief,
        message=list(decoded.elements),
        message_reference=payload.get("message_reference"),
    )
