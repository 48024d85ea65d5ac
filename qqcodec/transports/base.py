"""Abstract transport base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from qqcodec.core.encoder import Encoder, Sendable
from qqcodec.elements import Quotable
from qqcodec.utils.logging import get_logger, message_context

log = get_logger(__name__)


class TransportError(Exception):
    def __init__(self, status_code: int, body: str, path: str = "") -> None:
        super().__init__(f"{path} returned HTTP {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body
        self.path = path


class Scene(str, Enum):
    PRIVATE = "private"
    GROUP = "group"
    GUILD = "guild"
    DIRECT = "direct"


# scene -> (messages route, files route)
ROUTES: dict[Scene, tuple[str, str | None]] = {
    Scene.PRIVATE: ("/v2/users/{id}/messages", "/v2/users/{id}/files"),
    Scene.GROUP: ("/v2/groups/{id}/messages", "/v2/groups/{id}/files"),
    Scene.GUILD: ("/channels/{id}/messages", None),
    Scene.DIRECT: ("/dms/{id}/messages", None),
}

ANNOUNCE_ROUTE = "/guilds/{guild_id}/announces"
PIN_ROUTE = "/channels/{channel_id}/pins/{message_id}"


@dataclass
class SendResult:
    message_response: Any = None
    file_response: Any = None
    brief: str = ""


class Transport(ABC):
    def __init__(self, encoder: Encoder | None = None) -> None:
        self.encoder = encoder or Encoder()

    @property
    @abstractmethod
    def platform_name(self) -> str: ...

    @abstractmethod
    async def start(self) -> None: ...

    @abstractmethod
    async def stop(self) -> None: ...

    @abstractmethod
    async def request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Any: ...

    async def send(
        self,
        scene: Scene,
        target_id: str,
        message: Sendable,
        source: Quotable | Any | None = None,
    ) -> SendResult:
        """Encode ``message`` and post each non-empty payload to its endpoint."""
        scene = Scene(scene)
        messages_route, files_route = ROUTES[scene]

        with message_context(scene=scene.value, target=target_id):
            result = self.encoder.encode(message, source)
            sent = SendResult(brief=result.brief)

            if result.has_messages:
                sent.message_response = await self.request(
                    "POST", messages_route.format(id=target_id), result.messages.to_dict()
                )
            if result.has_files:
                if files_route is None:
                    log.warning("files_unsupported")
                else:
                    sent.file_response = await self.request(
                        "POST", files_route.format(id=target_id), result.files.to_dict()
                    )

            log.info("message_sent", platform=self.platform_name, brief=result.brief)
        return sent

    async def send_private_message(
        self, user_id: str, message: Sendable, source: Quotable | Any | None = None
    ) -> SendResult:
        return await self.send(Scene.PRIVATE, user_id, message, source)

    async def send_group_message(
        self, group_id: str, message: Sendable, source: Quotable | Any | None = None
    ) -> SendResult:
        return await self.send(Scene.GROUP, group_id, message, source)

    async def send_guild_message(
        self, channel_id: str, message: Sendable, source: Quotable | Any | None = None
    ) -> SendResult:
        return await self.send(Scene.GUILD, channel_id, message, source)

    async def send_direct_message(
        self, guild_id: str, message: Sendable, source: Quotable | Any | None = None
    ) -> SendResult:
        return await self.send(Scene.DIRECT, guild_id, message, source)

    async def set_channel_announce(self, guild_id: str, channel_id: str, message_id: str) -> Any:
        """Make a channel message the guild announcement."""
        return await self.request(
            "POST",
            ANNOUNCE_ROUTE.format(guild_id=guild_id),
            {"channel_id": channel_id, "message_id": message_id},
        )

    async def pin_channel_message(self, channel_id: str, message_id: str) -> Any:
        return await self.request(
            "PUT", PIN_ROUTE.format(channel_id=channel_id, message_id=message_id)
        )
