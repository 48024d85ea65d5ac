"""Encoding of typed elements into the transcript and file wire payloads."""

from __future__ import annotations

import json
import random
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Mapping, Union

from qqcodec.config import EncoderConfig
from qqcodec.core.brief import Brief
from qqcodec.core.keyboard import build_keyboard
from qqcodec.elements import (
    At,
    Button,
    Element,
    Face,
    Link,
    Markdown,
    Media,
    Quotable,
    Reply,
    Text,
    element_from_dict,
)
from qqcodec.utils.logging import get_logger, message_context

log = get_logger(__name__)

MSG_TYPE_TEXT = 0
MSG_TYPE_MARKDOWN = 2

FILE_TYPES = {"image": 1, "video": 2, "audio": 3}

SendItem = Union[Element, str, Mapping[str, Any]]
Sendable = Union[SendItem, Iterable[SendItem]]


@dataclass(frozen=True)
class TranscriptPayload:
    msg_seq: int
    timestamp: int
    msg_type: int = MSG_TYPE_TEXT
    content: str = ""
    msg_id: str | None = None
    markdown: dict[str, Any] | None = None
    keyboard: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class FilePayload:
    msg_seq: int
    timestamp: int
    msg_id: str | None = None
    file_type: int | None = None
    content: str | None = None
    url: str | None = None
    event_id: str | None = None
    srv_send_msg: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class EncodeResult:
    messages: TranscriptPayload
    files: FilePayload
    has_messages: bool
    has_files: bool
    brief: str


def normalize_sendable(message: Sendable) -> list[Any]:
    """Coerce any accepted input shape into an ordered list of items."""
    if isinstance(message, (str, Element, Mapping)):
        return [message]
    if isinstance(message, Iterable):
        return list(message)
    return [message]


def _quote_ids(source: Any) -> tuple[str | None, str | None]:
    if isinstance(source, Mapping):
        return source.get("message_id") or None, source.get("event_id") or None
    return getattr(source, "message_id", None) or None, getattr(source, "event_id", None) or None


def _coerce(item: Any) -> Element | None:
    if isinstance(item, Element):
        return item
    if isinstance(item, str):
        return Text(text=item)
    if isinstance(item, Mapping):
        return element_from_dict(item)
    return None


class Encoder:
    """Routes an element sequence into the two outbound payloads.

    ``seq_source`` and ``clock`` default to ``random.randint`` over the
    configured range and ``time.time``; pass fixed callables for
    deterministic output.
    """

    def __init__(
        self,
        config: EncoderConfig | None = None,
        seq_source: Callable[[], int] | None = None,
        clock: Callable[[], float] | None = None,
        on_unhandled: Callable[[Any], None] | None = None,
    ) -> None:
        self._config = config or EncoderConfig()
        self._seq_source = seq_source or self._random_seq
        self._clock = clock or time.time
        self._on_unhandled = on_unhandled

    def _random_seq(self) -> int:
        return random.randint(self._config.msg_seq_min, self._config.msg_seq_max)

    def encode(
        self, message: Sendable, source: Quotable | Mapping[str, Any] | Any | None = None
    ) -> EncodeResult:
        source_msg_id, source_event_id = _quote_ids(source)
        with message_context(quote_msg_id=source_msg_id, quote_event_id=source_event_id):
            return self._encode(message, source_msg_id, source_event_id)

    def _encode(
        self, message: Sendable, source_msg_id: str | None, source_event_id: str | None
    ) -> EncodeResult:
        timestamp = int(round(self._clock()))

        messages: dict[str, Any] = {
            "msg_type": MSG_TYPE_TEXT,
            "content": "",
            "msg_id": source_msg_id,
            "msg_seq": self._seq_source(),
            "timestamp": timestamp,
        }
        files: dict[str, Any] = {
            "msg_id": source_msg_id,
            "msg_seq": self._seq_source(),
            "timestamp": timestamp,
        }
        has_messages = False
        has_files = False
        buttons: list[dict[str, Any]] = []
        brief = Brief()

        for item in normalize_sendable(message):
            elem = _coerce(item)

            if isinstance(elem, Reply):
                messages["msg_id"] = elem.message_id
                files["msg_id"] = elem.message_id
                brief.marker("$reply", [f"message_id={elem.message_id}"])

            elif isinstance(elem, At):
                user = elem.id or "everyone"
                messages["content"] += f"<@{user}>"
                brief.marker("$at", [f"user={user}"])

            elif isinstance(elem, Link):
                messages["content"] += f"<#{elem.channel_id}>"
                brief.marker("$link", [f"channel={elem.channel_id}"])

            elif isinstance(elem, Text):
                messages["content"] += elem.text
                has_messages = True
                brief.text(elem.text)

            elif isinstance(elem, Face):
                messages["content"] += f"<emoji:{elem.id}>"
                has_messages = True
                brief.marker("$face", [f"id={elem.id}"])

            elif isinstance(elem, Media):
                files["file_type"] = FILE_TYPES.get(elem.type, 0)
                files["content"] = "file"
                files["url"] = elem.file
                files["event_id"] = source_event_id
                files["srv_send_msg"] = True
                has_files = True
                brief.marker(elem.type, [f"file={elem.file}"])

            elif isinstance(elem, Markdown):
                messages["markdown"] = {"content": elem.content}
                messages["msg_type"] = MSG_TYPE_MARKDOWN
                has_messages = True
                brief.marker("#markdown", [f"content={elem.content}"])

            elif isinstance(elem, Button):
                buttons.append(elem.data)
                data = json.dumps(elem.data, ensure_ascii=False, separators=(",", ":"))
                brief.marker("$button", [f"data={data}"])

            else:
                log.debug("element_dropped", element_type=getattr(elem, "type", type(item).__name__))
                if self._on_unhandled is not None:
                    self._on_unhandled(item)

        if buttons:
            messages["keyboard"] = build_keyboard(buttons, self._config.keyboard_row_width)

        result = EncodeResult(
            messages=TranscriptPayload(**messages),
            files=FilePayload(**files),
            has_messages=has_messages,
            has_files=has_files,
            brief=str(brief),
        )
        log.debug(
            "message_encoded",
            has_messages=result.has_messages,
            has_files=result.has_files,
            brief=result.brief,
        )
        return result


def encode_message(
    message: Sendable,
    source: Quotable | Any | None = None,
    config: EncoderConfig | None = None,
) -> EncodeResult:
    """Encode with a default ``Encoder``."""
    return Encoder(config).encode(message, source)
