"""Typed rich-message elements replacing free-form attribute dicts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Mapping


def stringify(value: Any) -> str:
    """Render an attribute value the way the wire format spells it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _split_known(
    attrs: Mapping[str, Any], known: tuple[str, ...]
) -> tuple[dict[str, str], dict[str, str]]:
    fields: dict[str, str] = {}
    extra: dict[str, str] = {}
    for key, value in attrs.items():
        key = str(key).lower()
        if key in known:
            fields[key] = stringify(value)
        else:
            extra[key] = stringify(value)
    return fields, extra


@dataclass
class Element(ABC):
    """Base class for one typed unit of message content."""

    type: ClassVar[str] = ""

    @property
    def attrs(self) -> dict[str, Any]:
        return {}

    @classmethod
    @abstractmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Element": ...

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, **self.attrs}


@dataclass
class Text(Element):
    type: ClassVar[str] = "text"

    text: str = ""

    @property
    def attrs(self) -> dict[str, Any]:
        return {"text": self.text}

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Text":
        return cls(text=stringify(attrs.get("text", "")))


@dataclass
class Face(Element):
    type: ClassVar[str] = "face"

    id: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def attrs(self) -> dict[str, Any]:
        return {"id": self.id, **self.extra}

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Face":
        known, extra = _split_known(attrs, ("id",))
        return cls(id=known.get("id", ""), extra=extra)


@dataclass
class At(Element):
    """Mention of one user (``id``) or of everyone (``all``)."""

    type: ClassVar[str] = "at"

    id: str | None = None
    all: bool = False
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def attrs(self) -> dict[str, Any]:
        attrs: dict[str, Any] = {}
        if self.id is not None:
            attrs["id"] = self.id
        if self.all:
            attrs["all"] = True
        attrs.update(self.extra)
        return attrs

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "At":
        everyone = attrs.get("all", False)
        rest = {k: v for k, v in attrs.items() if str(k).lower() != "all"}
        known, extra = _split_known(rest, ("id",))
        return cls(
            id=known.get("id"),
            all=everyone is True or stringify(everyone) == "true",
            extra=extra,
        )


@dataclass
class Link(Element):
    type: ClassVar[str] = "link"

    channel_id: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def attrs(self) -> dict[str, Any]:
        return {"channel_id": self.channel_id, **self.extra}

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Link":
        known, extra = _split_known(attrs, ("channel_id",))
        return cls(channel_id=known.get("channel_id", ""), extra=extra)


@dataclass
class Media(Element):
    file: str = ""
    url: str = ""
    src: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def attrs(self) -> dict[str, Any]:
        attrs: dict[str, Any] = dict(self.extra)
        if self.file:
            attrs["file"] = self.file
        attrs["url"] = self.url
        attrs["src"] = self.src
        return attrs

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Media":
        known, extra = _split_known(attrs, ("file", "url", "src"))
        return cls(
            file=known.get("file", ""),
            url=known.get("url", ""),
            src=known.get("src", ""),
            extra=extra,
        )


@dataclass
class Image(Media):
    type: ClassVar[str] = "image"


@dataclass
class Audio(Media):
    type: ClassVar[str] = "audio"


@dataclass
class Video(Media):
    type: ClassVar[str] = "video"


@dataclass
class Reply(Element):
    type: ClassVar[str] = "reply"

    message_id: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def attrs(self) -> dict[str, Any]:
        return {"message_id": self.message_id, **self.extra}

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Reply":
        known, extra = _split_known(attrs, ("message_id",))
        return cls(message_id=known.get("message_id", ""), extra=extra)


@dataclass
class Markdown(Element):
    type: ClassVar[str] = "markdown"

    content: str = ""

    @property
    def attrs(self) -> dict[str, Any]:
        return {"content": self.content}

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Markdown":
        return cls(content=stringify(attrs.get("content", "")))


@dataclass
class Button(Element):
    """Interactive keyboard button; ``data`` is sent to the platform as-is."""

    type: ClassVar[str] = "button"

    data: dict[str, Any] = field(default_factory=dict)

    @property
    def attrs(self) -> dict[str, Any]:
        return {"data": self.data}

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "Button":
        data = attrs.get("data")
        if isinstance(data, Mapping):
            return cls(data=dict(data))
        return cls(data={str(k).lower(): v for k, v in attrs.items()})


@dataclass
class RawElement(Element):
    """A tag of a kind with no typed variant, kept with its literal attributes."""

    name: str = ""
    raw_attrs: dict[str, str] = field(default_factory=dict)

    @property
    def type(self) -> str:  # type: ignore[override]
        return self.name

    @property
    def attrs(self) -> dict[str, Any]:
        return dict(self.raw_attrs)

    @classmethod
    def from_attrs(cls, attrs: Mapping[str, Any]) -> "RawElement":
        return cls(raw_attrs={str(k).lower(): stringify(v) for k, v in attrs.items()})


ELEMENT_TYPES: dict[str, type[Element]] = {
    cls.type: cls
    for cls in (Text, Face, At, Link, Image, Audio, Video, Reply, Markdown, Button)
}


def build_element(type_: str, attrs: Mapping[str, Any]) -> Element:
    """Construct the typed variant for a canonical kind."""
    cls = ELEMENT_TYPES.get(type_)
    if cls is None:
        return RawElement(
            name=type_,
            raw_attrs={str(k).lower(): stringify(v) for k, v in attrs.items()},
        )
    return cls.from_attrs(attrs)


def element_from_dict(data: Mapping[str, Any]) -> Element:
    """Build an element from a plain ``{"type": ..., **attrs}`` mapping."""
    attrs = {k: v for k, v in data.items() if k != "type"}
    return build_element(str(data.get("type", "")), attrs)


@dataclass
class Quotable:
    """Reference to a prior message being replied to."""

    message_id: str | None = None
    event_id: str | None = None
