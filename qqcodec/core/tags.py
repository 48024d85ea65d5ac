"""Resolution of one ``<...>`` tag into a canonical element."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from qqcodec.elements import Element, build_element, stringify

# (open, close) pairs, shared with the tokenizer
QUOTE_PAIRS: tuple[tuple[str, str], ...] = (
    ('"', '"'),
    ("'", "'"),
    ("`", "`"),
    ("“", "”"),
    ("‘", "’"),
)

_SHORTHAND_FACE_RE = re.compile(r"^[a-z]+:[0-9]+$")


def trim_quote(value: str) -> str:
    """Strip one layer of surrounding quotes, if present."""
    if len(value) < 2:
        return value
    for open_, close in QUOTE_PAIRS:
        if value.startswith(open_) and value.endswith(close):
            return value[len(open_):-len(close)]
    return value


@dataclass
class ResolvedTag:
    element: Element
    type: str
    tokens: list[str]


def _mention_tokens(mentions: Sequence[Mapping[str, Any]], user_id: str) -> list[str]:
    for record in mentions:
        if stringify(record.get("id")) == user_id:
            return [f"{key}={stringify(value)}" for key, value in record.items()]
    return []


def _parse_tokens(tokens: list[str]) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for token in tokens:
        key, _, value = token.partition("=")
        attrs[key.lower()] = trim_quote(value)
    return attrs


def resolve_tag(
    interior: str, mentions: Sequence[Mapping[str, Any]] = ()
) -> ResolvedTag:
    """Resolve a tag's interior (without the angle brackets).

    The first comma-separated token is the type and the rest are
    ``key=value`` attributes. Normalization rules are tried in order and
    the first that applies wins; a tag no rule matches passes through with
    its literal type and attributes.
    """
    type_, *tokens = interior.split(",")

    if type_.startswith("faceType"):
        type_ = "face"
        renamed = []
        for token in tokens:
            key, sep, value = token.partition("=")
            renamed.append(f"id{sep}{value}" if key == "faceId" else token)
        tokens = renamed
    elif type_.startswith("@!"):
        tokens = _mention_tokens(mentions, type_[2:])
        type_ = "at"
    elif type_ == "@everyone":
        type_ = "at"
        tokens = ["all=true"]
    elif _SHORTHAND_FACE_RE.match(type_):
        tokens = ["id=" + type_.split(":", 1)[1]]
        type_ = "face"

    element = build_element(type_, _parse_tokens(tokens))
    return ResolvedTag(element=element, type=type_, tokens=tokens)
