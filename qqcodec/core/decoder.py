"""Decoding of inbound template strings into typed elements."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, MutableMapping, Sequence

from qqcodec.core.brief import Brief, pairs
from qqcodec.core.tags import QUOTE_PAIRS, resolve_tag
from qqcodec.elements import Element, Media, Text, build_element, stringify
from qqcodec.utils.logging import get_logger, message_context

log = get_logger(__name__)


def _quoted_run(open_: str, close: str) -> str:
    return f"{re.escape(open_)}[^{re.escape(close)}]*?{re.escape(close)}"


# (opener, closer, pattern); quoted runs are literal text, and the first
# alternative that matches leftmost wins
_ALTERNATIVES: tuple[tuple[str, str, str], ...] = tuple(
    [(o, c, _quoted_run(o, c)) for o, c in QUOTE_PAIRS] + [("<", ">", r"<[^>]+?>")]
)


@lru_cache(maxsize=None)
def _token_re(live: tuple[int, ...]) -> re.Pattern[str]:
    return re.compile("|".join(_ALTERNATIVES[i][2] for i in live))


class _Scanner:
    """Finds the next quoted run or tag without rescanning dead openers.

    An alternative is live while its next usable opener at or after the scan
    position precedes the last closer in the template. Dead alternatives are
    left out of the pattern; an opener that can never close is never tried.
    """

    def __init__(self, template: str) -> None:
        self._template = template
        self._last_close = [template.rfind(c) for _, c, _ in _ALTERNATIVES]
        self._next_open = [self._find_opener(i, 0) for i in range(len(_ALTERNATIVES))]

    def _find_opener(self, i: int, start: int) -> int:
        opener, closer, _ = _ALTERNATIVES[i]
        nxt = self._template.find(opener, start)
        # "<>" is not a tag
        while nxt >= 0 and closer == ">" and self._template.startswith(">", nxt + 1):
            nxt = self._template.find(opener, nxt + 1)
        return nxt

    def _live(self, pos: int) -> tuple[int, ...]:
        live = []
        for i in range(len(_ALTERNATIVES)):
            nxt = self._next_open[i]
            if 0 <= nxt < pos:
                nxt = self._next_open[i] = self._find_opener(i, pos)
            if 0 <= nxt < self._last_close[i]:
                live.append(i)
        return tuple(live)

    def search(self, pos: int) -> re.Match[str] | None:
        live = self._live(pos)
        if not live:
            return None
        return _token_re(live).search(self._template, pos)


@dataclass(frozen=True)
class DecodeResult:
    elements: tuple[Element, ...]
    brief: str


def tokenize(
    template: str,
    mentions: Sequence[Mapping[str, Any]] = (),
    brief: Brief | None = None,
) -> list[Element]:
    """Scan a template into text and tag elements, in source order."""
    brief = brief if brief is not None else Brief()
    elements: list[Element] = []
    scanner = _Scanner(template)
    pos = 0

    while pos < len(template):
        match = scanner.search(pos)
        if match is None:
            break

        prev_text = template[pos:match.start()]
        if prev_text:
            elements.append(Text(text=prev_text))
            brief.text(prev_text)
        pos = match.end()

        segment = match.group(0)
        if not segment.startswith("<"):
            elements.append(Text(text=segment))
            brief.text(segment)
            continue

        resolved = resolve_tag(segment[1:-1], mentions)
        elements.append(resolved.element)
        brief.marker(resolved.type, resolved.tokens, sep=":")

    rest = template[pos:]
    if rest:
        elements.append(Text(text=rest))
        brief.text(rest)

    return elements


def adapt_attachment(record: Mapping[str, Any], brief: Brief | None = None) -> Element:
    """Convert one attachment record into a media element."""
    data = {k: v for k, v in record.items() if k != "content_type"}
    kind = stringify(record.get("content_type")).split("/", 1)[0]

    if brief is not None:
        brief.marker(f"${kind}", pairs((k, stringify(v)) for k, v in data.items()))

    src = data.get("src") or data.get("url") or ""
    url = data.get("url") or data.get("src") or ""
    element = build_element(kind, {**data, "src": src, "url": url})
    if not isinstance(element, Media):
        log.debug("attachment_not_media", content_type=record.get("content_type"))
    return element


def decode_message(payload: MutableMapping[str, Any]) -> DecodeResult:
    """Decode an inbound payload's ``content`` plus attachments.

    ``attachments`` and ``mentions`` are removed from ``payload``.
    """
    attachments = payload.pop("attachments", None) or []
    mentions = payload.pop("mentions", None) or []
    brief = Brief()

    with message_context(message_id=payload.get("id")):
        elements = tokenize(payload.get("content") or "", mentions, brief)
        for record in attachments:
            elements.append(adapt_attachment(record, brief))

        result = DecodeResult(elements=tuple(elements), brief=str(brief))
        log.debug("message_decoded", elements=len(result.elements), brief=result.brief)
    return result
