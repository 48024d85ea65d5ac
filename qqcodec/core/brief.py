"""Flattened text+marker rendering of a message, for logs and diagnostics."""

from __future__ import annotations

from typing import Any, Iterable


class Brief:
    """Append-only accumulator shared by the decoder and the encoder.

    Literal text goes in verbatim; every structural unit contributes exactly
    one marker, in processing order. The result is never parsed back.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []

    def text(self, text: str) -> None:
        if text:
            self._parts.append(text)

    def marker(self, kind: str, fields: Iterable[str] = (), sep: str = ",") -> None:
        """Append ``<kind{sep}field,field,...>``; the separator is kept when there are no fields."""
        self._parts.append(f"<{kind}{sep}{','.join(fields)}>")

    def __str__(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        return sum(len(p) for p in self._parts)


def pairs(items: Iterable[tuple[str, Any]]) -> list[str]:
    return [f"{key}={value}" for key, value in items]
