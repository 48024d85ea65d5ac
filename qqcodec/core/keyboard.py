"""Batching of interactive buttons into keyboard rows."""

from __future__ import annotations

from typing import Any, Sequence

DEFAULT_ROW_WIDTH = 4


def batch_buttons(buttons: Sequence[Any], width: int = DEFAULT_ROW_WIDTH) -> list[list[Any]]:
    """Split buttons into consecutive rows of at most ``width``, keeping order."""
    if width < 1:
        raise ValueError("row width must be positive")
    return [list(buttons[i:i + width]) for i in range(0, len(buttons), width)]


def build_keyboard(buttons: Sequence[Any], width: int = DEFAULT_ROW_WIDTH) -> dict[str, Any]:
    """Wrap batched buttons in the keyboard envelope the message endpoint expects."""
    return {
        "content": {
            "rows": [{"buttons": row} for row in batch_buttons(buttons, width)],
        }
    }
