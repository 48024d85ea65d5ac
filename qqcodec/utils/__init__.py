"""Utility modules for qqcodec."""

from .logging import get_logger, message_context, setup_logging

__all__ = [
    "get_logger",
    "message_context",
    "setup_logging",
]
