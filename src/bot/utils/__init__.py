"""Utility helpers for bot routers."""

from .responders import (
    DEFAULT_TEXT_THRESHOLD,
    TELEGRAM_TEXT_LIMIT,
    ToolResponse,
    build_text_response,
    format_block,
    send_response,
)

__all__ = [
    "DEFAULT_TEXT_THRESHOLD",
    "TELEGRAM_TEXT_LIMIT",
    "ToolResponse",
    "build_text_response",
    "format_block",
    "send_response",
]
