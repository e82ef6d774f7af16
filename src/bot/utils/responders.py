"""Helpers for preparing tool responses based on payload size."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Callable

from aiogram.types import BufferedInputFile, Message

TELEGRAM_TEXT_LIMIT = 4096
DEFAULT_TEXT_THRESHOLD = 3500
DEFAULT_FILE_NAME = "result.txt"


@dataclass(slots=True)
class ToolResponse:
    """Normalized payload returned by tool handlers."""

    text: str | None = None
    document: BufferedInputFile | None = None
    parse_mode: str | None = None
    file_name: str | None = None

    @property
    def is_document(self) -> bool:
        """Return ``True`` when the payload should be sent as a file."""

        return self.document is not None

    def as_message_kwargs(self) -> dict:
        """Return keyword arguments usable with ``message.answer`` or ``message.answer_document``."""

        payload: dict = {}
        if self.document is not None:
            payload["document"] = self.document
            if self.text:
                payload["caption"] = self.text
        else:
            payload["text"] = self.text or ""
        if self.parse_mode:
            payload["parse_mode"] = self.parse_mode
        return payload


def format_block(title: str, content: str) -> str:
    """Render ``content`` as an HTML ``<pre>`` block under a bold title."""

    return f"<b>{escape(title)}</b>\n<pre>{escape(content) if content else '(empty)'}</pre>"


def build_text_response(
    text: str,
    *,
    threshold: int = DEFAULT_TEXT_THRESHOLD,
    file_name: str = DEFAULT_FILE_NAME,
    title: str | None = None,
    formatter: Callable[[str, str], str] = format_block,
    encoding: str = "utf-8",
    parse_mode: str | None = "HTML",
) -> ToolResponse:
    """Return a ``ToolResponse`` deciding between text and document modes.

    Short results are rendered inline with ``formatter``; anything longer than
    ``threshold`` characters is attached as ``file_name`` with ``title`` as
    the caption.
    """

    if threshold < 1:
        msg = "threshold must be at least 1"
        raise ValueError(msg)

    if len(text) <= threshold:
        rendered = formatter(title, text) if title else escape(text)
        # Escaping can push a short result over the hard message limit.
        if len(rendered) <= TELEGRAM_TEXT_LIMIT:
            return ToolResponse(text=rendered, parse_mode=parse_mode)

    document = BufferedInputFile(text.encode(encoding), filename=file_name)
    return ToolResponse(
        document=document,
        text=escape(title) if title else None,
        parse_mode=parse_mode,
        file_name=file_name,
    )


async def send_response(message: Message, response: ToolResponse) -> None:
    """Deliver ``response`` as a text message or a document."""

    if response.is_document:
        await message.answer_document(**response.as_message_kwargs())
    else:
        await message.answer(**response.as_message_kwargs())
