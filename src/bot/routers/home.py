"""Handlers for the home menu and the static help panel."""

from __future__ import annotations

from html import escape

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from ..commands import usage_lines
from ..config import AppConfig

router = Router(name="home")

_HOW_IT_WORKS: tuple[str, ...] = (
    "Binary data is split into 8-bit bytes.",
    "The bytes are grouped into 24-bit chunks (3 bytes).",
    "Each 24-bit chunk is divided into 4 groups of 6 bits.",
    "Each 6-bit group is mapped to a character in the Base64 character set.",
    "A final chunk of 1 or 2 bytes is completed with = padding.",
    "If URL-safe encoding is enabled, + is replaced with - and / with _, and padding is dropped.",
)


def render_start_text() -> str:
    lines = [
        "<b>Base64 Encoder/Decoder</b>",
        "",
        "Send text with /b64encode, Base64 with /b64decode, or upload any file to get its Base64.",
        "Use /help for options and details.",
    ]
    return "\n".join(lines)


def render_help_text(config: AppConfig | None = None) -> str:
    """Build the help panel, mentioning the configured defaults when available."""

    blocks = [
        "<b>Commands</b>\n" + "\n".join(escape(line) for line in usage_lines()),
        (
            "<b>Options</b>\n"
            "utf8=on encodes text as UTF-8 bytes; utf8=off allows ASCII characters only.\n"
            "urlsafe=on uses the URL-safe alphabet without padding."
        ),
    ]
    if config is not None:
        defaults = config.transcoder
        blocks.append(
            "<b>Defaults</b>\n"
            f"utf8={'on' if defaults.utf8 else 'off'} urlsafe={'on' if defaults.urlsafe else 'off'}, "
            f"files up to {config.bot.max_file_mb} MB"
        )
    blocks.append(
        "<b>About Base64</b>\n"
        "Base64 converts binary data into text using 64 characters: A-Z, a-z, 0-9, + and /. "
        "URL-safe Base64 replaces + with - and / with _ so the result can be used in URLs.\n"
        + "\n".join(f"• {escape(step)}" for step in _HOW_IT_WORKS)
    )
    return "\n\n".join(blocks)


@router.message(CommandStart())
async def command_start(message: Message) -> None:
    """Greet the user when they issue /start."""

    await message.answer(render_start_text(), disable_web_page_preview=True)


@router.message(Command("help"))
async def command_help(message: Message, config: AppConfig) -> None:
    """Show the help panel."""

    await message.answer(render_help_text(config), disable_web_page_preview=True)
