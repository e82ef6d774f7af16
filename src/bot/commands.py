"""Bot command catalogue and helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from aiogram import Bot
from aiogram.types import (
    BotCommand,
    BotCommandScopeAllGroupChats,
    BotCommandScopeAllPrivateChats,
    BotCommandScopeDefault,
)


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Metadata describing a Telegram command exposed by the bot."""

    name: str
    description: str
    usage: str | None = None
    private_only: bool = False


COMMAND_SPECS: tuple[CommandSpec, ...] = (
    CommandSpec("start", "Open the Base64 toolbox"),
    CommandSpec("help", "How to use the bot"),
    CommandSpec(
        "b64encode",
        "Encode text to Base64",
        usage="/b64encode [utf8=on|off] [urlsafe=on|off] <text>",
    ),
    CommandSpec(
        "b64decode",
        "Decode Base64 back to text",
        usage="/b64decode [utf8=on|off] [urlsafe=on|off] <base64>",
    ),
    # Files are easier to send in private chats, keep the group menu short.
    CommandSpec(
        "b64file",
        "Encode an uploaded file to Base64",
        usage="/b64file [urlsafe=on|off] (as a file caption or a reply to a file)",
        private_only=True,
    ),
)


def _build_bot_commands(specs: Sequence[CommandSpec]) -> list[BotCommand]:
    return [BotCommand(command=spec.name, description=spec.description) for spec in specs]


def private_scope_command_specs() -> tuple[CommandSpec, ...]:
    """Commands shown in private chats."""

    return COMMAND_SPECS


def group_scope_command_specs() -> tuple[CommandSpec, ...]:
    """Commands advertised in group chats and in the default scope."""

    return tuple(spec for spec in COMMAND_SPECS if not spec.private_only)


def usage_lines() -> tuple[str, ...]:
    """Return one ``usage - description`` line per command that documents its arguments."""

    return tuple(f"{spec.usage} - {spec.description}" for spec in COMMAND_SPECS if spec.usage)


async def setup_bot_commands(bot: Bot) -> None:
    """Register bot commands for default, private, and group scopes."""

    private_commands = _build_bot_commands(private_scope_command_specs())
    group_commands = _build_bot_commands(group_scope_command_specs())

    await bot.set_my_commands(group_commands, scope=BotCommandScopeDefault())
    await bot.set_my_commands(private_commands, scope=BotCommandScopeAllPrivateChats())
    await bot.set_my_commands(group_commands, scope=BotCommandScopeAllGroupChats())


__all__ = [
    "CommandSpec",
    "COMMAND_SPECS",
    "group_scope_command_specs",
    "private_scope_command_specs",
    "setup_bot_commands",
    "usage_lines",
]
