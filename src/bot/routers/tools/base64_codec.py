"""Base64 encode/decode handlers."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, replace
from html import escape

import structlog
from aiogram import Bot, F, Router
from aiogram.enums import ChatType
from aiogram.filters import Command, CommandObject
from aiogram.types import Document, Message

from core.errors import ToolValidationError
from core.utils import base64_

from ...config import AppConfig, TranscoderConfig
from ...utils.responders import build_text_response, send_response

router = Router(name="tools-base64")
logger = structlog.get_logger(__name__)

_OPTION_PATTERN = re.compile(r"(utf8|urlsafe)=(\S*)(?:\s+|$)", re.IGNORECASE)
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass(slots=True, frozen=True)
class Base64Options:
    """Flags passed to the transcoder for a single request."""

    utf8: bool = True
    urlsafe: bool = False

    @classmethod
    def from_config(cls, config: TranscoderConfig) -> Base64Options:
        return cls(utf8=config.utf8, urlsafe=config.urlsafe)

    def describe(self) -> str:
        byte_mode = "UTF-8" if self.utf8 else "ASCII"
        alphabet = "URL-safe" if self.urlsafe else "standard"
        return f"{byte_mode}, {alphabet}"


def _parse_flag(name: str, raw: str) -> bool:
    value = raw.lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ToolValidationError(f"Option {name} expects on/off, got {raw!r}.")


def parse_arguments(args: str | None, defaults: Base64Options) -> tuple[Base64Options, str]:
    """Split leading ``utf8=``/``urlsafe=`` options from the payload.

    Options are only recognised before the payload starts; everything after
    the first non-option token is returned verbatim.
    """

    options = defaults
    text = (args or "").lstrip()
    position = 0
    while match := _OPTION_PATTERN.match(text, position):
        name = match.group(1).lower()
        options = replace(options, **{name: _parse_flag(name, match.group(2))})
        position = match.end()
    return options, text[position:]


def _reply_payload(message: Message) -> str | None:
    reply = message.reply_to_message
    if reply is None:
        return None
    return reply.text or reply.caption


def _extract_request(
    message: Message,
    command: CommandObject | None,
    defaults: Base64Options,
) -> tuple[Base64Options, str]:
    options, payload = parse_arguments(command.args if command else None, defaults)
    if not payload.strip():
        payload = _reply_payload(message) or ""
    if not payload.strip():
        raise ToolValidationError("Send text after the command or reply to a message with content to process.")
    return options, payload


def _title(action: str, options: Base64Options) -> str:
    return f"{action} ({options.describe()})"


async def _answer_error(message: Message, error: Exception) -> None:
    await message.answer(f"!  <b>{escape(str(error))}</b>")


@router.message(Command("b64encode"))
async def b64_encode_handler(message: Message, command: CommandObject, config: AppConfig) -> None:
    """Encode the provided text to Base64."""

    try:
        options, payload = _extract_request(message, command, Base64Options.from_config(config.transcoder))
        encoded = base64_.encode_text(payload, utf8=options.utf8, urlsafe=options.urlsafe)
    except (ToolValidationError, base64_.Base64Error) as exc:
        await _answer_error(message, exc)
        return
    response = build_text_response(
        encoded,
        threshold=config.bot.text_threshold,
        file_name="encoded.txt",
        title=_title("Base64 Encode", options),
    )
    await send_response(message, response)


@router.message(Command("b64decode"))
async def b64_decode_handler(message: Message, command: CommandObject, config: AppConfig) -> None:
    """Decode Base64 text back to a string."""

    try:
        options, payload = _extract_request(message, command, Base64Options.from_config(config.transcoder))
        decoded = base64_.decode_text(payload, utf8=options.utf8, urlsafe=options.urlsafe)
    except (ToolValidationError, base64_.Base64Error) as exc:
        await _answer_error(message, exc)
        return
    response = build_text_response(
        decoded,
        threshold=config.bot.text_threshold,
        file_name="decoded.txt",
        title=_title("Base64 Decode", options),
    )
    await send_response(message, response)


def _target_document(message: Message) -> Document | None:
    if message.document is not None:
        return message.document
    if message.reply_to_message is not None:
        return message.reply_to_message.document
    return None


async def _encode_document(
    message: Message,
    bot: Bot,
    document: Document,
    options: Base64Options,
    config: AppConfig,
) -> None:
    if document.file_size is not None and document.file_size > config.bot.max_file_bytes:
        raise ToolValidationError(f"File is too large. The limit is {config.bot.max_file_mb} MB.")

    source = await bot.download(document)
    if source is None:
        raise ToolValidationError("Could not download the file, please send it again.")
    destination = io.StringIO()
    written = base64_.encode_stream(source, destination, urlsafe=options.urlsafe)
    name = document.file_name or "file"
    logger.info("file_encoded", file_size=document.file_size, chars=written, urlsafe=options.urlsafe)

    response = build_text_response(
        destination.getvalue(),
        threshold=config.bot.text_threshold,
        file_name=f"{name}.b64.txt",
        title=_title(f"Base64 of {name}", options),
    )
    await send_response(message, response)


@router.message(Command("b64file"))
async def b64_file_handler(message: Message, command: CommandObject, bot: Bot, config: AppConfig) -> None:
    """Encode a file sent with the command as caption, or the file being replied to."""

    try:
        document = _target_document(message)
        if document is None:
            raise ToolValidationError("Attach a file with /b64file as its caption or reply to a file.")
        options, _ = parse_arguments(command.args, Base64Options.from_config(config.transcoder))
        await _encode_document(message, bot, document, options, config)
    except ToolValidationError as exc:
        await _answer_error(message, exc)


@router.message(F.document, F.chat.type == ChatType.PRIVATE)
async def b64_document_handler(message: Message, bot: Bot, config: AppConfig) -> None:
    """Encode any file uploaded in a private chat using the configured defaults."""

    try:
        await _encode_document(
            message,
            bot,
            message.document,
            Base64Options.from_config(config.transcoder),
            config,
        )
    except ToolValidationError as exc:
        await _answer_error(message, exc)
