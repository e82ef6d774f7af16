"""Custom middlewares for the bot."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from aiogram import BaseMiddleware
from aiogram.exceptions import TelegramAPIError
from aiogram.types import TelegramObject

from .rate_limit import RateLimitExceeded, RateLimiter

Handler = Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]]


class LoggingMiddleware(BaseMiddleware):
    """Log every processed update together with its handling time."""

    def __init__(self, *, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        super().__init__()
        self._logger = logger or structlog.get_logger("bot.updates")

    async def __call__(self, handler: Handler, event: TelegramObject, data: dict[str, Any]) -> Any:
        user = data.get("event_from_user")
        log = self._logger.bind(
            update_type=type(event).__name__,
            user_id=user.id if user else None,
        )
        started = time.perf_counter()
        try:
            return await handler(event, data)
        finally:
            log.info("update_handled", duration_ms=round((time.perf_counter() - started) * 1000, 2))


class RateLimitMiddleware(BaseMiddleware):
    """Enforce per-user rate limits."""

    def __init__(
        self,
        limiter: RateLimiter,
        *,
        limit: int,
        window: int = 60,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        super().__init__()
        self._limiter = limiter
        self._limit = limit
        self._window = window
        self._logger = logger or structlog.get_logger("bot.rate_limit")

    @staticmethod
    def _key(data: dict[str, Any]) -> str | None:
        user = data.get("event_from_user")
        if user and user.id:
            return str(user.id)
        chat = data.get("event_chat")
        if chat and chat.id:
            return str(chat.id)
        return None

    async def __call__(self, handler: Handler, event: TelegramObject, data: dict[str, Any]) -> Any:
        key = self._key(data)
        if not key:
            return await handler(event, data)
        status = await self._limiter.hit(key, self._limit, self._window)
        if not status.allowed:
            self._logger.info("rate_limited", key=key, retry_after=status.retry_after)
            raise RateLimitExceeded(status)
        return await handler(event, data)


class ErrorHandlingMiddleware(BaseMiddleware):
    """Catch exceptions, log them, and notify the user."""

    def __init__(self, *, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        super().__init__()
        self._logger = logger or structlog.get_logger("bot.errors")

    async def __call__(self, handler: Handler, event: TelegramObject, data: dict[str, Any]) -> Any:
        try:
            return await handler(event, data)
        except RateLimitExceeded as exc:
            await self._safe_notify(
                data,
                f"Too many requests. Please retry in {exc.status.retry_after} seconds.",
            )
        except Exception:
            self._logger.exception("unhandled_error")
            await self._safe_notify(data, "Sorry, something went wrong. Please try again later.")
        return None

    async def _safe_notify(self, data: dict[str, Any], text: str) -> None:
        bot = data.get("bot")
        chat = data.get("event_chat")
        user = data.get("event_from_user")
        target = chat.id if chat else (user.id if user else None)
        if bot is None or target is None:
            return
        try:
            await bot.send_message(target, text)
        except TelegramAPIError:
            self._logger.warning("error_notification_failed", exc_info=True)


__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "RateLimitMiddleware",
]
