"""Application entry point for the Base64 toolbox bot."""

from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
import structlog

from .commands import setup_bot_commands
from .config import AppConfig, load_settings
from .middlewares import ErrorHandlingMiddleware, LoggingMiddleware, RateLimitMiddleware
from .rate_limit import MemoryRateLimiter
from .routers import all_routers


def configure_logging(config: AppConfig) -> None:
    """Configure structured logging with JSON output."""

    level = config.logging.level
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def register_middlewares(dispatcher: Dispatcher, config: AppConfig, logger: structlog.stdlib.BoundLogger) -> None:
    """Attach global middlewares required for the bot."""

    dispatcher.update.outer_middleware(ErrorHandlingMiddleware(logger=logger.bind(middleware="errors")))
    dispatcher.update.outer_middleware(LoggingMiddleware(logger=logger.bind(middleware="logging")))
    dispatcher.message.middleware(
        RateLimitMiddleware(
            MemoryRateLimiter(),
            limit=config.rate_limit.per_user_per_minute,
            window=config.rate_limit.window_seconds,
            logger=logger.bind(middleware="rate_limit"),
        ),
    )


def register_routers(dispatcher: Dispatcher) -> None:
    """Include all routers defined in the project."""

    for router in all_routers():
        dispatcher.include_router(router)


def build_dispatcher(config: AppConfig, logger: structlog.stdlib.BoundLogger) -> Dispatcher:
    """Create a dispatcher with configuration, middlewares and routers wired in."""

    dispatcher = Dispatcher()
    dispatcher["config"] = config
    register_middlewares(dispatcher, config, logger)
    register_routers(dispatcher)
    return dispatcher


async def main(config: AppConfig) -> None:
    """Bootstrap application layers and start polling."""

    logger = structlog.get_logger("bot")
    bot = Bot(
        token=config.bot.token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dispatcher = build_dispatcher(config, logger)

    async def on_startup(bot: Bot) -> None:
        await setup_bot_commands(bot)
        logger.info("startup_complete")

    async def on_shutdown() -> None:
        logger.info("shutdown_complete")

    dispatcher.startup.register(on_startup)
    dispatcher.shutdown.register(on_shutdown)

    try:
        await dispatcher.start_polling(bot)
    finally:
        await bot.session.close()


def run() -> None:
    """Entry-point helper used by command line scripts."""

    config = load_settings()
    configure_logging(config)
    asyncio.run(main(config))


if __name__ == "__main__":
    run()
