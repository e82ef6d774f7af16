"""Configuration objects and helpers."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(slots=True, frozen=True)
class BotConfig:
    """Bot-related runtime options."""

    token: str
    max_file_mb: int
    text_threshold: int

    @property
    def max_file_bytes(self) -> int:
        return self.max_file_mb * 1024 * 1024


@dataclass(slots=True, frozen=True)
class RateLimitConfig:
    """Rate limiting options."""

    per_user_per_minute: int
    window_seconds: int = 60


@dataclass(slots=True, frozen=True)
class TranscoderConfig:
    """Default flags handed to the Base64 transcoder when a command omits them."""

    utf8: bool
    urlsafe: bool


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: int


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Aggregate application configuration dataclass."""

    bot: BotConfig
    rate_limit: RateLimitConfig
    transcoder: TranscoderConfig
    logging: LoggingConfig


class Settings(BaseSettings):
    """Runtime configuration parsed from environment variables."""

    bot_token: str = Field(..., alias="BOT_TOKEN")
    max_file_mb: int = Field(15, alias="MAX_FILE_MB", ge=1)
    rate_limit_per_user_per_min: int = Field(30, alias="RATE_LIMIT_PER_USER_PER_MIN", ge=1)
    text_threshold: int = Field(3500, alias="TEXT_THRESHOLD", ge=1)
    base64_utf8: bool = Field(True, alias="BASE64_UTF8")
    base64_urlsafe: bool = Field(False, alias="BASE64_URLSAFE")
    log_level: str | int = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str | int) -> int:
        if isinstance(value, int):
            return value
        name = value.upper().strip()
        if name.isdigit():
            return int(name)
        if name not in logging._nameToLevel:  # noqa: SLF001 - accessing mapping for conversion only
            raise ValueError(f"Unknown log level: {value}")
        return logging._nameToLevel[name]

    def to_dataclass(self) -> AppConfig:
        """Transform runtime settings into frozen dataclasses."""

        return AppConfig(
            bot=BotConfig(
                token=self.bot_token,
                max_file_mb=self.max_file_mb,
                text_threshold=self.text_threshold,
            ),
            rate_limit=RateLimitConfig(per_user_per_minute=self.rate_limit_per_user_per_min),
            transcoder=TranscoderConfig(utf8=self.base64_utf8, urlsafe=self.base64_urlsafe),
            logging=LoggingConfig(level=self.log_level),
        )


def load_settings() -> AppConfig:
    """Load settings from the environment and return dataclasses."""

    return Settings().to_dataclass()


__all__ = [
    "AppConfig",
    "BotConfig",
    "LoggingConfig",
    "RateLimitConfig",
    "Settings",
    "TranscoderConfig",
    "load_settings",
]
