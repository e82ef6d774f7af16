"""Routers that expose tool-specific flows."""

from __future__ import annotations

from importlib import import_module

from aiogram import Router


_MODULES: tuple[str, ...] = (
    "base64_codec",
)


def tool_routers() -> tuple[Router, ...]:
    """Return tool routers to be included in the dispatcher."""

    return tuple(import_module(f"{__name__}.{module_name}").router for module_name in _MODULES)


__all__ = ["tool_routers"]
