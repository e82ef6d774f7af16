"""Router package initialization."""

from __future__ import annotations

from aiogram import Router

from . import home, tools


def all_routers() -> tuple[Router, ...]:
    """Return all routers that should be registered on dispatcher startup."""

    # The home router goes first so /start and /help are never shadowed.
    return (home.router, *tools.tool_routers())


__all__ = ["all_routers"]
