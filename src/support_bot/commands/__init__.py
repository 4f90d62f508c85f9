"""
Slash command registry.

Every module under ``handlers/`` is imported when this package loads; cogs
decorated with :func:`register_cog` are collected in import order and attached
to the bot by :func:`setup` from ``SupportBot.setup_hook``. A cog registered
twice is kept once, and a cog the bot already carries is not added again.
"""

from __future__ import annotations

import logging
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules
from typing import List, Optional, Type

from discord.ext import commands as commands_ext

logger = logging.getLogger(__name__)

_COG_CLASSES: List[Type[commands_ext.Cog]] = []


def register_cog(cls: Optional[Type[commands_ext.Cog]] = None):
    """Decorator registering a Cog class for later attachment to the bot."""

    def _register(cog_cls: Type[commands_ext.Cog]):
        if not issubclass(cog_cls, commands_ext.Cog):
            raise TypeError("register_cog expects a discord.ext.commands.Cog subclass")
        if cog_cls not in _COG_CLASSES:
            _COG_CLASSES.append(cog_cls)
        return cog_cls

    if cls is None:
        return _register
    return _register(cls)


async def setup(bot: commands_ext.Bot) -> None:
    """Attach registered cogs to ``bot`` (call from ``Bot.setup_hook``)."""

    for cog_cls in _COG_CLASSES:
        if bot.get_cog(cog_cls.__name__):
            continue
        await bot.add_cog(cog_cls(bot))

    if _COG_CLASSES:
        logger.info("Registered %d command cog(s)", len(_COG_CLASSES))
    else:
        logger.warning("No command cogs discovered; command tree is empty")


def _import_handlers() -> None:
    handlers_dir = Path(__file__).resolve().parent / "handlers"
    for info in iter_modules([str(handlers_dir)]):
        if not info.name.startswith("_"):
            import_module(f"{__name__}.handlers.{info.name}")


_import_handlers()


__all__ = [
    "register_cog",
    "setup",
]
