"""Persistent index store.

Each guild gets one pretty-printed JSON file::

    <data_dir>/server-index-<guild_id>.json

Helpers:
    - path(guild_id)
    - load(guild_id)           -> IndexSnapshot | None
    - load_or_empty(guild_id)  -> IndexSnapshot
    - save(guild_id, snapshot) -> bool

Reads and writes are best-effort: a missing or malformed file loads as
``None`` and a failed write is logged, neither raises. Only a malformed guild
id is reported to the caller (:class:`~support_bot.exceptions.InvalidGroupError`).
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from support_bot.exceptions import InvalidGroupError, PersistenceError

from .models import IndexSnapshot

logger = logging.getLogger(__name__)


def validate_guild_id(guild_id: str | int) -> str:
    """Return ``guild_id`` as a string snowflake or raise ``InvalidGroupError``."""

    text = str(guild_id).strip()
    if not text.isdigit() or int(text) <= 0:
        raise InvalidGroupError(f"Invalid guild id {guild_id!r}")
    return text


class IndexStore:
    """Load/save :class:`IndexSnapshot` files under ``data_dir``."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path(self, guild_id: str | int) -> Path:
        return self.data_dir / f"server-index-{validate_guild_id(guild_id)}.json"

    def _read(self, p: Path) -> IndexSnapshot:
        try:
            with p.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            return IndexSnapshot.from_dict(raw)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise PersistenceError(f"could not read {p}: {exc}") from exc

    def _write(self, p: Path, snapshot: IndexSnapshot) -> None:
        tmp = p.with_suffix(".tmp")
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(snapshot.to_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp, p)
        except (OSError, TypeError, ValueError) as exc:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceError(f"could not write {p}: {exc}") from exc

    def load(self, guild_id: str | int) -> IndexSnapshot | None:
        p = self.path(guild_id)
        if not p.exists():
            logger.warning("No existing index data found at %s, starting fresh", p)
            return None
        try:
            snapshot = self._read(p)
        except PersistenceError as exc:
            logger.warning("Ignoring unreadable index data: %s", exc)
            return None
        logger.info("Loaded index data from %s", p)
        return snapshot

    def load_or_empty(self, guild_id: str | int) -> IndexSnapshot:
        snapshot = self.load(guild_id)
        return snapshot if snapshot is not None else IndexSnapshot()

    def save(self, guild_id: str | int, snapshot: IndexSnapshot) -> bool:
        p = self.path(guild_id)
        try:
            self._write(p, snapshot)
        except PersistenceError as exc:
            logger.error("Error saving index data: %s", exc)
            return False
        logger.info("Index data saved to %s", p)
        return True


__all__ = ["IndexStore", "validate_guild_id"]
