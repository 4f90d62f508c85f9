from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict


DEFAULT_CONFIG_PATH = Path("config.toml")


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the bot's TOML config (``config.toml`` or ``$SUPPORT_BOT_CONFIG``).

    Returns an empty dict when the file is missing so every setting falls back
    to its environment variable or default.
    """
    if path is None:
        path = os.getenv("SUPPORT_BOT_CONFIG") or DEFAULT_CONFIG_PATH
    target = Path(path)
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


def section(config: dict | None, name: str) -> Dict[str, Any]:
    """Return ``[supportbot.<name>]`` from a raw config mapping."""

    return (config or {}).get("supportbot", {}).get(name, {})


__all__ = ["load_raw_config", "section", "DEFAULT_CONFIG_PATH"]
