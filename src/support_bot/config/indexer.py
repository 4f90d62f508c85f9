import os
from pathlib import Path

from .loader import section

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent.parent.parent / "training-data"


def _split_names(raw: str) -> list[str]:
    return [name.strip() for name in raw.split(",") if name.strip()]


class Indexer:
    def __init__(self, config: dict | None = None) -> None:
        index_cfg = section(config, "indexer")
        self.DATA_DIR: str = str(index_cfg.get("data_dir", os.getenv("TRAINING_DATA_DIR", str(_DEFAULT_DATA_DIR))))
        self.PAGE_SIZE: int = int(index_cfg.get("page_size", os.getenv("INDEX_PAGE_SIZE", "100")))
        self.CHANNEL_CAP: int = int(index_cfg.get("channel_cap", os.getenv("INDEX_CHANNEL_CAP", "500")))
        # Fixed delay (seconds) between successive page requests within one guild run.
        self.REQUEST_INTERVAL: float = float(
            index_cfg.get("request_interval", os.getenv("INDEX_REQUEST_INTERVAL", "1.0"))
        )
        self.RECENT_LIMIT: int = int(index_cfg.get("recent_limit", os.getenv("INDEX_RECENT_LIMIT", "10")))
        self.HIGHLIGHT_LIMIT: int = int(index_cfg.get("highlight_limit", os.getenv("INDEX_HIGHLIGHT_LIMIT", "5")))
        highlights = index_cfg.get("highlight_channels")
        if highlights:
            self.HIGHLIGHT_CHANNELS: list[str] = [str(name) for name in highlights]
        else:
            self.HIGHLIGHT_CHANNELS = _split_names(
                os.getenv("INDEX_HIGHLIGHT_CHANNELS", "announcements,dev-logs")
            )
