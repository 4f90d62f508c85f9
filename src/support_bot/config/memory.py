import os

from .loader import section


class Memory:
    def __init__(self, config: dict | None = None) -> None:
        memory_cfg = section(config, "memory")
        self.MAX_TURNS: int = int(memory_cfg.get("max_turns", os.getenv("MEMORY_MAX_TURNS", "20")))
        self.MAX_AGE_MINUTES: float = float(
            memory_cfg.get("max_age_minutes", os.getenv("MEMORY_MAX_AGE_MINUTES", "30"))
        )
        # 0 disables the periodic full reset of every user's history.
        self.RESET_INTERVAL: float = float(memory_cfg.get("reset_interval", os.getenv("MEMORY_RESET_INTERVAL", "0")))
        self.CHANNEL_CONTEXT_LENGTH: int = int(
            memory_cfg.get("channel_context_length", os.getenv("CHANNEL_CONTEXT_LENGTH", "20"))
        )
        self.CHANNEL_CONTEXT_REFRESH: float = float(
            memory_cfg.get("channel_context_refresh", os.getenv("CHANNEL_CONTEXT_REFRESH", "1800"))
        )
