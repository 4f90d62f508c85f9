import logging
import os
from pathlib import Path
from typing import List

from .loader import section

logger = logging.getLogger(__name__)


def _split_ids(raw: str) -> List[int]:
    return [int(cid.strip()) for cid in raw.split(",") if cid.strip()]


class Core:
    def __init__(self, config: dict | None = None) -> None:
        discord_cfg = section(config, "discord")
        models_cfg = section(config, "models")

        token_env = str(discord_cfg.get("token_env", "DISCORD_API_TOKEN"))
        openai_env = str(discord_cfg.get("openai_key_env", "OPENAI_API_KEY"))

        self.DISCORD_API_TOKEN: str | None = os.getenv(token_env)
        self.OPENAI_API_KEY: str | None = os.getenv(openai_env)

        # Channels to index per guild; empty means every viewable text channel.
        index_ids_cfg = discord_cfg.get("index_channel_ids")
        if index_ids_cfg:
            self.INDEX_CHANNEL_IDS: List[int] = [int(cid) for cid in index_ids_cfg]
        else:
            self.INDEX_CHANNEL_IDS = _split_ids(os.getenv("INDEX_CHANNEL_IDS", ""))

        admin_ids_cfg = discord_cfg.get("admin_user_ids")
        if admin_ids_cfg:
            self.ADMIN_USER_IDS: List[int] = [int(uid) for uid in admin_ids_cfg]
        else:
            self.ADMIN_USER_IDS = _split_ids(os.getenv("ADMIN_USER_IDS", ""))

        auto_respond = discord_cfg.get("auto_respond_channel_id", os.getenv("AUTO_RESPOND_CHANNEL_ID", ""))
        self.AUTO_RESPOND_CHANNEL_ID: int | None = int(auto_respond) if str(auto_respond).strip() else None

        self.BOT_NAME: str = str(discord_cfg.get("bot_name", os.getenv("BOT_NAME", "Support Bot")))

        self.MSG_MODEL_ID: str | None = models_cfg.get("message_model") or os.getenv("MSG_MODEL_ID")
        self.MAX_OUTPUT_TOKENS: int = int(models_cfg.get("max_output_tokens", os.getenv("MAX_OUTPUT_TOKENS", "2048")))
        self.TEMPERATURE: float = float(models_cfg.get("temperature", os.getenv("TEMPERATURE", "0.7")))
        self.GROUND_TRUTH_FILE: str = str(
            models_cfg.get("ground_truth_file", os.getenv("GROUND_TRUTH_FILE", "data/ground_truth.txt"))
        )

        required = [
            ("DISCORD_API_TOKEN", self.DISCORD_API_TOKEN),
            ("OPENAI_API_KEY", self.OPENAI_API_KEY),
            ("MSG_MODEL_ID", self.MSG_MODEL_ID),
        ]
        missing = [name for name, val in required if not val]
        if missing:
            raise ValueError(f"Missing environment variables: {', '.join(missing)}")

        self.ground_truth: str = self._load_ground_truth()

    def _load_ground_truth(self) -> str:
        """Load authoritative facts from the configured file."""

        file_path = (self.GROUND_TRUTH_FILE or "").strip()
        if not file_path:
            return ""

        path = Path(file_path)
        if not path.is_file():
            logger.info("Ground truth file %s not found; skipping.", path)
            return ""

        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            logger.warning("Failed to read ground truth file %s: %s", path, exc)
            return ""
