"""
Config loader — reads .env / environment variables into a typed config object.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)

# Load .env from the project root (one level above src/)
_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_ROOT / ".env")

DEFAULT_DATA_DIR = _ROOT / ".data"
NOTIFIED_FILENAME = "notified_positions.json"

MONITOR_MODES = ("positions", "activity")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppConfig:
    telegram_bot_token: str
    telegram_chat_id: str
    target_wallet_address: str
    poll_interval_ms: int = 300_000
    monitor_mode: str = "positions"
    min_position_value: float = 5000.0
    min_price: float = 0.10
    max_price: float = 0.90
    min_activity_value: float = 1000.0
    send_delay_seconds: float = 2.0
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000

    @property
    def notified_path(self) -> Path:
        return self.data_dir / NOTIFIED_FILENAME


def _env_number(name: str, default: str, cast=float):
    raw = os.getenv(name, default).strip()
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_config() -> AppConfig:
    """
    Load configuration from the environment.

    Missing credentials are logged as warnings rather than raised so the
    process still starts; malformed numbers or an unknown MONITOR_MODE raise
    ValueError.
    """
    token = os.getenv("TELEGRAM_BOT_TOKEN", "").strip()
    chat_id = os.getenv("TELEGRAM_CHAT_ID", "").strip()
    wallet = os.getenv("TARGET_WALLET_ADDRESS", "").strip()

    for name, value in (
        ("TELEGRAM_BOT_TOKEN", token),
        ("TELEGRAM_CHAT_ID", chat_id),
        ("TARGET_WALLET_ADDRESS", wallet),
    ):
        if not value:
            log.warning("%s is not set. Copy .env.example to .env and fill it in.", name)

    mode = os.getenv("MONITOR_MODE", "positions").strip().lower()
    if mode not in MONITOR_MODES:
        raise ValueError(f"MONITOR_MODE must be one of {', '.join(MONITOR_MODES)}, got {mode!r}")

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    data_dir = os.getenv("DATA_DIR", "").strip()

    return AppConfig(
        telegram_bot_token=token,
        telegram_chat_id=chat_id,
        target_wallet_address=wallet,
        poll_interval_ms=_env_number("POLL_INTERVAL_MS", "300000", int),
        monitor_mode=mode,
        min_position_value=_env_number("MIN_POSITION_VALUE", "5000"),
        min_price=_env_number("MIN_PRICE", "0.10"),
        max_price=_env_number("MAX_PRICE", "0.90"),
        min_activity_value=_env_number("MIN_ACTIVITY_VALUE", "1000"),
        send_delay_seconds=_env_number("SEND_DELAY_SECONDS", "2"),
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        log_level=log_level,
    )
