"""Load configuration from .env file. Used for config path and seed overrides."""

import os
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent


def _load_dotenv() -> None:
    """Load .env from project root; existing environment variables win."""
    load_dotenv(_PROJECT_ROOT / ".env")


def get_config_path() -> Path | None:
    """Return scenario config path from MMC_SIM_CONFIG, or None when unset."""
    _load_dotenv()
    value = os.environ.get("MMC_SIM_CONFIG")
    return Path(value) if value else None


def get_default_seed() -> int | None:
    """Return MMC_SIM_SEED as int, or None when unset or not an integer."""
    _load_dotenv()
    value = os.environ.get("MMC_SIM_SEED")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
