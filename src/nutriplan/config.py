"""
Runtime configuration.

Values come from the environment, optionally seeded from a .env file in
the working directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from nutriplan.data.catalog import DEFAULT_CATALOG_PATH

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"[CONFIG] Ignoring non-integer {name}={raw!r}, using {default}")
        return default


@dataclass
class Settings:
    catalog_path: Path = DEFAULT_CATALOG_PATH
    seed: Optional[int] = None
    log_level: str = "INFO"
    prep_days: int = 3
    port: int = 5000
    debug: bool = False


def get_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """Read settings from the environment (after loading .env)."""
    load_dotenv(dotenv_path)
    catalog_path = os.environ.get("NUTRIPLAN_CATALOG_PATH")
    return Settings(
        catalog_path=Path(catalog_path) if catalog_path else DEFAULT_CATALOG_PATH,
        seed=_env_int("NUTRIPLAN_SEED", None),
        log_level=os.environ.get("NUTRIPLAN_LOG_LEVEL", "INFO").upper(),
        prep_days=_env_int("NUTRIPLAN_PREP_DAYS", 3),
        port=_env_int("NUTRIPLAN_PORT", 5000),
        debug=os.environ.get("NUTRIPLAN_DEBUG", "false").lower() == "true",
    )


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
