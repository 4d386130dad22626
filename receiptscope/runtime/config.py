"""Client settings loaded from config.toml and environment overrides.

Example config.toml:

    [service]
    api_base_url = "https://receipts.example.com"
    timeout = 15

    [display]
    bar_ceiling = 150
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from receiptscope.runtime.logging import get_logger
from receiptscope.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 30.0
DEFAULT_BAR_CEILING = 150


@dataclass(frozen=True)
class ClientSettings:
    """Settings for talking to the receipts service and rendering charts."""

    api_base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    bar_ceiling: int = DEFAULT_BAR_CEILING


def _read_toml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        logger.debug("Config file not found: %s (using defaults)", config_path)
        return {}

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def load_settings(config_path: Path | None = None) -> ClientSettings:
    """Load client settings.

    Precedence, lowest first: built-in defaults, config.toml, environment
    (RECEIPTSCOPE_API_URL, RECEIPTSCOPE_TIMEOUT).

    Raises:
        ValueError: If a configured value cannot be converted.
    """
    if config_path is None:
        config_path = get_paths().config_file

    data = _read_toml(config_path)
    service = data.get("service", {})
    display = data.get("display", {})

    api_base_url = str(service.get("api_base_url", DEFAULT_API_BASE_URL))
    timeout = float(service.get("timeout", DEFAULT_TIMEOUT))
    bar_ceiling = int(display.get("bar_ceiling", DEFAULT_BAR_CEILING))

    env_url = os.environ.get("RECEIPTSCOPE_API_URL", "").strip()
    if env_url:
        api_base_url = env_url
    env_timeout = os.environ.get("RECEIPTSCOPE_TIMEOUT", "").strip()
    if env_timeout:
        timeout = float(env_timeout)

    if bar_ceiling <= 0:
        raise ValueError(f"bar_ceiling must be positive, got {bar_ceiling}")

    settings = ClientSettings(
        api_base_url=api_base_url.rstrip("/"),
        timeout=timeout,
        bar_ceiling=bar_ceiling,
    )
    logger.debug("Loaded settings: %s", settings)
    return settings
