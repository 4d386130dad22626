"""Centralized path management for receiptscope.

All on-disk locations (configuration, stored credential) hang off a single
application home directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_app_home() -> Path:
    """Resolve the application home: $RECEIPTSCOPE_HOME or ~/.receiptscope."""
    override = os.environ.get("RECEIPTSCOPE_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path("~/.receiptscope").expanduser()


@dataclass
class AppPaths:
    """Container for all application paths."""

    root: Path = field(default_factory=_get_app_home)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def config_file(self) -> Path:
        """Client settings TOML file."""
        return self.root / "config.toml"

    @property
    def token_file(self) -> Path:
        """Persisted bearer token for the current user."""
        return self.root / "token"

    def ensure_root(self) -> None:
        """Create the application home if it doesn't exist."""
        self.root.mkdir(parents=True, exist_ok=True)


# Module-level singleton
_paths: AppPaths | None = None


def get_paths() -> AppPaths:
    """Get the singleton AppPaths instance."""
    global _paths
    if _paths is None:
        _paths = AppPaths()
    return _paths


def reset_paths() -> None:
    """Drop the cached singleton so the next get_paths() re-reads the environment."""
    global _paths
    _paths = None
