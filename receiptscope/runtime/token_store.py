"""File-backed storage for the bearer token between CLI invocations."""

from __future__ import annotations

import os
from pathlib import Path

from receiptscope.runtime.logging import get_logger
from receiptscope.runtime.paths import get_paths

logger = get_logger(__name__)


class FileTokenStore:
    """Keeps a single token in a user-only readable file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path if path is not None else get_paths().token_file

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        token = self.path.read_text(encoding="utf-8").strip()
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # An existing file keeps its old mode through O_CREAT.
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(token)
        logger.debug("Saved credential to %s", self.path)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.debug("Removed credential at %s", self.path)


class MemoryTokenStore:
    """In-process store for embedding and tests."""

    def __init__(self, token: str | None = None) -> None:
        self.token = token

    def load(self) -> str | None:
        return self.token

    def save(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None
