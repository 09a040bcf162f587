"""Persistence of the currently selected player between invocations."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = Path("/tmp/current_player")


class SelectionStore(Protocol):
    def read(self) -> Optional[str]: ...

    def write(self, suffix: str) -> None: ...


class FileSelectionStore:
    """Keeps the selected bus-name suffix as raw UTF-8 text in one file.

    There is no locking: concurrent writers race and the last one wins.
    Each write replaces the whole file, so readers never see a partial
    record.
    """

    def __init__(self, path: Path = DEFAULT_STATE_FILE) -> None:
        self.path = Path(path)

    def read(self) -> Optional[str]:
        """Return the stored suffix, or None when there is no usable record."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.warning("Cannot read selection from %s", self.path, exc_info=True)
            return None

    def write(self, suffix: str) -> None:
        """Replace the stored suffix; raises OSError on failure."""
        temp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.tmp")
        try:
            temp_path.write_text(suffix, encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        logger.info("Selected player %s", suffix)


class MemorySelectionStore:
    """In-process store, used when nothing must touch the disk."""

    def __init__(self, value: Optional[str] = None) -> None:
        self.value = value
        self.writes: list[str] = []

    def read(self) -> Optional[str]:
        return self.value

    def write(self, suffix: str) -> None:
        self.value = suffix
        self.writes.append(suffix)
