"""Archive handlers for mod packages.

KCD2 ``.pak`` files are plain ZIP containers, so a single stdlib-backed
handler covers both ``.pak`` and ``.zip``.  Only the table of contents is
read; nothing is ever extracted to disk.
"""

from __future__ import annotations

import logging
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pak", ".zip"}


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    filename: str
    is_dir: bool
    size: int = 0


class ArchiveHandler(ABC):
    """Base class for archive format handlers."""

    @abstractmethod
    def list_entries(self) -> list[ArchiveEntry]:
        """Return all entries in the archive."""

    @abstractmethod
    def close(self) -> None:
        """Release resources."""

    def __enter__(self) -> ArchiveHandler:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


class ZipHandler(ArchiveHandler):
    """Handler for ZIP-format packages using stdlib zipfile."""

    def __init__(self, path: str | Path) -> None:
        self._zf = zipfile.ZipFile(path, "r")

    def list_entries(self) -> list[ArchiveEntry]:
        return [
            ArchiveEntry(
                filename=info.filename,
                is_dir=info.filename.endswith("/"),
                size=info.file_size,
            )
            for info in self._zf.infolist()
        ]

    def close(self) -> None:
        self._zf.close()


def open_archive(path: str | Path) -> ArchiveHandler:
    """Open a package and return the appropriate handler.

    Raises:
        ValueError: If the file extension is not supported.
        zipfile.BadZipFile: If the package is corrupt.
        OSError: If the file cannot be opened.
    """
    path = Path(path)
    ext = path.suffix.lower()
    if ext in SUPPORTED_EXTENSIONS:
        return ZipHandler(path)
    raise ValueError(f"Unsupported archive format: {ext}")


def normalize_entry_path(name: str) -> str:
    return name.replace("\\", "/").lower()


def list_archive_paths(path: str | Path) -> list[str]:
    """List the normalised internal file paths of a package.

    Directory entries are dropped.  A package that cannot be opened or
    parsed yields an empty list; the failure is logged, never raised.
    """
    try:
        with open_archive(path) as handler:
            entries = handler.list_entries()
    except (OSError, ValueError, EOFError, NotImplementedError, zipfile.BadZipFile) as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return []
    return [normalize_entry_path(e.filename) for e in entries if not e.is_dir]
