from kcd2_conflict_checker.archive.handler import (
    ArchiveEntry,
    ArchiveHandler,
    ZipHandler,
    list_archive_paths,
    open_archive,
)

__all__ = [
    "ArchiveEntry",
    "ArchiveHandler",
    "ZipHandler",
    "list_archive_paths",
    "open_archive",
]
