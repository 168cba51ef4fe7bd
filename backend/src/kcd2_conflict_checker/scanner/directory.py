"""Mod folder discovery and per-package indexing.

Each immediate subfolder of a content root is one mod.  Every ``.pak``
found anywhere beneath it becomes a ``PackageContribution`` carrying the
package's normalised internal paths.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path, PurePosixPath

from kcd2_conflict_checker.archive.handler import list_archive_paths
from kcd2_conflict_checker.constants import (
    METADATA_FILE_MARKER,
    PACKAGE_EXTENSION,
    SKIP_FOLDER_MARKER,
)
from kcd2_conflict_checker.scanner.identity import (
    ModFolder,
    ModIdentity,
    ModSource,
    PackageContribution,
    source_prefix,
)
from kcd2_conflict_checker.scanner.names import NameResolver
from kcd2_conflict_checker.services.progress import ProgressCallback, noop_progress

logger = logging.getLogger(__name__)


class ScanCancelledError(Exception):
    """Raised when a scan is abandoned through its cancel event."""


def iter_mod_folders(root: Path, source: ModSource) -> list[ModFolder]:
    """List the mod folders directly under *root*, sorted by name.

    A missing or unreadable root contributes no mods.
    """
    try:
        if not root.is_dir():
            return []
        children = sorted((p for p in root.iterdir() if p.is_dir()), key=lambda p: p.name)
    except OSError as exc:
        logger.warning("Cannot list %s: %s", root, exc)
        return []
    return [
        ModFolder(root=root, folder_name=p.name, source=source)
        for p in children
        if SKIP_FOLDER_MARKER not in p.name.lower()
    ]


def find_packages(mod_dir: Path) -> list[Path]:
    """All package files beneath *mod_dir*, matched case-insensitively."""
    try:
        return sorted(
            p
            for p in mod_dir.rglob("*")
            if p.suffix.lower() == PACKAGE_EXTENSION and p.is_file()
        )
    except OSError as exc:
        logger.warning("Cannot walk %s: %s", mod_dir, exc)
        return []


def is_metadata_package(paths: list[str]) -> bool:
    """True for packages holding nothing but marker-named XML files."""
    return bool(paths) and all(
        p.endswith(".xml") and METADATA_FILE_MARKER in PurePosixPath(p).name for p in paths
    )


def package_label(mod_name: str, source: ModSource, package_path: Path) -> str:
    """Display label for one package of a mod.

    The package filename is appended unless it already carries the mod name
    (ignoring spaces and case).
    """
    stem = package_path.stem
    prefix = f"[{source_prefix(source)}] {mod_name}"
    if mod_name.replace(" ", "").lower() in stem.replace(" ", "").lower():
        return prefix
    return f"{prefix} ({stem})"


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ScanCancelledError("Scan cancelled")


def scan_directory(
    root: Path,
    source: ModSource,
    resolver: NameResolver,
    *,
    cancel_event: threading.Event | None = None,
    on_progress: ProgressCallback = noop_progress,
) -> list[PackageContribution]:
    """Index every package of every mod folder under *root*."""
    folders = iter_mod_folders(root, source)
    contributions: list[PackageContribution] = []

    for folder in folders:
        _check_cancelled(cancel_event)
        mod_name = resolver.resolve(folder.root, folder.folder_name, source)
        identity = ModIdentity(name=mod_name, source=source)
        on_progress("scan", f"Scanning {identity.label}", -1)

        for package in find_packages(folder.path):
            paths = list_archive_paths(package)
            if is_metadata_package(paths):
                logger.debug("Skipping metadata package %s", package)
                continue
            contributions.append(
                PackageContribution(
                    identity=identity,
                    label=package_label(mod_name, source, package),
                    package_path=package,
                    paths=tuple(paths),
                )
            )

    logger.info(
        "Scanned %d %s mod folders in %s: %d packages",
        len(folders),
        source,
        root,
        len(contributions),
    )
    return contributions


def discover_mod_names(root: Path, source: ModSource, resolver: NameResolver) -> list[str]:
    """Quickly list mod labels under *root* without reading any package."""
    labels: list[str] = []
    for folder in iter_mod_folders(root, source):
        if not find_packages(folder.path):
            continue
        name = resolver.resolve(folder.root, folder.folder_name, source)
        label = ModIdentity(name=name, source=source).label
        if label not in labels:
            labels.append(label)
    return labels
