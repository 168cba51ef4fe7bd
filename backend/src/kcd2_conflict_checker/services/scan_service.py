"""Full conflict scan across the local Mods folder and the Steam Workshop.

Every run is a full rescan: a fresh ``ConflictIndex`` is built, and the
resulting ``ScanReport`` replaces the previous one only when the scan
completes.  The workshop name cache outlives individual scans.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from kcd2_conflict_checker.config import settings
from kcd2_conflict_checker.scanner.directory import discover_mod_names, scan_directory
from kcd2_conflict_checker.scanner.identity import ModSource, PackageContribution
from kcd2_conflict_checker.scanner.names import NameCache, NameResolver
from kcd2_conflict_checker.services.conflict_index import ConflictIndex
from kcd2_conflict_checker.services.progress import ProgressCallback, noop_progress
from kcd2_conflict_checker.steam.client import WorkshopClient
from kcd2_conflict_checker.steam.paths import local_mods_dir, workshop_content_dir

logger = logging.getLogger(__name__)

# Returns a context manager yielding an object with ``fetch_item_title``.
LookupFactory = Callable[[], WorkshopClient]


def _default_lookup_factory() -> WorkshopClient:
    return WorkshopClient(timeout=settings.workshop_timeout)


@dataclass(frozen=True, slots=True)
class ScanReport:
    conflicts: dict[str, list[str]]
    scanned_mods: list[str]
    unique_mod_names: list[str]
    finished_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_empty(self) -> bool:
        return not self.conflicts and not self.scanned_mods


class ModScanner:
    """Runs full scans and keeps the latest completed report."""

    def __init__(
        self,
        cache: NameCache | None = None,
        lookup_factory: LookupFactory | None = _default_lookup_factory,
    ) -> None:
        self.cache = cache if cache is not None else NameCache()
        self._lookup_factory = lookup_factory
        self.latest: ScanReport | None = None

    def _roots(self, game_path: str, steam_path: str) -> list[tuple[ModSource, Path]]:
        roots: list[tuple[ModSource, Path]] = []
        if game_path:
            roots.append((ModSource.local, local_mods_dir(game_path)))
        if steam_path:
            roots.append((ModSource.workshop, workshop_content_dir(steam_path)))
        return roots

    def _open_lookup(self, steam_path: str) -> AbstractContextManager[WorkshopClient | None]:
        if not steam_path or self._lookup_factory is None:
            return nullcontext(None)
        return self._lookup_factory()

    def run_full_scan(
        self,
        game_path: str,
        steam_path: str = "",
        *,
        cancel_event: threading.Event | None = None,
        on_progress: ProgressCallback = noop_progress,
    ) -> ScanReport:
        """Scan both content roots and rebuild the conflict map from scratch.

        Raises ``ScanCancelledError`` if *cancel_event* is set mid-scan; the
        previous report is then left untouched.
        """
        start = time.perf_counter()
        contributions: list[PackageContribution] = []

        with self._open_lookup(steam_path) as client:
            resolver = NameResolver(
                self.cache,
                client.fetch_item_title if client is not None else None,
                cancel_event=cancel_event,
            )
            for source, root in self._roots(game_path, steam_path):
                on_progress("scan", f"Scanning {source} mods in {root}", -1)
                contributions.extend(
                    scan_directory(
                        root,
                        source,
                        resolver,
                        cancel_event=cancel_event,
                        on_progress=on_progress,
                    )
                )

        on_progress("index", "Building conflict index...", 90)
        index = ConflictIndex()
        index.extend(contributions)
        report = ScanReport(
            conflicts=index.conflicts(),
            scanned_mods=[c.label for c in contributions],
            unique_mod_names=index.unique_labels(),
        )
        self.latest = report

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "Scan complete: %d packages, %d mods, %d conflicting files in %dms",
            len(report.scanned_mods),
            len(report.unique_mod_names),
            len(report.conflicts),
            elapsed_ms,
        )
        on_progress(
            "done",
            f"Scan complete: {len(report.scanned_mods)} mods scanned, "
            f"{len(report.conflicts)} conflicting files",
            100,
        )
        return report

    def discover_mod_names(self, game_path: str, steam_path: str = "") -> list[str]:
        """Folder-level discovery of mod labels, without reading packages."""
        names: list[str] = []
        with self._open_lookup(steam_path) as client:
            resolver = NameResolver(
                self.cache, client.fetch_item_title if client is not None else None
            )
            for source, root in self._roots(game_path, steam_path):
                for label in discover_mod_names(root, source, resolver):
                    if label not in names:
                        names.append(label)
        return sorted(names)
