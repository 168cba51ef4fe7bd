"""Plain-text export of scan results.

The whitelist is applied at render time, so changing it never requires a
rescan.  Write failures surface as ``ExportError``; the scan data itself is
never affected.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import datetime
from pathlib import Path

from kcd2_conflict_checker.services.scan_service import ScanReport
from kcd2_conflict_checker.services.whitelist import (
    apply_whitelist,
    conflicting_mods,
    group_conflicts,
)

logger = logging.getLogger(__name__)

_RULE = "-" * 60


class ExportError(Exception):
    pass


def default_export_filename(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"KCD2_Conflicts_{now:%Y-%m-%d_%H%M%S}.txt"


def render_report(
    report: ScanReport,
    whitelist: Collection[str],
    *,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now()
    allowed = set(whitelist)
    result = apply_whitelist(report.conflicts, allowed)
    reported = result.reported

    lines = [
        "KCD2 Mod Conflict Checker - Export",
        f"Date: {now:%Y-%m-%d %H:%M:%S}",
        f"Mods scanned: {len(report.scanned_mods)}",
        f"Conflicts: {len(reported)} files",
    ]
    if result.suppressed_count:
        lines.append(f"Hidden by whitelist: {result.suppressed_count} files")
    lines += [_RULE, ""]

    if not reported:
        lines += ["No conflicts detected.", "", "Scanned mods:"]
        for mod in report.unique_mod_names:
            suffix = "  (whitelisted)" if mod in allowed else ""
            lines.append(f"  - {mod}{suffix}")
        return "\n".join(lines) + "\n"

    lines += [
        f"{len(conflicting_mods(reported))} conflicting mods, {len(reported)} overlapping files",
        "",
    ]
    for number, group in enumerate(group_conflicts(reported), start=1):
        lines += [_RULE, f"Conflict group #{number}"]
        lines += [f"  > {mod}" for mod in group.mods]
        lines += ["", f"  Overlapping files ({len(group.files)}):"]
        lines += [f"    {path}" for path in group.files]
        lines.append("")
    return "\n".join(lines) + "\n"


def write_report(path: Path, text: str) -> Path:
    """Write *text* to *path*, creating parent folders.

    Raises:
        ExportError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.warning("Export to %s failed: %s", path, exc)
        raise ExportError(f"Failed to export: {exc}") from exc
    logger.info("Exported conflict report to %s", path)
    return path
