"""Whitelist filtering and grouping of conflict results.

A file-level conflict is hidden as soon as *any* of its contributing mods
is whitelisted; trusting one side silences the whole entry.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class WhitelistResult:
    reported: dict[str, list[str]]
    suppressed_count: int


@dataclass(slots=True)
class ConflictGroup:
    """Files overlapped by exactly the same set of mods."""

    mods: tuple[str, ...]
    files: list[str] = field(default_factory=list)


def apply_whitelist(
    conflicts: Mapping[str, list[str]],
    whitelist: Collection[str],
) -> WhitelistResult:
    """Split *conflicts* into reported entries and a suppressed-file count.

    The input mapping is never modified.
    """
    allowed = set(whitelist)
    reported: dict[str, list[str]] = {}
    suppressed = 0
    for path, mods in conflicts.items():
        if any(mod in allowed for mod in mods):
            suppressed += 1
        else:
            reported[path] = list(mods)
    return WhitelistResult(reported=reported, suppressed_count=suppressed)


def group_conflicts(conflicts: Mapping[str, list[str]]) -> list[ConflictGroup]:
    """Group paths by their contributor list, keeping first-seen order."""
    groups: dict[tuple[str, ...], ConflictGroup] = {}
    for path, mods in conflicts.items():
        key = tuple(mods)
        if key not in groups:
            groups[key] = ConflictGroup(mods=key)
        groups[key].files.append(path)
    return list(groups.values())


def conflicting_mods(conflicts: Mapping[str, list[str]]) -> set[str]:
    return {mod for mods in conflicts.values() for mod in mods}
