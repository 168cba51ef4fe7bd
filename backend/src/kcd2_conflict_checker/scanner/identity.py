"""Value types shared by the directory scanner and the conflict index."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class ModSource(StrEnum):
    """Where a mod folder was found."""

    local = "local"
    workshop = "workshop"


_SOURCE_PREFIXES: dict[ModSource, str] = {
    ModSource.local: "Local",
    ModSource.workshop: "Workshop",
}

_LABEL_RE = re.compile(r"^\[(Local|Workshop)\] (.+)$")


def source_prefix(source: ModSource) -> str:
    """Display prefix used inside ``[...]`` for *source*."""
    return _SOURCE_PREFIXES[source]


@dataclass(frozen=True, slots=True)
class ModIdentity:
    """A mod as seen by conflict grouping: same name and source means same mod."""

    name: str
    source: ModSource

    @property
    def label(self) -> str:
        return f"[{source_prefix(self.source)}] {self.name}"

    @classmethod
    def from_label(cls, label: str) -> ModIdentity | None:
        m = _LABEL_RE.match(label)
        if not m:
            return None
        source = next(s for s, p in _SOURCE_PREFIXES.items() if p == m.group(1))
        return cls(name=m.group(2), source=source)


@dataclass(frozen=True, slots=True)
class ModFolder:
    """One immediate subfolder of a content root, treated as exactly one mod."""

    root: Path
    folder_name: str
    source: ModSource

    @property
    def path(self) -> Path:
        return self.root / self.folder_name


@dataclass(frozen=True, slots=True)
class PackageContribution:
    """The indexed contents of one package belonging to one mod."""

    identity: ModIdentity
    label: str
    package_path: Path
    paths: tuple[str, ...]
