"""Inverted index from internal package path to the mods that ship it."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from kcd2_conflict_checker.scanner.identity import ModIdentity, PackageContribution

logger = logging.getLogger(__name__)


class ConflictIndex:
    """Accumulates package contributions for a single scan.

    A path is a conflict once two or more distinct ``ModIdentity`` values
    contribute it.  Several packages of the same mod never conflict with
    each other.
    """

    def __init__(self) -> None:
        self._owners: dict[str, set[ModIdentity]] = defaultdict(set)
        self._identities: set[ModIdentity] = set()

    def add(self, contribution: PackageContribution) -> None:
        if contribution.paths:
            self._identities.add(contribution.identity)
        for path in contribution.paths:
            self._owners[path].add(contribution.identity)

    def extend(self, contributions: Iterable[PackageContribution]) -> None:
        for contribution in contributions:
            self.add(contribution)

    def __len__(self) -> int:
        return len(self._owners)

    def conflicts(self) -> dict[str, list[str]]:
        """Map each conflicting path to the sorted labels of its mods."""
        result: dict[str, list[str]] = {}
        for path in sorted(self._owners):
            owners = self._owners[path]
            if len(owners) < 2:
                continue
            result[path] = sorted(identity.label for identity in owners)
        return result

    def unique_labels(self) -> list[str]:
        """Sorted labels of every mod owning at least one path, conflicting or not.

        Empty or unreadable packages contribute nothing here.
        """
        return sorted({identity.label for identity in self._identities})


def build_conflict_map(contributions: Iterable[PackageContribution]) -> dict[str, list[str]]:
    index = ConflictIndex()
    index.extend(contributions)
    conflicts = index.conflicts()
    logger.info("Indexed %d paths, %d conflicting", len(index), len(conflicts))
    return conflicts
