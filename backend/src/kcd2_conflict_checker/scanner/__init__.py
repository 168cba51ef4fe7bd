"""Scanner core: mod folders, display names and package contents."""

from kcd2_conflict_checker.scanner.directory import (
    ScanCancelledError,
    discover_mod_names,
    iter_mod_folders,
    scan_directory,
)
from kcd2_conflict_checker.scanner.identity import (
    ModFolder,
    ModIdentity,
    ModSource,
    PackageContribution,
)
from kcd2_conflict_checker.scanner.names import NameCache, NameResolver

__all__ = [
    "ModFolder",
    "ModIdentity",
    "ModSource",
    "NameCache",
    "NameResolver",
    "PackageContribution",
    "ScanCancelledError",
    "discover_mod_names",
    "iter_mod_folders",
    "scan_directory",
]
