"""Display-name resolution for mod folders.

Names come from, in order: the folder's ``mod.manifest``, a cached Steam
Workshop page lookup (workshop folders named by numeric item id only), and
finally the folder name itself.  Every step that fails falls through to the
next one; resolution never raises.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable
from pathlib import Path

import httpx

from kcd2_conflict_checker.constants import MANIFEST_FILENAME
from kcd2_conflict_checker.scanner.identity import ModSource

logger = logging.getLogger(__name__)

_MANIFEST_NAME_RE = re.compile(r"<name>(.*?)</name>", re.IGNORECASE)

TitleLookup = Callable[[str], str | None]


class NameCache:
    """Thread-safe workshop id -> display name map, kept for the process lifetime.

    Only successful lookups are stored.  ``get_or_fetch`` holds a per-key
    lock around the fetch so concurrent callers never duplicate a request.
    """

    def __init__(self) -> None:
        self._names: dict[str, str] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._names.get(key)

    def insert(self, key: str, name: str) -> None:
        with self._lock:
            self._names.setdefault(key, name)

    def get_or_fetch(self, key: str, fetch: TitleLookup) -> str | None:
        with self._lock:
            if key in self._names:
                return self._names[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            cached = self.get(key)
            if cached is not None:
                return cached
            name = fetch(key)
            if name:
                self.insert(key, name)
            return name or None

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._names


def read_manifest_name(mod_dir: Path) -> str | None:
    """Return the first ``<name>`` value from ``mod.manifest``, if any."""
    manifest = mod_dir / MANIFEST_FILENAME
    try:
        if not manifest.is_file():
            return None
        text = manifest.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Cannot read %s: %s", manifest, exc)
        return None
    m = _MANIFEST_NAME_RE.search(text)
    if not m:
        return None
    return m.group(1).strip() or None


def is_workshop_item_id(folder_name: str) -> bool:
    return folder_name.isascii() and folder_name.isdigit()


def fallback_name(folder_name: str, source: ModSource) -> str:
    if source is ModSource.workshop:
        return f"Workshop {folder_name}"
    return folder_name


class NameResolver:
    """Resolves the display name of a mod folder.

    *lookup* fetches a workshop item's title by id and may return ``None``
    or raise; it is skipped entirely when not given or when *cancel_event*
    is set.
    """

    def __init__(
        self,
        cache: NameCache,
        lookup: TitleLookup | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._cache = cache
        self._lookup = lookup
        self._cancel_event = cancel_event

    def resolve(self, root: Path, folder_name: str, source: ModSource) -> str:
        name = read_manifest_name(root / folder_name)
        if name:
            return name

        if source is ModSource.workshop and is_workshop_item_id(folder_name):
            name = self._resolve_workshop(folder_name)
            if name:
                return name

        return fallback_name(folder_name, source)

    def _resolve_workshop(self, item_id: str) -> str | None:
        cached = self._cache.get(item_id)
        if cached is not None:
            return cached
        if self._lookup is None:
            return None
        if self._cancel_event is not None and self._cancel_event.is_set():
            return None
        try:
            return self._cache.get_or_fetch(item_id, self._lookup)
        except httpx.HTTPError as exc:
            logger.warning("Workshop name lookup failed for %s: %s", item_id, exc)
            return None
