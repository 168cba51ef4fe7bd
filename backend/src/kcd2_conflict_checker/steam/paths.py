"""Steam and game folder discovery.

Configured paths may be stored in Windows form (``G:\\SteamLibrary``) while
the backend runs under WSL; ``to_native_path`` maps them to ``/mnt/g/...``.
"""

import logging
import os
import re
import sys
from pathlib import Path

from kcd2_conflict_checker.constants import (
    GAME_FOLDER_NAME,
    LOCAL_MODS_DIR,
    STEAM_REGISTRY_KEYS,
    WORKSHOP_APP_ID,
)

logger = logging.getLogger(__name__)

_DRIVE_RE = re.compile(r"^([A-Za-z]):[/\\]")


def to_native_path(path: str) -> Path:
    path = path.strip()
    if sys.platform == "linux":
        m = _DRIVE_RE.match(path)
        if m:
            rest = path[3:].replace("\\", "/")
            return Path(f"/mnt/{m.group(1).lower()}/{rest}")
    return Path(os.path.normpath(path))


def local_mods_dir(game_path: str) -> Path:
    return to_native_path(game_path) / LOCAL_MODS_DIR


def workshop_content_dir(steam_path: str) -> Path:
    return to_native_path(steam_path) / "steamapps" / "workshop" / "content" / WORKSHOP_APP_ID


def get_steam_path() -> str | None:
    """Read the Steam install path from the Windows registry."""
    if sys.platform != "win32":
        return None
    import winreg

    for key in STEAM_REGISTRY_KEYS:
        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key) as handle:
                value, _ = winreg.QueryValueEx(handle, "InstallPath")
        except OSError:
            continue
        if value:
            logger.info("Found Steam at %s", value)
            return str(value)
    logger.info("Steam install path not found in registry")
    return None


def find_game_path(steam_path: str) -> str | None:
    """Locate the game inside the default Steam library."""
    if not steam_path:
        return None
    candidate = to_native_path(steam_path) / "steamapps" / "common" / GAME_FOLDER_NAME
    return str(candidate) if candidate.is_dir() else None


def check_workshop_status(steam_path: str) -> bool:
    """True when the game's workshop content folder holds at least one item."""
    if not steam_path:
        return False
    content = workshop_content_dir(steam_path)
    try:
        return any(p.is_dir() for p in content.iterdir())
    except OSError:
        return False
