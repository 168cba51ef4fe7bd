"""Helpers for reading and writing the persisted user configuration.

The configuration record is the game path, the Steam path and the set of
whitelisted mod labels.
"""

from sqlmodel import Session, select

from kcd2_conflict_checker.models.settings import AppSetting, WhitelistEntry
from kcd2_conflict_checker.schemas.config import AppConfig

GAME_PATH_KEY = "game_path"
STEAM_PATH_KEY = "steam_path"


def get_setting(session: Session, key: str) -> str | None:
    """Read a single setting value by key, returning None if missing or empty."""
    setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
    return setting.value if setting and setting.value else None


def set_setting(session: Session, key: str, value: str) -> None:
    """Upsert a single setting value by key. Caller controls commit."""
    setting = session.exec(select(AppSetting).where(AppSetting.key == key)).first()
    if setting:
        setting.value = value
    else:
        session.add(AppSetting(key=key, value=value))


def get_whitelist(session: Session) -> list[str]:
    return sorted(session.exec(select(WhitelistEntry.label)).all())


def replace_whitelist(session: Session, labels: list[str]) -> list[str]:
    """Replace the stored whitelist with *labels* and commit."""
    wanted = {label.strip() for label in labels if label.strip()}
    existing = session.exec(select(WhitelistEntry)).all()
    for entry in existing:
        if entry.label in wanted:
            wanted.discard(entry.label)
        else:
            session.delete(entry)
    for label in wanted:
        session.add(WhitelistEntry(label=label))
    session.commit()
    return get_whitelist(session)


def load_app_config(session: Session) -> AppConfig:
    return AppConfig(
        game_path=get_setting(session, GAME_PATH_KEY) or "",
        steam_path=get_setting(session, STEAM_PATH_KEY) or "",
        whitelist=get_whitelist(session),
    )


def save_paths(session: Session, game_path: str, steam_path: str) -> None:
    set_setting(session, GAME_PATH_KEY, game_path.strip())
    set_setting(session, STEAM_PATH_KEY, steam_path.strip())
    session.commit()
