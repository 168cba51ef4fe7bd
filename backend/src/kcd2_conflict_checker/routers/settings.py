from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from kcd2_conflict_checker.database import get_session
from kcd2_conflict_checker.schemas.config import AutoDetectResult, SettingsOut, SettingsUpdate
from kcd2_conflict_checker.services.config_service import load_app_config, save_paths
from kcd2_conflict_checker.steam.paths import (
    check_workshop_status,
    find_game_path,
    get_steam_path,
    to_native_path,
)

router = APIRouter(prefix="/settings", tags=["settings"])


def _is_dir(path: str) -> bool:
    return bool(path) and to_native_path(path).is_dir()


@router.get("/", response_model=SettingsOut)
def get_settings(session: Session = Depends(get_session)) -> SettingsOut:
    config = load_app_config(session)
    return SettingsOut(
        game_path=config.game_path,
        steam_path=config.steam_path,
        workshop_active=check_workshop_status(config.steam_path),
    )


@router.put("/", response_model=SettingsOut)
def update_settings(data: SettingsUpdate, session: Session = Depends(get_session)) -> SettingsOut:
    game_path = data.game_path.strip()
    steam_path = data.steam_path.strip()
    if not _is_dir(game_path):
        raise HTTPException(400, "Please enter a valid KCD2 installation path.")
    if steam_path and not _is_dir(steam_path):
        raise HTTPException(400, "The Steam path is invalid. Clear it to skip Workshop scanning.")
    save_paths(session, game_path, steam_path)
    return SettingsOut(
        game_path=game_path,
        steam_path=steam_path,
        workshop_active=check_workshop_status(steam_path),
    )


@router.post("/autodetect", response_model=AutoDetectResult)
def autodetect_paths() -> AutoDetectResult:
    """Detect Steam from the registry and KCD2 inside its default library."""
    steam = get_steam_path()
    game = find_game_path(steam) if steam else None
    return AutoDetectResult(steam_path=steam, game_path=game)
