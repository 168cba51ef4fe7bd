from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from kcd2_conflict_checker.database import get_session
from kcd2_conflict_checker.scanner.identity import ModIdentity
from kcd2_conflict_checker.schemas.config import WhitelistOut, WhitelistUpdate
from kcd2_conflict_checker.services.config_service import load_app_config, replace_whitelist
from kcd2_conflict_checker.services.scan_jobs import ScanJobRunner, get_scan_runner

router = APIRouter(prefix="/whitelist", tags=["whitelist"])


@router.get("/", response_model=WhitelistOut)
def get_whitelist_choices(
    session: Session = Depends(get_session),
    runner: ScanJobRunner = Depends(get_scan_runner),
) -> WhitelistOut:
    """Current whitelist plus every mod label the user can choose from.

    Uses the last scan's mods when available, otherwise a quick folder-level
    discovery.  Whitelisted mods that are no longer installed stay listed.
    """
    config = load_app_config(session)
    if runner.latest is not None and runner.latest.unique_mod_names:
        choices = list(runner.latest.unique_mod_names)
    else:
        choices = runner.scanner.discover_mod_names(config.game_path, config.steam_path)
    for label in config.whitelist:
        if label not in choices:
            choices.append(label)
    return WhitelistOut(whitelisted=config.whitelist, choices=choices)


@router.put("/", response_model=WhitelistOut)
def update_whitelist(
    data: WhitelistUpdate,
    session: Session = Depends(get_session),
) -> WhitelistOut:
    for label in data.labels:
        if label.strip() and ModIdentity.from_label(label.strip()) is None:
            raise HTTPException(422, f"Not a mod label: {label!r}")
    labels = replace_whitelist(session, data.labels)
    return WhitelistOut(whitelisted=labels, choices=labels)
