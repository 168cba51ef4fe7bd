import json
import logging
import queue

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from kcd2_conflict_checker.database import get_session
from kcd2_conflict_checker.schemas.scan import CancelResult, ConflictGroupOut, ScanResultsOut
from kcd2_conflict_checker.services.config_service import get_whitelist, load_app_config
from kcd2_conflict_checker.services.scan_jobs import (
    ScanInProgressError,
    ScanJobRunner,
    get_scan_runner,
)
from kcd2_conflict_checker.services.whitelist import (
    apply_whitelist,
    conflicting_mods,
    group_conflicts,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["scan"])


@router.post("/stream")
def scan_stream(
    session: Session = Depends(get_session),
    runner: ScanJobRunner = Depends(get_scan_runner),
) -> StreamingResponse:
    """Run a full scan in the background and stream its progress as SSE."""
    config = load_app_config(session)
    if not config.game_path:
        raise HTTPException(400, "Game path is not configured")

    q: queue.Queue[dict | None] = queue.Queue()

    def on_progress(phase: str, msg: str, pct: int) -> None:
        q.put({"phase": phase, "message": msg, "percent": pct})

    try:
        runner.start(
            config.game_path,
            config.steam_path,
            on_progress=on_progress,
            on_finish=lambda: q.put(None),
        )
    except ScanInProgressError as exc:
        raise HTTPException(409, str(exc)) from exc

    def event_stream():
        while True:
            item = q.get()
            if item is None:
                break
            yield f"data: {json.dumps(item)}\n\n"

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.post("/cancel", response_model=CancelResult)
def cancel_scan(runner: ScanJobRunner = Depends(get_scan_runner)) -> CancelResult:
    return CancelResult(cancelled=runner.cancel())


@router.get("/results", response_model=ScanResultsOut)
def scan_results(
    session: Session = Depends(get_session),
    runner: ScanJobRunner = Depends(get_scan_runner),
) -> ScanResultsOut:
    """Latest scan results with the current whitelist applied."""
    report = runner.latest
    if report is None:
        raise HTTPException(404, "No scan results yet. Run a scan first.")

    result = apply_whitelist(report.conflicts, get_whitelist(session))
    return ScanResultsOut(
        finished_at=report.finished_at,
        mods_scanned=len(report.scanned_mods),
        scanned_mods=report.scanned_mods,
        unique_mods=report.unique_mod_names,
        conflicts=result.reported,
        groups=[
            ConflictGroupOut(mods=list(g.mods), files=g.files)
            for g in group_conflicts(result.reported)
        ],
        conflicting_mod_count=len(conflicting_mods(result.reported)),
        hidden_by_whitelist=result.suppressed_count,
    )
