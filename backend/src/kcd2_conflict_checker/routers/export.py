import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlmodel import Session

from kcd2_conflict_checker.config import settings
from kcd2_conflict_checker.database import get_session
from kcd2_conflict_checker.schemas.scan import ExportRequest, ExportResult
from kcd2_conflict_checker.services.config_service import get_whitelist
from kcd2_conflict_checker.services.export_service import (
    ExportError,
    default_export_filename,
    render_report,
    write_report,
)
from kcd2_conflict_checker.services.scan_jobs import ScanJobRunner, get_scan_runner
from kcd2_conflict_checker.services.scan_service import ScanReport
from kcd2_conflict_checker.services.whitelist import apply_whitelist

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def _require_report(runner: ScanJobRunner) -> ScanReport:
    report = runner.latest
    if report is None or report.is_empty:
        raise HTTPException(404, "No scan results to export. Run a scan first.")
    return report


@router.get("/", response_class=PlainTextResponse)
def export_text(
    session: Session = Depends(get_session),
    runner: ScanJobRunner = Depends(get_scan_runner),
) -> PlainTextResponse:
    report = _require_report(runner)
    return PlainTextResponse(render_report(report, get_whitelist(session)))


@router.post("/", response_model=ExportResult)
def export_file(
    data: ExportRequest,
    session: Session = Depends(get_session),
    runner: ScanJobRunner = Depends(get_scan_runner),
) -> ExportResult:
    """Write the report to *path*, or to the export folder when omitted."""
    report = _require_report(runner)
    whitelist = get_whitelist(session)
    dest = Path(data.path) if data.path else settings.export_dir / default_export_filename()
    try:
        written = write_report(dest, render_report(report, whitelist))
    except ExportError as exc:
        raise HTTPException(500, str(exc)) from exc

    result = apply_whitelist(report.conflicts, whitelist)
    return ExportResult(
        path=str(written),
        conflicts=len(result.reported),
        hidden_by_whitelist=result.suppressed_count,
    )
