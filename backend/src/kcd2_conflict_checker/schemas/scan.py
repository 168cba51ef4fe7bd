from datetime import datetime

from pydantic import BaseModel


class ConflictGroupOut(BaseModel):
    mods: list[str]
    files: list[str]


class ScanResultsOut(BaseModel):
    finished_at: datetime
    mods_scanned: int
    scanned_mods: list[str]
    unique_mods: list[str]
    conflicts: dict[str, list[str]]
    groups: list[ConflictGroupOut]
    conflicting_mod_count: int
    hidden_by_whitelist: int


class CancelResult(BaseModel):
    cancelled: bool


class ExportRequest(BaseModel):
    path: str | None = None


class ExportResult(BaseModel):
    path: str
    conflicts: int
    hidden_by_whitelist: int
