import os
import sys
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    if env := os.environ.get("KCC_DATA_DIR"):
        return Path(env)
    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    else:
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / "KCD2ModConflictChecker"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KCC_",
        extra="ignore",
    )

    data_dir: Path = Path("")
    db_path: Path = Path("")
    export_dir: Path = Path("")
    host: str = "127.0.0.1"
    port: int = 8426
    workshop_timeout: float = 10.0
    # Browser origins allowed to call the API; set KCC_CORS_ORIGINS as a JSON list.
    cors_origins: list[str] = []

    @model_validator(mode="after")
    def _resolve_data_paths(self) -> "Settings":
        if self.data_dir == Path(""):
            self.data_dir = _default_data_dir()
        if self.db_path == Path(""):
            self.db_path = self.data_dir / "kcc.db"
        if self.export_dir == Path(""):
            self.export_dir = self.data_dir / "exports"
        return self


settings = Settings()
