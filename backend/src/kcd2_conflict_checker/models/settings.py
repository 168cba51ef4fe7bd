from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class AppSetting(SQLModel, table=True):
    __tablename__ = "app_settings"

    id: int | None = Field(default=None, primary_key=True)
    key: str = Field(unique=True, index=True)
    value: str = ""


class WhitelistEntry(SQLModel, table=True):
    """A mod label (``"[Local] Name"``) whose conflicts are hidden."""

    __tablename__ = "whitelist_entries"

    id: int | None = Field(default=None, primary_key=True)
    label: str = Field(unique=True, index=True)
    added_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
