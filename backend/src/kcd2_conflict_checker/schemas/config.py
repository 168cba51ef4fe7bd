from pydantic import BaseModel


class AppConfig(BaseModel):
    game_path: str = ""
    steam_path: str = ""
    whitelist: list[str] = []


class SettingsOut(BaseModel):
    game_path: str
    steam_path: str
    workshop_active: bool


class SettingsUpdate(BaseModel):
    game_path: str
    steam_path: str = ""


class AutoDetectResult(BaseModel):
    steam_path: str | None
    game_path: str | None


class WhitelistOut(BaseModel):
    whitelisted: list[str]
    choices: list[str]


class WhitelistUpdate(BaseModel):
    labels: list[str]
