from kcd2_conflict_checker.models.settings import AppSetting, WhitelistEntry

__all__ = [
    "AppSetting",
    "WhitelistEntry",
]
