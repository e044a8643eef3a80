"""Config – env-based settings and their validation errors."""
from mp_listing.config.settings import EnvSettingsLoader, ListingSettings, Settings, SettingsLoader
from mp_listing.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "ListingSettings",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
