"""Config settings – 12-factor env-based configuration."""
from mp_listing.config.settings.base import Settings
from mp_listing.config.settings.listing import ListingSettings
from mp_listing.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "ListingSettings", "Settings", "SettingsLoader"]
