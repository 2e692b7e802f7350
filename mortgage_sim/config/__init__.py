"""Configuration package for runtime settings, logging and startup validation."""

from .log_config import config_configure_logging
from .settings import AppSettings, SettingsLoadError, config_load_settings

__all__ = ["AppSettings", "SettingsLoadError", "config_load_settings", "config_configure_logging"]
