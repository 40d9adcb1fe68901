"""MediaLens Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- Loader functions: get_config, load_settings, reload_config
- Domain models: logging, matching, grouping, catalog and media settings
"""

from __future__ import annotations

from .models import (
    CatalogSettings,
    GroupingSettings,
    LoggingSettings,
    MatchingSettings,
    MediaSettings,
)
from .models.settings import Settings

# Import loader functions directly from loader module to avoid circular dependency
from .loader import get_config, load_settings, reload_config

__all__ = [
    "CatalogSettings",
    "GroupingSettings",
    "LoggingSettings",
    "MatchingSettings",
    "MediaSettings",
    "Settings",
    "get_config",
    "load_settings",
    "reload_config",
]
