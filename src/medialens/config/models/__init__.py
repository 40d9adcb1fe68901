"""Configuration domain models."""

from __future__ import annotations

from .app_settings import CatalogSettings, LoggingSettings, MediaSettings
from .grouping_settings import GroupingSettings
from .matching_settings import MatchingSettings

__all__ = [
    "CatalogSettings",
    "GroupingSettings",
    "LoggingSettings",
    "MatchingSettings",
    "MediaSettings",
]
