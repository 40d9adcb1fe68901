"""MediaLens Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from medialens.config.models.app_settings import (
    CatalogSettings,
    LoggingSettings,
    MediaSettings,
)
from medialens.config.models.grouping_settings import GroupingSettings
from medialens.config.models.matching_settings import MatchingSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Unified configuration access.

    Every field can be overridden through ``MEDIALENS_`` environment
    variables, with ``__`` separating nested fields, e.g.
    ``MEDIALENS_MATCHING__MIN_QUERY_LENGTH=4``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEDIALENS_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    grouping: GroupingSettings = Field(default_factory=GroupingSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from TOML file with environment variable overrides."""

        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file."""

        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)


__all__ = ["Settings"]
