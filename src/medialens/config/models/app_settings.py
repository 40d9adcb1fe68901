"""Logging, catalog and media-type configuration models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from medialens.shared.constants import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages the log level, the optional log file and whether
    console output goes through rich.
    """

    level: str = Field(default="INFO", description="Logging level")
    file: str | None = Field(default=None, description="Log file path")
    use_rich_console: bool = Field(default=True, description="Render console logs with rich")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LEVELS:
            msg = f"level must be one of {', '.join(_LEVELS)}"
            raise ValueError(msg)
        return level


class CatalogSettings(BaseModel):
    """Location of the catalog snapshot files.

    Files may be plain TSV or xz-compressed (``.xz`` suffix).
    """

    data_dir: Path = Field(default=Path("data"), description="Directory holding the snapshot files")
    movie_file: str = Field(default="moviedb.txt.xz", description="Movie snapshot file name")
    series_file: str = Field(default="thetvdb.txt.xz", description="Series snapshot file name")
    anime_file: str = Field(default="anidb.txt.xz", description="Anime snapshot file name")

    @property
    def movie_path(self) -> Path:
        return self.data_dir / self.movie_file

    @property
    def series_path(self) -> Path:
        return self.data_dir / self.series_file

    @property
    def anime_path(self) -> Path:
        return self.data_dir / self.anime_file


class MediaSettings(BaseModel):
    """Recognized media file extensions."""

    video_extensions: list[str] = Field(default_factory=lambda: list(VIDEO_EXTENSIONS))
    audio_extensions: list[str] = Field(default_factory=lambda: list(AUDIO_EXTENSIONS))

    @field_validator("video_extensions", "audio_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        """Lower-case extensions and make sure they start with a dot."""
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in v]


__all__ = ["CatalogSettings", "LoggingSettings", "MediaSettings"]
