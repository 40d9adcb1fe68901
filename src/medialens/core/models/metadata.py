"""Evidence supplied by external collaborators."""

from __future__ import annotations

from dataclasses import dataclass

from .catalog import CatalogEntry, MediaKind


@dataclass(frozen=True)
class StoredMetadata:
    """Previously resolved metadata attached to a file.

    Attributes:
        kind: Content kind the file was resolved to
        entry: Catalog entry of the movie or series, if known
        series_name: Series name for episodes
        database: Database the episode was resolved with, e.g. ``AniDB``
    """

    kind: MediaKind
    entry: CatalogEntry | None = None
    series_name: str | None = None
    database: str | None = None

    @property
    def is_movie(self) -> bool:
        return self.kind is MediaKind.MOVIE

    @property
    def is_episode(self) -> bool:
        return self.kind in (MediaKind.SERIES, MediaKind.ANIME)

    @property
    def is_anime(self) -> bool:
        return self.kind is MediaKind.ANIME or (self.database or "").lower() == "anidb"


@dataclass(frozen=True)
class MediaCharacteristics:
    """Container-level facts about a video file.

    Attributes:
        duration_seconds: Play time, if the probe could read it
        audio_language: Language of the first audio stream
        subtitle_codec: Codec of the first subtitle stream
    """

    duration_seconds: float | None = None
    audio_language: str | None = None
    subtitle_codec: str | None = None


__all__ = ["MediaCharacteristics", "StoredMetadata"]
