"""Catalog data models.

Catalog entries are the immutable reference records the engine matches
filenames against. One model covers movies, series and anime; the
``kind`` tag selects which index an entry belongs to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MediaKind(str, Enum):
    """Kind of catalog payload."""

    MOVIE = "movie"
    SERIES = "series"
    ANIME = "anime"


@dataclass(frozen=True)
class CatalogEntry:
    """Immutable catalog record.

    Attributes:
        kind: Index this entry belongs to
        id: Stable numeric id (TMDb id for movies, database id otherwise)
        name: Primary name
        aliases: Alternative names, in catalog order
        year: Release year (movies)
        database: Source database tag (series and anime)
        imdb_id: IMDb numeric id (movies)
    """

    kind: MediaKind
    id: int
    name: str
    aliases: tuple[str, ...] = field(default=(), compare=False)
    year: int | None = None
    database: str | None = field(default=None, compare=False)
    imdb_id: int | None = field(default=None, compare=False)

    @property
    def effective_names_without_year(self) -> list[str]:
        """Primary name followed by all aliases, without duplicates."""
        if not self.name:
            return []
        names = [self.name]
        for alias in self.aliases:
            if alias and alias not in names:
                names.append(alias)
        return names

    @property
    def effective_names(self) -> list[str]:
        """Effective names; movies carry their year as ``Name (Year)``."""
        names = self.effective_names_without_year
        if self.kind is MediaKind.MOVIE and self.year:
            return [f"{name} ({self.year})" for name in names]
        return names

    def __str__(self) -> str:
        if self.kind is MediaKind.MOVIE and self.year:
            return f"{self.name} ({self.year})"
        return self.name


__all__ = ["CatalogEntry", "MediaKind"]
