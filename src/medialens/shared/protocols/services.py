"""Service protocols for dependency inversion.

Core modules talk to catalogs, metadata stores, probes and online search
services only through these interfaces; every piece of I/O lives behind
one of them.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from medialens.core.models.catalog import CatalogEntry
from medialens.core.models.metadata import MediaCharacteristics, StoredMetadata


@runtime_checkable
class CatalogProvider(Protocol):
    """Source of the reference catalog snapshot.

    Each method may raise; the engine then treats that one index as empty.

    Example:
        >>> from medialens.services import InMemoryCatalogProvider
        >>> provider: CatalogProvider = InMemoryCatalogProvider(movies=[])
        >>> provider.movies()
        []
    """

    def movies(self) -> Sequence[CatalogEntry]:
        """Return all movie entries."""

    def series(self) -> Sequence[CatalogEntry]:
        """Return all series entries."""

    def anime(self) -> Sequence[CatalogEntry]:
        """Return all anime entries."""


class MetadataStore(Protocol):
    """Store of previously resolved metadata, e.g. extended attributes.

    Entries found here are authoritative and skip matching entirely.
    """

    def get_metadata(self, path: Path) -> StoredMetadata | None:
        """Return stored metadata for a file, or None if nothing is stored."""


class MediaProbe(Protocol):
    """Reads container characteristics of a video file."""

    def probe(self, path: Path) -> MediaCharacteristics:
        """Probe the file.

        Raises:
            Exception: Any probe failure; callers treat it as missing evidence
        """


class MovieSearchService(Protocol):
    """Online movie identification service."""

    def search_movie(self, query: str) -> Sequence[CatalogEntry]:
        """Search movies by free-text query."""

    def get_movie_by_imdb_id(self, imdb_id: int) -> CatalogEntry | None:
        """Resolve a movie by its numeric IMDb id."""


__all__ = [
    "CatalogProvider",
    "MediaProbe",
    "MetadataStore",
    "MovieSearchService",
]
