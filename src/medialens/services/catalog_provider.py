"""Catalog snapshot providers.

The reference catalog ships as tab-separated text files, one record per
line, usually xz-compressed. Movie rows are
``imdb_id, tmdb_id, year, name, alias...``; series and anime rows are
``id, name, alias...``. Ids of zero or below mean "unknown".
"""

from __future__ import annotations

import logging
import lzma
import time
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import IO

from medialens.config.models.app_settings import CatalogSettings
from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_catalog_load_error,
)
from medialens.shared.logging import log_operation_success

logger = logging.getLogger(__name__)

SERIES_DATABASE = "TheTVDB"
ANIME_DATABASE = "AniDB"


def _open_text(path: Path) -> IO[str]:
    if path.suffix.lower() == ".xz":
        return lzma.open(path, "rt", encoding="utf-8")
    return open(path, encoding="utf-8")


def _positive(value: str) -> int | None:
    number = int(value)
    return number if number > 0 else None


def parse_movie_row(fields: Sequence[str]) -> CatalogEntry:
    """Build a movie entry from ``imdb_id, tmdb_id, year, name, alias...``."""
    imdb_id = _positive(fields[0])
    tmdb_id = _positive(fields[1])
    year = _positive(fields[2])
    return CatalogEntry(
        kind=MediaKind.MOVIE,
        id=tmdb_id if tmdb_id is not None else -1,
        name=fields[3],
        aliases=tuple(a for a in fields[4:] if a),
        year=year,
        imdb_id=imdb_id,
    )


def series_row_parser(kind: MediaKind, database: str) -> Callable[[Sequence[str]], CatalogEntry]:
    """Row parser for ``id, name, alias...`` records of the given kind."""

    def parse(fields: Sequence[str]) -> CatalogEntry:
        return CatalogEntry(
            kind=kind,
            id=int(fields[0]),
            name=fields[1],
            aliases=tuple(a for a in fields[2:] if a),
            database=database,
        )

    return parse


class TsvCatalogProvider:
    """Reads the catalog snapshot from TSV files on disk.

    Files are read on every call; the Catalog caches the resulting
    indices, so each file is normally read once per process.

    Args:
        settings: Location of the snapshot files

    Raises:
        InfrastructureError: From every method, if a file cannot be read or
            a record cannot be parsed

    Example:
        >>> provider = TsvCatalogProvider(CatalogSettings(data_dir=Path("data")))
        >>> catalog = Catalog(provider)
    """

    def __init__(self, settings: CatalogSettings | None = None) -> None:
        self.settings = settings or CatalogSettings()

    def movies(self) -> list[CatalogEntry]:
        return self._load(self.settings.movie_path, MediaKind.MOVIE, parse_movie_row)

    def series(self) -> list[CatalogEntry]:
        return self._load(
            self.settings.series_path,
            MediaKind.SERIES,
            series_row_parser(MediaKind.SERIES, SERIES_DATABASE),
        )

    def anime(self) -> list[CatalogEntry]:
        return self._load(
            self.settings.anime_path,
            MediaKind.ANIME,
            series_row_parser(MediaKind.ANIME, ANIME_DATABASE),
        )

    def _load(
        self,
        path: Path,
        kind: MediaKind,
        parse: Callable[[Sequence[str]], CatalogEntry],
    ) -> list[CatalogEntry]:
        start_time = time.time()
        try:
            with _open_text(path) as f:
                entries = self._parse_lines(f, path, parse)
        except (OSError, lzma.LZMAError, UnicodeDecodeError) as e:
            raise create_catalog_load_error(
                f"Failed to read {kind.value} catalog: {e}",
                file_path=str(path),
                kind=kind.value,
                original_error=e,
            ) from e

        log_operation_success(
            logger,
            "load_catalog",
            (time.time() - start_time) * 1000,
            {"kind": kind.value, "entries": len(entries)},
            {"file_path": str(path)},
        )
        return entries

    def _parse_lines(
        self,
        lines: Iterable[str],
        path: Path,
        parse: Callable[[Sequence[str]], CatalogEntry],
    ) -> list[CatalogEntry]:
        entries: list[CatalogEntry] = []
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            if not line:
                continue
            try:
                entries.append(parse(line.split("\t")))
            except (ValueError, IndexError) as e:
                raise InfrastructureError(
                    ErrorCode.CATALOG_PARSE_FAILED,
                    f"Malformed catalog record at line {line_number}: {e}",
                    ErrorContext(
                        file_path=str(path),
                        operation="load_catalog",
                        additional_data={"line_number": line_number},
                    ),
                    original_error=e,
                ) from e
        return entries


class InMemoryCatalogProvider:
    """Serves fixed entry sequences.

    Example:
        >>> provider = InMemoryCatalogProvider(movies=[matrix])
        >>> provider.series()
        []
    """

    def __init__(
        self,
        movies: Iterable[CatalogEntry] = (),
        series: Iterable[CatalogEntry] = (),
        anime: Iterable[CatalogEntry] = (),
    ) -> None:
        self._movies = list(movies)
        self._series = list(series)
        self._anime = list(anime)

    def movies(self) -> list[CatalogEntry]:
        return list(self._movies)

    def series(self) -> list[CatalogEntry]:
        return list(self._series)

    def anime(self) -> list[CatalogEntry]:
        return list(self._anime)


__all__ = [
    "ANIME_DATABASE",
    "InMemoryCatalogProvider",
    "SERIES_DATABASE",
    "TsvCatalogProvider",
    "parse_movie_row",
    "series_row_parser",
]
