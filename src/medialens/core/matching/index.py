"""Searchable catalog indices.

Every catalog entry is expanded into one IndexEntry per effective name.
The three indices (movie, series, anime) are built lazily, once, from a
CatalogProvider and are read without locking afterwards.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING

from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.core.normalization import normalize_punctuation, remove_trailing_brackets
from medialens.shared.errors import create_catalog_load_error
from medialens.shared.logging import log_operation_error, log_operation_success

from .collation import CollationKey, split_keys

if TYPE_CHECKING:
    from medialens.shared.protocols.services import CatalogProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class IndexEntry:
    """One searchable name of a catalog entry.

    Movies carry a lenient name without the year and a strict name with
    it. Series and anime carry a lenient name only; their strict key is
    the lenient key.
    """

    entry: CatalogEntry
    lenient_name: str
    strict_name: str | None = None

    @cached_property
    def lenient_key(self) -> tuple[CollationKey, ...]:
        return split_keys(self.lenient_name)

    @cached_property
    def strict_key(self) -> tuple[CollationKey, ...]:
        if self.strict_name is None:
            return self.lenient_key
        return split_keys(self.strict_name)

    @classmethod
    def from_catalog_entry(cls, entry: CatalogEntry) -> list[IndexEntry]:
        """Expand a catalog entry into one index row per effective name."""
        if entry.kind is MediaKind.MOVIE:
            names = entry.effective_names_without_year
            return [
                cls(
                    entry,
                    normalize_punctuation(name),
                    normalize_punctuation(f"{name} ({entry.year})") if entry.year else None,
                )
                for name in names
            ]

        # "Doctor Who (2005)" is indexed as "Doctor Who"
        rows = []
        for name in entry.effective_names:
            lenient = normalize_punctuation(remove_trailing_brackets(name))
            if lenient:
                rows.append(cls(entry, lenient))
        return rows

    def __str__(self) -> str:
        return self.strict_name if self.strict_name is not None else self.lenient_name


class Catalog:
    """Owns the lazily built movie, series and anime indices.

    Each index has its own lock, so a failing or slow anime snapshot never
    blocks movie lookups.

    Args:
        provider: Snapshot source; None yields empty indices
    """

    def __init__(self, provider: CatalogProvider | None = None) -> None:
        self.provider = provider
        self._indices: dict[MediaKind, tuple[IndexEntry, ...]] = {}
        self._locks = {kind: threading.Lock() for kind in MediaKind}

    def index(self, kind: MediaKind) -> tuple[IndexEntry, ...]:
        """Return the index for a kind, building it on first use."""
        index = self._indices.get(kind)
        if index is not None:
            return index

        with self._locks[kind]:
            index = self._indices.get(kind)
            if index is None:
                index = self._build_index(kind)
                self._indices[kind] = index
        return index

    @property
    def movie_index(self) -> tuple[IndexEntry, ...]:
        return self.index(MediaKind.MOVIE)

    @property
    def series_index(self) -> tuple[IndexEntry, ...]:
        return self.index(MediaKind.SERIES)

    @property
    def anime_index(self) -> tuple[IndexEntry, ...]:
        return self.index(MediaKind.ANIME)

    def reset(self) -> None:
        """Drop all indices. Not safe while lookups are running."""
        for kind in MediaKind:
            with self._locks[kind]:
                self._indices.pop(kind, None)

    def _load_entries(self, kind: MediaKind) -> Sequence[CatalogEntry]:
        if self.provider is None:
            return ()
        if kind is MediaKind.MOVIE:
            return self.provider.movies()
        if kind is MediaKind.SERIES:
            return self.provider.series()
        return self.provider.anime()

    def _build_index(self, kind: MediaKind) -> tuple[IndexEntry, ...]:
        start_time = time.time()
        try:
            entries = self._load_entries(kind)
        except Exception as e:  # pylint: disable=broad-exception-caught
            error = create_catalog_load_error(
                f"Failed to load {kind.value} index: {e}",
                kind=kind.value,
                original_error=e,
            )
            log_operation_error(logger, error, operation="build_index")
            return ()

        rows: list[IndexEntry] = []
        for entry in entries:
            rows.extend(IndexEntry.from_catalog_entry(entry))

        log_operation_success(
            logger,
            "build_index",
            (time.time() - start_time) * 1000,
            {"kind": kind.value, "entries": len(entries), "rows": len(rows)},
        )
        return tuple(rows)


__all__ = ["Catalog", "IndexEntry"]
