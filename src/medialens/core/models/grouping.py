"""Data models for file grouping operations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import total_ordering
from pathlib import Path
from typing import Union

from medialens.core.normalization import normalize_punctuation
from medialens.shared.errors import DomainError, ErrorCode, ErrorContext

from .catalog import CatalogEntry
from .file import MediaFile

SlotValue = Union[CatalogEntry, str, Path]


def normalize_series_slot(name: str) -> str:
    """Series and anime slot form: punctuation-normalized, lower case, single spaces."""
    return " ".join(normalize_punctuation(name).lower().split())


class MediaType(str, Enum):
    """Content type slots of a Group, in display order."""

    MOVIE = "movie"
    SERIES = "series"
    ANIME = "anime"
    MUSIC = "music"


@total_ordering
@dataclass(frozen=True)
class Group:
    """Per-file classification record.

    Every slot is optional. A slot that was explicitly set to ``None`` is
    remembered as cleared and can never be filled again; the rule engine
    uses this to veto one interpretation of a file.
    """

    movie: CatalogEntry | None = None
    series: str | None = None
    anime: str | None = None
    music: Path | None = None
    cleared: frozenset[MediaType] = field(default=frozenset(), compare=False)

    def get(self, media_type: MediaType) -> SlotValue | None:
        return getattr(self, media_type.value)

    def put(self, media_type: MediaType, value: SlotValue | None) -> Group:
        """Return a copy with the given slot filled, or cleared when value is None.

        Raises:
            DomainError: If the slot was cleared before and value is not None
        """
        if value is None:
            return replace(
                self,
                **{media_type.value: None},
                cleared=self.cleared | {media_type},
            )

        if media_type in self.cleared:
            raise DomainError(
                ErrorCode.GROUP_SLOT_CLEARED,
                f"Group slot '{media_type.value}' was cleared and cannot be set again",
                ErrorContext(
                    operation="group_put",
                    additional_data={"slot": media_type.value, "value": str(value)},
                ),
            )
        return replace(self, **{media_type.value: value})

    def clear(self, media_type: MediaType) -> Group:
        return self.put(media_type, None)

    def with_movie(self, movies: Sequence[CatalogEntry] | None) -> Group:
        """Fill the movie slot with the best match; an empty list clears it."""
        return self.put(MediaType.MOVIE, movies[0] if movies else None)

    def with_series(self, names: Sequence[str] | None) -> Group:
        return self.put(MediaType.SERIES, normalize_series_slot(names[0]) if names else None)

    def with_anime(self, names: Sequence[str] | None) -> Group:
        return self.put(MediaType.ANIME, normalize_series_slot(names[0]) if names else None)

    def with_music(self, file: MediaFile | None) -> Group:
        return self.put(MediaType.MUSIC, file.parent if file is not None else None)

    def is_cleared(self, media_type: MediaType) -> bool:
        return media_type in self.cleared

    def types(self) -> list[MediaType]:
        """Filled slots in MediaType order."""
        return [t for t in MediaType if self.get(t) is not None]

    def is_empty(self) -> bool:
        return not self.types()

    def _sort_key(self) -> tuple:
        slots = []
        for media_type in MediaType:
            value = self.get(media_type)
            # None sorts after every value
            slots.append((1, "") if value is None else (0, str(value).lower()))
        return (len(self.types()), tuple(slots))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def to_dict(self) -> dict[str, object]:
        """Convert group to dictionary for logging/serialization."""
        return {
            t.value: (None if self.get(t) is None else str(self.get(t)))
            for t in MediaType
        }

    def __str__(self) -> str:
        return str({t.value: str(self.get(t)) for t in self.types()})


@dataclass(frozen=True)
class GroupedFile:
    """A file together with the Group it was assigned to."""

    file: MediaFile
    group: Group

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging/serialization."""
        return {
            "file": str(self.file.path),
            "group": self.group.to_dict(),
        }


__all__ = ["Group", "GroupedFile", "MediaType", "normalize_series_slot"]
