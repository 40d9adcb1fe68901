"""Core data models for MediaLens."""

from .catalog import CatalogEntry, MediaKind
from .file import MediaFile
from .grouping import Group, GroupedFile, MediaType
from .metadata import MediaCharacteristics, StoredMetadata
from .season_episode import SimpleDate, SxE

__all__ = [
    "CatalogEntry",
    "Group",
    "GroupedFile",
    "MediaCharacteristics",
    "MediaFile",
    "MediaKind",
    "MediaType",
    "SimpleDate",
    "StoredMetadata",
    "SxE",
]
