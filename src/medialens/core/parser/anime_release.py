"""Fansub release markers extracted with anitopy.

Anime fansub releases carry a leading ``[Group]`` tag and often a CRC32
checksum; both are strong hints that a file is an anime episode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anitopy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnimeReleaseInfo:
    """Release markers anitopy found in a filename."""

    title: str | None = None
    release_group: str | None = None
    checksum: str | None = None
    episode: int | None = None

    @property
    def has_release_markers(self) -> bool:
        return bool(self.release_group or self.checksum)


def _first(value: object) -> str | None:
    # anitopy returns a list when an element occurs more than once
    if isinstance(value, list):
        value = value[0] if value else None
    return str(value) if value is not None else None


def _episode_number(value: object) -> int | None:
    raw = _first(value)
    if raw is None:
        return None
    try:
        return int(raw.lstrip("0") or "0")
    except ValueError:
        logger.debug("Ignoring non-numeric episode number: %s", raw)
        return None


def parse_anime_release(filename: str) -> AnimeReleaseInfo:
    """Parse fansub release markers from a filename.

    Args:
        filename: File name, with or without extension

    Returns:
        The markers found; an empty AnimeReleaseInfo if anitopy fails

    Examples:
        >>> info = parse_anime_release("[SubsPlease] Frieren - 01 (1080p) [ABCD1234].mkv")
        >>> info.release_group, info.checksum, info.episode
        ('SubsPlease', 'ABCD1234', 1)
    """
    try:
        parsed = anitopy.parse(filename) or {}
    except (KeyError, ValueError, TypeError, AttributeError, IndexError) as e:
        logger.warning("anitopy failed to parse filename '%s': %s", filename, e)
        return AnimeReleaseInfo()

    return AnimeReleaseInfo(
        title=_first(parsed.get("anime_title")),
        release_group=_first(parsed.get("release_group")),
        checksum=_first(parsed.get("file_checksum")),
        episode=_episode_number(parsed.get("episode_number")),
    )


__all__ = ["AnimeReleaseInfo", "parse_anime_release"]
