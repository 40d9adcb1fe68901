"""Detection constants: media extensions and path heuristics."""

from __future__ import annotations

import re
from typing import ClassVar, Final

VIDEO_EXTENSIONS: Final[tuple[str, ...]] = (
    ".avi",
    ".m2ts",
    ".m4v",
    ".mkv",
    ".mov",
    ".mp4",
    ".mpg",
    ".mpeg",
    ".ogm",
    ".ts",
    ".webm",
    ".wmv",
)

AUDIO_EXTENSIONS: Final[tuple[str, ...]] = (
    ".aac",
    ".aiff",
    ".alac",
    ".ape",
    ".flac",
    ".m4a",
    ".mp3",
    ".ogg",
    ".opus",
    ".wav",
    ".wma",
)

ONE_MEGABYTE: Final[int] = 1024 * 1024


class FolderPatterns:
    """Folder names that announce the content type of everything below them.

    Matched against the whole folder name of every ancestor up to the
    volume root.
    """

    MOVIE: ClassVar[re.Pattern[str]] = re.compile(r"Movies", re.IGNORECASE)
    SERIES: ClassVar[re.Pattern[str]] = re.compile(
        r"TV.Shows|TV.Series|Season.[0-9]+", re.IGNORECASE
    )
    ANIME: ClassVar[re.Pattern[str]] = re.compile(r"Anime", re.IGNORECASE)


class NamePatterns:
    """Filename heuristics used by grouping and the rule engine."""

    EPISODE: ClassVar[re.Pattern[str]] = re.compile(r"E[P]?\d{1,3}", re.IGNORECASE)
    SERIES_EPISODE: ClassVar[re.Pattern[str]] = re.compile(r"^tv[sp][ _.-]", re.IGNORECASE)
    ANIME_EPISODE: ClassVar[re.Pattern[str]] = re.compile(r"^\[[^\]]+Subs\]", re.IGNORECASE)

    JAPANESE_AUDIO_LANGUAGE: ClassVar[re.Pattern[str]] = re.compile(
        r"jpn|Japanese", re.IGNORECASE
    )
    JAPANESE_SUBTITLE_CODEC: ClassVar[re.Pattern[str]] = re.compile(r"ASS|SSA", re.IGNORECASE)

    IMDB_ID: ClassVar[re.Pattern[str]] = re.compile(
        r"(?<![A-Za-z0-9])tt(\d{7})(?![A-Za-z0-9])", re.IGNORECASE
    )

    YEAR: ClassVar[re.Pattern[str]] = re.compile(r"\D(?:19|20)\d{2}\D")
    EPISODE_NUMBERS: ClassVar[re.Pattern[str]] = re.compile(r"\b\d{1,3}\b")
    DASH: ClassVar[re.Pattern[str]] = re.compile(r"^.{0,3}\s[-]\s.+$")
    NUMBER_PAIR: ClassVar[re.Pattern[str]] = re.compile(r"\D\d{1,2}\D{1,3}\d{1,2}\D")
    # letters, whitespace and ASCII punctuation only
    NON_NUMBER_NAME: ClassVar[re.Pattern[str]] = re.compile(
        r"^(?:[^\W\d_]|\s|[!-/:-@\[-`{-~])+$"
    )


__all__ = [
    "AUDIO_EXTENSIONS",
    "FolderPatterns",
    "NamePatterns",
    "ONE_MEGABYTE",
    "VIDEO_EXTENSIONS",
]
