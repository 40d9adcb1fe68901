"""Parser module for episode identifiers, air dates and series names.

This module provides the pattern-based parsers used by media detection:
season/episode numbers, air dates, series names and fansub release markers.
"""

from medialens.core.parser.anime_release import AnimeReleaseInfo, parse_anime_release
from medialens.core.parser.season_episode import (
    DEFAULT_SANITY,
    LENIENT_SANITY,
    STRICT_SANITY,
    DateMatcher,
    SeasonEpisodeFilter,
    SeasonEpisodeMatcher,
)
from medialens.core.parser.series_name import SeriesNameMatcher

__all__ = [
    "AnimeReleaseInfo",
    "DEFAULT_SANITY",
    "DateMatcher",
    "LENIENT_SANITY",
    "STRICT_SANITY",
    "SeasonEpisodeFilter",
    "SeasonEpisodeMatcher",
    "SeriesNameMatcher",
    "parse_anime_release",
]
