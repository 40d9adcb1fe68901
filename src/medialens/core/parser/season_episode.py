"""Season/episode and air-date parsing for episode filenames.

Patterns are tried in a fixed order and the first one that yields any
result wins. Sanity filters reject numbers that are more likely years,
resolutions or track numbers than episode identifiers.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import PurePath
from typing import Protocol

from medialens.core.models.season_episode import UNDEFINED, SimpleDate, SxE
from medialens.core.normalization import strip_format_info

logger = logging.getLogger(__name__)

_NOT_ALNUM = "[^A-Za-z0-9]"
_NUMBER = re.compile(r"\d+")
_NON_DIGIT = re.compile(r"\D+")


def _match_integers(text: str | None) -> list[int]:
    if not text:
        return []
    return [int(n) for n in _NUMBER.findall(text)]


def _match_integer(text: str | None) -> int | None:
    numbers = _match_integers(text)
    return numbers[0] if numbers else None


def _parse(number: str | int | None) -> int:
    if number is None or number == "":
        return UNDEFINED
    try:
        return int(number)
    except ValueError:
        return UNDEFINED


def _sxe(season: str | int | None, episode: str | int | None) -> SxE:
    return SxE(_parse(season), _parse(episode))


@dataclass(frozen=True)
class SeasonEpisodeFilter:
    """Plausibility limits for parsed numbers.

    A value with a season passes if the season is below ``season_limit``
    (or looks like a year between ``season_year_begin`` and
    ``season_year_end``) and the episode is below ``season_episode_limit``.
    A value without a season passes if the episode is below
    ``absolute_episode_limit``.
    """

    season_limit: int
    season_episode_limit: int
    absolute_episode_limit: int
    season_year_begin: int
    season_year_end: int

    def accept(self, sxe: SxE) -> bool:
        if sxe.season >= 0:
            season_ok = sxe.season < self.season_limit or (
                self.season_year_begin < sxe.season < self.season_year_end
            )
            return season_ok and sxe.episode < self.season_episode_limit
        return sxe.episode < self.absolute_episode_limit

    def accept_in_sequence(self, value: SxE, sequence: Sequence[SxE]) -> bool:
        """Accept a value only if no earlier value of the same shape is larger."""
        if not self.accept(value):
            return False
        undefined_season = value.season == UNDEFINED
        return not any(
            (other.season == UNDEFINED) == undefined_season
            and (other.season, other.episode) > (value.season, value.episode)
            for other in sequence
        )


LENIENT_SANITY = SeasonEpisodeFilter(99, 999, 9999, 1970, 2100)
DEFAULT_SANITY = SeasonEpisodeFilter(50, 50, 1000, 1970, 2100)
STRICT_SANITY = SeasonEpisodeFilter(10, 30, -1, -1, -1)


class SeasonEpisodeParser(Protocol):
    def match(self, name: str) -> list[SxE]: ...

    def find(self, name: str, from_index: int) -> int: ...


class SeasonEpisodePattern:
    """One regex together with the function turning a match into SxE values."""

    def __init__(
        self,
        sanity: SeasonEpisodeFilter | None,
        pattern: str,
        process: Callable[[re.Match[str]], list[SxE]],
    ) -> None:
        self.pattern = re.compile(pattern, re.ASCII)
        self.process = process
        self.sanity = sanity

    def match(self, name: str) -> list[SxE]:
        matches: list[SxE] = []
        for m in self.pattern.finditer(name):
            for value in self.process(m):
                if self.sanity is None or self.sanity.accept_in_sequence(value, matches):
                    matches.append(value)
        return matches

    def find(self, name: str, from_index: int) -> int:
        for m in self.pattern.finditer(name, from_index):
            for value in self.process(m):
                if self.sanity is None or self.sanity.accept(value):
                    return m.start()
        return -1

    def __repr__(self) -> str:
        return self.pattern.pattern


class SeasonEpisodeUnion:
    """Several patterns whose results are merged in order."""

    def __init__(self, *parsers: SeasonEpisodeParser) -> None:
        self.parsers = parsers

    def match(self, name: str) -> list[SxE]:
        matches: dict[SxE, None] = {}
        for parser in self.parsers:
            matches.update(dict.fromkeys(parser.match(name)))
        return list(matches)

    def find(self, name: str, from_index: int) -> int:
        positions = [p for p in (parser.find(name, from_index) for parser in self.parsers) if p >= 0]
        return min(positions) if positions else -1


def _single(season: str | None, episode: str | None) -> list[SxE]:
    return [_sxe(season, episode)]


def _multi(season: str | None, *episodes: str | None) -> list[SxE]:
    s = _match_integer(season)
    return [_sxe(s, e) for text in episodes for e in _match_integers(text)]


def _range(season: str | None, *episodes: str | None) -> list[SxE]:
    numbers = [n for text in episodes for n in _match_integers(text)]
    if not numbers:
        return []
    low, high = min(numbers), max(numbers)
    # a wide range without a season is more likely a season pack than a multi-episode
    if season is None and high - low >= 9:
        return []
    s = _match_integer(season)
    return [_sxe(s, e) for e in range(low, high + 1)]


def _pairs(text: str) -> list[SxE]:
    numbers = [n for n in _NON_DIGIT.split(text) if n]
    return [_sxe(numbers[i], numbers[i + 1]) for i in range(0, len(numbers) - 1, 2)]


def _numbers(head: str, *tail: str) -> list[SxE]:
    matches: list[SxE] = []
    # 001 is not Season 0 Episode 1
    for t in tail:
        sxe = _sxe(head, t)
        if sxe.season > 0:
            matches.append(sxe)

    # a single number is also read as an absolute episode number
    if len(tail) == 1:
        absolute = _sxe(None, head + tail[0])
        if absolute not in matches:
            matches.append(absolute)
    return matches


class SeasonEpisodeMatcher:
    """Parses season and episode numbers from names and paths.

    Strict mode only uses the explicit patterns (``S01E02``, ``1x02``,
    ``Season 1 Episode 2``, ``1.02``, season packs like ``S01``).
    Non-strict mode also accepts number ranges, ``ep1`` style markers,
    bare ``101`` tokens and ``1 of 2``. Video format tokens like ``x264``
    or ``720p`` are stripped before parsing.

    Args:
        sanity: Plausibility filter for the numeric patterns
        strict: Use only the explicit patterns

    Example:
        >>> SeasonEpisodeMatcher(DEFAULT_SANITY, strict=True).match("Dexter.S01E02.720p")
        [SxE(season=1, episode=2)]
    """

    SEASON_FOLDER = re.compile(r"Season[-._ ]?(\d{1,2})", re.IGNORECASE)

    def __init__(self, sanity: SeasonEpisodeFilter = DEFAULT_SANITY, strict: bool = True) -> None:
        na = _NOT_ALNUM

        season_00_episode_00 = SeasonEpisodePattern(
            None,
            rf"(?<![A-Za-z0-9])(?i:season|series){na}{{0,3}}(\d{{1,4}}){na}{{0,3}}(?i:episode){na}{{0,3}}"
            rf"((\d{{1,3}}(\D|$))+){na}{{0,3}}(?!\d)",
            lambda m: _range(m.group(1), m.group(2)),
        )
        s00e00_seq = SeasonEpisodePattern(
            None,
            r"(?<![A-Za-z0-9-])[Ss](\d{1,2}|\d{4})[Ee](\d{2,3})[-][Ee](\d{2,3})(?![A-Za-z0-9-])",
            lambda m: _range(m.group(1), m.group(2), m.group(3)),
        )
        s00e00 = SeasonEpisodePattern(
            None,
            rf"(?<!\d)[Ss](\d{{1,2}}|\d{{4}}){na}{{0,3}}(?i:ep|e|p|-)(((?<=[^._ ])[Ee]?[Pp]?\d{{1,3}}(\D|$))+)",
            lambda m: _multi(m.group(1), m.group(2)),
        )
        sxe1_sxe2 = SeasonEpisodePattern(
            sanity,
            r"(?<![A-Za-z0-9])(\d{1,2}x\d{2}([-._ ]\d{1,2}x\d{2})+)(?!\d)",
            lambda m: _pairs(m.group()),
        )
        sxe = SeasonEpisodePattern(
            sanity,
            r"(?<![A-Za-z0-9])(\d{1,2})[xe](((?<=[^._ ])\d{2,3}(\D|$))+)",
            lambda m: _multi(m.group(1), m.group(2)),
        )
        dot101 = SeasonEpisodePattern(
            sanity,
            r"(?<![A-Za-z0-9])(?<!\d{4}[.])(\d{1,2})[.](\d{2})(?![A-Za-z0-9])",
            lambda m: _multi(m.group(1), m.group(2)),
        )
        season_pack = SeasonEpisodePattern(
            None,
            r"(?<![A-Za-z0-9])[Ss](\d{1,2})(?![A-Za-z0-9])",
            lambda m: [_sxe(m.group(1), None)],
        )
        e01e02_seq = SeasonEpisodePattern(
            sanity,
            r"(?<![A-Za-z0-9-])(\d{2,3})[-](\d{2,3})(?![A-Za-z0-9-])",
            lambda m: _range(None, m.group(1), m.group(2)),
        )
        ep0 = SeasonEpisodePattern(
            sanity,
            rf"(?<![A-Za-z0-9])(\d{{2}}|\d{{4}})?{na}{{0,3}}"
            rf"(((?i:e|ep|episode|p|part){na}{{0,3}}\d{{1,3}})+)(?!\d)",
            lambda m: _multi(m.group(1), m.group(2)),
        )
        num101_token = SeasonEpisodePattern(
            sanity,
            r"(?<![A-Za-z0-9])([0-2]?\d?)(\d{2})(\d{2})?(?![A-Za-z0-9])",
            lambda m: _numbers(m.group(1), *(g for g in m.groups()[1:] if g is not None)),
        )
        e1of2 = SeasonEpisodePattern(
            sanity,
            r"(?<![A-Za-z0-9])(\d{1,2})[^._ ]?(?i:of)[^._ ]?(\d{1,2})(?!\d)",
            lambda m: _single(None, m.group(1)),
        )
        # last resort, greedily take the first 101 style number
        num101_substring = SeasonEpisodePattern(
            STRICT_SANITY,
            r"(?<!\d)(\d{1})(\d{2})(?!\d)(.*)",
            lambda m: _single(m.group(1), m.group(2)),
        )

        self.strict = strict
        self.patterns: list[SeasonEpisodeParser] = [
            season_00_episode_00,
            s00e00_seq,
            s00e00,
            sxe1_sxe2,
            sxe,
            dot101,
            season_pack,
        ]
        if not strict:
            self.patterns += [
                e01e02_seq,
                SeasonEpisodeUnion(ep0, num101_token, e1of2),
                num101_substring,
            ]

    @staticmethod
    def clean(name: str) -> str:
        return strip_format_info(name)

    def match(self, name: str) -> list[SxE] | None:
        """Numbers from the first pattern that matches, or None."""
        name = self.clean(name)
        for pattern in self.patterns:
            matches = pattern.match(name)
            if matches:
                return matches
        return None

    def match_path(self, path: PurePath | str) -> list[SxE] | None:
        """Parse the file name, then its folder; complete a missing season from ``Season N``."""
        path = PurePath(path)
        tail = [self.clean(path.stem)]
        if path.parent.name:
            tail.append(self.clean(path.parent.name))

        for pattern in self.patterns:
            for t, name in enumerate(tail):
                matches = pattern.match(name)
                if not matches:
                    continue
                if t < len(tail) - 1:
                    season_match = self.SEASON_FOLDER.search(tail[t + 1])
                    if season_match:
                        season = int(season_match.group(1))
                        matches = [m.with_season(season) if m.season < 0 else m for m in matches]
                return matches
        return None

    def find(self, name: str, from_index: int = 0) -> int:
        for pattern in self.patterns:
            index = pattern.find(name, from_index)
            if index >= 0:
                return index
        return -1

    def head(self, name: str) -> str | None:
        """Text in front of the first episode identifier, if it does not start the name."""
        name = self.clean(name)
        position = self.find(name, 0)
        if position > 0:
            return name[:position].strip()
        return None


MONTHS_FULL = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTHS_SHORT = tuple(m[:3] for m in MONTHS_FULL)


@dataclass(frozen=True)
class _DatePattern:
    pattern: re.Pattern[str]
    fields: tuple[str, ...]

    def process(self, m: re.Match[str], min_date: datetime.date, max_date: datetime.date) -> SimpleDate | None:
        values = dict(zip(self.fields, m.groups()))
        try:
            if "yyyyMMdd" in values:
                compact = values["yyyyMMdd"]
                year, month, day = int(compact[:4]), int(compact[4:6]), int(compact[6:])
            else:
                year, day = int(values["y"]), int(values["d"])
                if "M" in values:
                    month = int(values["M"])
                else:
                    month_name = values.get("MMMM") or values["MMM"]
                    month = [n.lower() for n in (MONTHS_FULL if "MMMM" in values else MONTHS_SHORT)].index(
                        month_name.lower()
                    ) + 1
            date = datetime.date(year, month, day)
        except ValueError:
            # invalid date
            return None

        if min_date < date < max_date:
            return SimpleDate(date.year, date.month, date.day)
        return None


class DateMatcher:
    """Finds air dates like ``2010-10-24``, ``25 July 2014`` or ``20140408``.

    Args:
        min_year: Dates must be after January 1st of this year
        max_year: Dates must be before January 1st of this year
    """

    FORMATS = ("y M d", "d M y", "y MMMM d", "y MMM d", "d MMMM y", "d MMM y", "yyyyMMdd")

    def __init__(self, min_year: int = 1930, max_year: int = 2050) -> None:
        self.min_date = datetime.date(min_year, 1, 1)
        self.max_date = datetime.date(max_year, 1, 1)
        self.patterns = [self._compile(f) for f in self.FORMATS]

    @staticmethod
    def _group(token: str) -> str:
        groups = {
            "y": r"(\d{4})",
            "M": r"(\d{1,2})",
            "d": r"(\d{1,2})",
            "yyyyMMdd": r"(\d{8})",
            "MMMM": "(" + "|".join(MONTHS_FULL) + ")",
            "MMM": "(" + "|".join(MONTHS_SHORT) + ")",
        }
        return groups[token]

    def _compile(self, date_format: str) -> _DatePattern:
        tokens = tuple(date_format.split(" "))
        regex = r"(?<![A-Za-z0-9])" + r"\D".join(self._group(t) for t in tokens) + r"(?![A-Za-z0-9])"
        return _DatePattern(re.compile(regex, re.IGNORECASE | re.ASCII), tokens)

    def match(self, text: str) -> SimpleDate | None:
        for date_pattern in self.patterns:
            m = date_pattern.pattern.search(text)
            if m:
                date = date_pattern.process(m, self.min_date, self.max_date)
                if date is not None:
                    return date
        return None

    def match_path(self, path: PurePath | str) -> SimpleDate | None:
        path = PurePath(path)
        for name in (path.stem, path.parent.name):
            date = self.match(name) if name else None
            if date is not None:
                return date
        return None

    def find(self, text: str, from_index: int = 0) -> int:
        for date_pattern in self.patterns:
            m = date_pattern.pattern.search(text, from_index)
            if m and date_pattern.process(m, self.min_date, self.max_date) is not None:
                return m.start()
        return -1


__all__ = [
    "DEFAULT_SANITY",
    "DateMatcher",
    "LENIENT_SANITY",
    "STRICT_SANITY",
    "SeasonEpisodeFilter",
    "SeasonEpisodeMatcher",
    "SeasonEpisodePattern",
    "SeasonEpisodeUnion",
]
