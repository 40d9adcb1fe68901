"""Series-name extraction from episode filenames.

A series name is taken from the text in front of the first episode
identifier (or air date), from the text in front of a `` - `` separator,
or from the word sequence a set of sibling filenames has in common.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import PurePath

from medialens.core.matching.collation import CollationKey, split_keys, synthesize
from medialens.core.matching.common_sequence import CommonSequenceMatcher
from medialens.core.matching.metrics import NameSimilarity
from medialens.core.normalization import normalize_brackets, normalize_punctuation

from .season_episode import DEFAULT_SANITY, DateMatcher, SeasonEpisodeMatcher

logger = logging.getLogger(__name__)

SEPARATOR = re.compile(r"\s+-+\s+")

# prefer the folder's spelling when it is this close to the filename match
COMMON_MATCH_SIMILARITY = 0.7


def _case_balance(value: str) -> float:
    upper = lower = 0
    for word in value.split():
        first = word[0]
        if first.islower():
            lower += 1
        elif first.isupper():
            upper += 1

    # upper case gets a slight boost over lower case
    weight = lower + upper * 1.01
    difference = abs(lower - upper)
    if difference == 0:
        return float("inf") if weight else float("nan")
    return weight / difference


class SeriesNameCollection:
    """Insertion-ordered names, one per case-insensitive spelling.

    Of two spellings the one with the better first-letter case balance is
    kept, so ``Roswell`` wins over ``roswell``.
    """

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._data: dict[str, str] = {}
        self.update(values)

    def add(self, value: str) -> bool:
        value = value.strip()
        if len(value) < 2:
            return False

        key = value.lower()
        current = self._data.get(key)
        if current is None or _case_balance(current) < _case_balance(value):
            self._data[key] = value
            return True
        return False

    def update(self, values: Iterable[str]) -> None:
        for value in values:
            self.add(value)

    def __contains__(self, value: object) -> bool:
        return str(value).lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data.values())

    def __len__(self) -> int:
        return len(self._data)


class ThresholdCollection:
    """Admits a value once it was seen ``threshold`` times.

    Values are compared by collation key, so ``Dexter`` and ``dexter``
    count towards the same total.
    """

    def __init__(self, threshold: int) -> None:
        self.threshold = threshold
        self._accepted: list[str] = []
        self._pending: dict[tuple[CollationKey, ...], list[str] | None] = {}

    def add(self, value: str) -> bool:
        key = split_keys(value)
        buffer = self._pending.setdefault(key, [])
        if buffer is None:
            self._accepted.append(value)
            return True

        buffer.append(value)
        if len(buffer) >= self.threshold:
            self._accepted.extend(buffer)
            self._pending[key] = None
            return True
        return False

    def add_direct(self, value: str) -> bool:
        self._accepted.append(value)
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self._accepted)

    def __len__(self) -> int:
        return len(self._accepted)


class SeriesNameMatcher:
    """Extracts probable series names from episode filenames.

    Args:
        strict: Only use explicit episode identifiers (``S01E02``, ``1x02``)
    """

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict
        self.season_episode_matcher = SeasonEpisodeMatcher(DEFAULT_SANITY, strict)
        self.date_matcher = DateMatcher()
        self.common_sequence_matcher = CommonSequenceMatcher(3, return_first_match=True)
        self.metric = NameSimilarity()

    @staticmethod
    def normalize(name: str) -> str:
        # drop [...] and (...) groups, then punctuation
        return normalize_punctuation(normalize_brackets(name))

    def _common_sequence(self, names: Sequence[str]) -> str | None:
        keys = [split_keys(self.normalize(name)) for name in names]
        return synthesize(self.common_sequence_matcher.match_first_common_sequence(keys))

    def match_by_episode_identifier(self, name: str) -> str | None:
        """Text in front of the first episode identifier or air date."""
        series_name = self.season_episode_matcher.head(name)
        if series_name:
            return series_name

        date_position = self.date_matcher.find(name, 0)
        if date_position > 0:
            return name[:date_position]
        return None

    def match_by_separator(self, name: str) -> str | None:
        """Text in front of a `` - `` separator."""
        m = SEPARATOR.search(name)
        if m and m.start() > 0:
            return normalize_punctuation(name[: m.start()])
        return None

    def match_by_first_common_word_sequence(self, *names: str) -> str | None:
        """Word sequence all names have in common.

        Raises:
            ValueError: If fewer than two names are given
        """
        if len(names) < 2:
            raise ValueError("Can't match common sequence from less than two names")
        return self._common_sequence(names)

    def match_all_files(self, files: Iterable[PurePath | str]) -> list[str]:
        """Series names for files, matched per folder.

        When the folder name shares a word sequence with a filename match
        and that sequence is very similar to it, the folder spelling wins.
        """
        series_names = SeriesNameCollection()

        by_folder: dict[PurePath, list[str]] = {}
        for f in files:
            path = PurePath(f)
            by_folder.setdefault(path.parent, []).append(path.stem)

        for folder, names in by_folder.items():
            parent = folder.name
            for name_match in self.match_all(names):
                common_match = self._common_sequence([name_match, parent]) if parent else None
                similarity = self.metric.get_similarity(common_match, name_match) if common_match else 0.0
                series_names.add(common_match if similarity > COMMON_MATCH_SIMILARITY and common_match else name_match)

        return list(series_names)

    def match_all(self, names: Sequence[str]) -> list[str]:
        """Series names found in a set of episode names.

        Common word sequences found among the names act as a whitelist:
        they are reported, and episode identifiers are only looked for
        after them.
        """
        threshold = min(len(names), 5)

        focus = []
        for name in names:
            before = self.season_episode_matcher.head(name)
            if before:
                focus.append(before)
                continue
            date_position = self.date_matcher.find(name, 0)
            focus.append(name[:date_position] if date_position >= 0 else name)

        whitelist = SeriesNameCollection(self._deep_match_all(focus, threshold))
        prefix = re.compile("|".join(re.escape(w) for w in whitelist), re.IGNORECASE)

        series_names = SeriesNameCollection(self._flat_match_all(names, prefix, threshold))
        series_names.update(whitelist)
        return list(series_names)

    def _flat_match_all(
        self,
        names: Sequence[str],
        prefix_pattern: re.Pattern[str],
        threshold: int,
    ) -> ThresholdCollection:
        collection = ThresholdCollection(threshold)

        for name in names:
            name = self.normalize(name)
            prefix = prefix_pattern.search(name)
            prefix_end = prefix.end() if prefix else 0

            position = self.season_episode_matcher.find(name, prefix_end)
            if position > 0:
                hit = name[:position].strip()
                sxe = self.season_episode_matcher.match(name[position:]) or []
                if len(sxe) == 1 and sxe[0].season >= 0:
                    # a full SxE is unlikely to be a false match
                    collection.add_direct(hit)
                else:
                    collection.add(hit)
                continue

            date_position = self.date_matcher.find(name, prefix_end)
            if date_position > 0:
                collection.add_direct(name[:date_position].strip())

        return collection

    def _deep_match_all(self, names: Sequence[str], threshold: int) -> list[str]:
        if len(names) < 2 or len(names) < threshold:
            return []

        common = self._common_sequence(names)
        if common is not None:
            return [common]

        middle = len(names) // 2
        return self._deep_match_all(names[:middle], threshold) + self._deep_match_all(
            names[middle:], threshold
        )


__all__ = ["SeriesNameCollection", "SeriesNameMatcher", "ThresholdCollection"]
