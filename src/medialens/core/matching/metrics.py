"""Similarity metrics used to rank catalog candidates.

All metrics map a pair of objects (compared by their string form) to a
float, where higher means more similar. Most return values in 0.0-1.0;
the year metric is weighted and can reach 2.0.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import Protocol, TypeVar

from rapidfuzz import fuzz

from medialens.core.models.catalog import CatalogEntry
from medialens.core.normalization import (
    ascii_transliterate,
    normalize_punctuation,
    remove_trailing_brackets,
)

from .common_sequence import CommonSequenceMatcher

T = TypeVar("T", bound=Hashable)

INTEGER = re.compile(r"\d+")
YEAR_TOKEN = re.compile(r"\b\d{4}\b")


class SimilarityMetric(Protocol):
    def get_similarity(self, o1: object, o2: object) -> float: ...


class NameSimilarity:
    """Fuzzy name similarity on transliterated, punctuation-normalized text.

    Example:
        >>> NameSimilarity().get_similarity("Amélie", "amelie")
        1.0
    """

    def normalize(self, obj: object) -> str:
        name = ascii_transliterate(str(obj))
        return normalize_punctuation(name).lower()

    def get_similarity(self, o1: object, o2: object) -> float:
        s1, s2 = self.normalize(o1), self.normalize(o2)
        if not s1 or not s2:
            return 0.0
        return fuzz.ratio(s1, s2) / 100.0


class StringEquals:
    """1.0 if both normalized strings are equal, otherwise 0.0."""

    def normalize(self, obj: object) -> str:
        return normalize_punctuation(str(obj)).lower()

    def get_similarity(self, o1: object, o2: object) -> float:
        s1, s2 = self.normalize(o1), self.normalize(o2)
        return 1.0 if s1 and s1 == s2 else 0.0


class BracketlessStringEquals(StringEquals):
    """String equality ignoring a trailing ``(...)`` qualifier such as a year."""

    def normalize(self, obj: object) -> str:
        return super().normalize(remove_trailing_brackets(str(obj)))


class NumericSimilarity:
    """Block distance over the integer tokens of both strings."""

    def tokenize(self, obj: object) -> list[str]:
        return [str(int(m)) for m in INTEGER.findall(str(obj))]

    def get_similarity(self, o1: object, o2: object) -> float:
        c1, c2 = Counter(self.tokenize(o1)), Counter(self.tokenize(o2))
        total = sum(c1.values()) + sum(c2.values())
        if total == 0:
            return 0.0
        distance = sum(abs(c1[t] - c2[t]) for t in c1.keys() | c2.keys())
        return (total - distance) / total


class YearSimilarity(NumericSimilarity):
    """Numeric similarity on four-digit years, tolerant to off-by-one, weighted 2x."""

    def tokenize(self, obj: object) -> list[str]:
        tokens = []
        for year in YEAR_TOKEN.findall(str(obj)):
            tokens.extend((str(int(year)), str(int(year) + 1)))
        return tokens

    def get_similarity(self, o1: object, o2: object) -> float:
        return super().get_similarity(o1, o2) * 2


class SequenceMatchSimilarity:
    """Length of the common word sequence relative to the shorter string.

    Args:
        max_start_index: Largest allowed start offset of the common sequence
        return_first_match: Use the first common run instead of the longest
    """

    def __init__(self, max_start_index: int = 10, return_first_match: bool = False) -> None:
        self.matcher = CommonSequenceMatcher(max_start_index, return_first_match)

    def normalize(self, obj: object) -> str:
        return normalize_punctuation(str(obj)).strip().lower()

    def get_similarity(self, o1: object, o2: object) -> float:
        s1, s2 = self.normalize(o1), self.normalize(o2)
        match = self.matcher.match_first_common_sequence_str(s1, s2)
        if not match:
            return 0.0
        return len(match) / min(len(s1), len(s2))


class MetricAvg:
    """Unweighted average of several metrics."""

    def __init__(self, *metrics: SimilarityMetric) -> None:
        self.metrics = metrics

    def get_similarity(self, o1: object, o2: object) -> float:
        return sum(m.get_similarity(o1, o2) for m in self.metrics) / len(self.metrics)

    def __repr__(self) -> str:
        return f"MetricAvg{[type(m).__name__ for m in self.metrics]}"


def name_similarity(s1: str, s2: str) -> float:
    return NameSimilarity().get_similarity(s1, s2)


def numeric_similarity(s1: str, s2: str) -> float:
    return NumericSimilarity().get_similarity(s1, s2)


def sequence_match_similarity(
    s1: str, s2: str, max_start_index: int = 10, return_first_match: bool = False
) -> float:
    return SequenceMatchSimilarity(max_start_index, return_first_match).get_similarity(s1, s2)


def string_equals(s1: str, s2: str) -> float:
    return StringEquals().get_similarity(s1, s2)


def movie_match_metric() -> MetricAvg:
    """Composite metric for ranking movies against a filename-derived term."""
    return MetricAvg(
        NameSimilarity(),
        BracketlessStringEquals(),
        YearSimilarity(),
        SequenceMatchSimilarity(),
        SequenceMatchSimilarity(0, True),
    )


def series_match_metric() -> MetricAvg:
    """Composite metric for ranking series against a filename-derived term."""
    return MetricAvg(
        SequenceMatchSimilarity(),
        NameSimilarity(),
        SequenceMatchSimilarity(0, True),
    )


def _effective_names(option: object) -> Sequence[str]:
    if isinstance(option, CatalogEntry):
        return option.effective_names
    return [str(option)]


def sort_by_similarity(
    options: Iterable[T],
    terms: Iterable[str],
    metric: SimilarityMetric,
    mapper: Callable[[T], Sequence[str]] = _effective_names,
) -> list[T]:
    """Rank options by similarity to a set of terms and drop duplicates.

    An option scores the average, over all terms, of its best similarity
    across its names. Ties keep their input order.

    Args:
        options: Candidates to rank
        terms: Paragon strings derived from the query
        metric: Similarity metric
        mapper: Names of a candidate; catalog entries use their effective names

    Returns:
        Options sorted by descending similarity, first occurrence kept
    """
    paragon = [t for t in terms if t is not None]

    def similarity(option: T) -> float:
        if not paragon:
            return 0.0
        total = 0.0
        for term in paragon:
            total += max(
                (metric.get_similarity(term, name) for name in mapper(option) if name is not None),
                default=0.0,
            )
        return total / len(paragon)

    ranked = sorted(options, key=similarity, reverse=True)
    return list(dict.fromkeys(ranked))


__all__ = [
    "BracketlessStringEquals",
    "MetricAvg",
    "NameSimilarity",
    "NumericSimilarity",
    "SequenceMatchSimilarity",
    "SimilarityMetric",
    "StringEquals",
    "YearSimilarity",
    "movie_match_metric",
    "name_similarity",
    "numeric_similarity",
    "sequence_match_similarity",
    "series_match_metric",
    "sort_by_similarity",
    "string_equals",
]
