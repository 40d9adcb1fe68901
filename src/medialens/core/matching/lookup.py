"""Candidate lookup against the catalog indices.

Names are matched word by word against every index row with the
common-sequence matcher. A row counts as matched only when its whole key
was found. Movie rows can match strictly (name and year) or leniently
(name only); strict callers keep only strict matches.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Callable, Iterable, Sequence

from medialens.config.models.matching_settings import MatchingSettings
from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.core.normalization import normalize_punctuation, normalize_release, remove_trailing_brackets
from medialens.shared.constants import ReleaseVocabulary

from .collation import CollationKey, split_keys
from .common_sequence import CommonSequenceMatcher
from .index import Catalog, IndexEntry
from .metrics import NameSimilarity, movie_match_metric, series_match_metric, sort_by_similarity

logger = logging.getLogger(__name__)

SPACING = re.compile(ReleaseVocabulary.SPACING_PATTERN)


def _prepare(names: Iterable[str]) -> list[tuple[CollationKey, ...]]:
    return [split_keys(normalize_punctuation(n)) for n in names if n is not None]


def _is_full_match(
    matcher: CommonSequenceMatcher,
    name: tuple[CollationKey, ...],
    key: tuple[CollationKey, ...],
) -> bool:
    common = matcher.match_first_common_sequence([name, key])
    return common is not None and len(common) >= len(key)


def _remove_spacing(name: str) -> str:
    return SPACING.sub("", name).lower()


class CandidateLookup:
    """Ranks catalog entries for filename-derived names.

    Args:
        catalog: Catalog owning the movie, series and anime indices
        settings: Matching thresholds; defaults apply when omitted

    Example:
        >>> lookup = CandidateLookup(Catalog(provider))
        >>> [str(m) for m in lookup.lookup("The Matrix 1999", MediaKind.MOVIE)]
        ['The Matrix (1999)']
    """

    def __init__(self, catalog: Catalog, settings: MatchingSettings | None = None) -> None:
        self.catalog = catalog
        self.settings = settings or MatchingSettings()
        self._name_metric = NameSimilarity()

    def is_valid_query(self, query: str) -> bool:
        """Whether the query keeps enough significant characters once release clutter is removed."""
        significant = normalize_release(query, False).replace(" ", "")
        return len(significant) >= self.settings.min_query_length

    def lookup(
        self,
        query: str,
        kind: MediaKind = MediaKind.MOVIE,
        strict: bool = True,
        max_start_index: int = 0,
    ) -> list[CatalogEntry]:
        """Look up a single name in one index.

        Args:
            query: Name to look up, e.g. a cleaned filename
            kind: Index to search
            strict: Keep strict-key matches only
            max_start_index: Start-offset limit of the matched sequence

        Returns:
            Matching entries, strongest first, each entry at most once
        """
        if not self.is_valid_query(query):
            logger.debug("Rejected short query: %r", query)
            return []

        index = self.catalog.index(kind)
        if not index:
            return []

        matches = self._match_index([query], index, strict, max_start_index)
        metric = movie_match_metric() if kind is MediaKind.MOVIE else series_match_metric()
        return sort_by_similarity(matches, [normalize_punctuation(query)], metric)

    def _match_index(
        self,
        names: Iterable[str],
        index: Sequence[IndexEntry],
        strict: bool,
        max_start_index: int,
    ) -> list[CatalogEntry]:
        matcher = CommonSequenceMatcher(max_start_index)
        prepared = _prepare(names)
        matched: dict[CatalogEntry, str] = {}

        for row in index:
            for name in prepared:
                if not _is_full_match(matcher, name, row.lenient_key):
                    continue
                if row.strict_name is None or _is_full_match(matcher, name, row.strict_key):
                    # prefer the strict match
                    matched[row.entry] = row.strict_name or row.lenient_name
                elif not strict:
                    matched[row.entry] = row.lenient_name

        # longest matched name first
        return sorted(matched, key=lambda entry: len(matched[entry]), reverse=True)

    def match_movie_name(
        self,
        names: Iterable[str],
        strict: bool,
        max_start_index: int,
    ) -> list[CatalogEntry]:
        """Cross-reference file or folder names with the movie index."""
        return self._match_index(names, self.catalog.movie_index, strict, max_start_index)

    def _best_series_rows(
        self,
        names: Iterable[str],
        max_start_index: int,
        kind: MediaKind,
    ) -> list[IndexEntry]:
        matcher = CommonSequenceMatcher(max_start_index)
        index = self.catalog.index(kind)
        best_rows = []

        for name in _prepare(names):
            best: IndexEntry | None = None
            for row in index:
                key = row.lenient_key
                if _is_full_match(matcher, name, key) and (best is None or len(key) > len(best.lenient_key)):
                    best = row
            if best is not None:
                best_rows.append(best)

        return sorted(best_rows, key=lambda row: len(row.lenient_name), reverse=True)

    def match_series_by_name(
        self,
        names: Iterable[str],
        max_start_index: int,
        kind: MediaKind = MediaKind.SERIES,
    ) -> list[str]:
        """Best matching series name for each input name, longest first."""
        return [row.lenient_name for row in self._best_series_rows(names, max_start_index, kind)]

    def match_series_entries(
        self,
        names: Iterable[str],
        max_start_index: int,
        kind: MediaKind = MediaKind.SERIES,
    ) -> list[CatalogEntry]:
        """Like match_series_by_name, but returns the catalog entries."""
        rows = self._best_series_rows(names, max_start_index, kind)
        return list(dict.fromkeys(row.entry for row in rows))

    def _spacing_free_terms(self, names: Iterable[str]) -> list[str]:
        # only consider words, not just random letters
        return [t for t in (_remove_spacing(n) for n in names) if len(t) >= 3]

    def match_movie_without_spacing(self, names: Iterable[str], strict: bool) -> list[CatalogEntry]:
        """Match movies ignoring spaces, punctuation and a leading article.

        Catches names like ``TheDarkKnight2008``. Entries whose year also
        appears in the term are ranked first.
        """
        terms = self._spacing_free_terms(names)
        threshold = self.settings.without_spacing_threshold(movie=True, strict=strict)

        movies: deque[CatalogEntry] = deque()
        for row in self.catalog.movie_index:
            name = _remove_spacing(row.lenient_name)
            for term in terms:
                if name not in term:
                    continue
                year = str(row.entry.year)
                if year in term and self._name_metric.get_similarity(term, name + year) > threshold:
                    movies.appendleft(row.entry)
                elif self._name_metric.get_similarity(term, name) > threshold:
                    movies.append(row.entry)
                break

        return list(dict.fromkeys(movies))

    def match_series_without_spacing(
        self,
        names: Iterable[str],
        strict: bool,
        kind: MediaKind = MediaKind.SERIES,
    ) -> list[CatalogEntry]:
        """Match series ignoring spaces, punctuation and a leading article."""
        terms = self._spacing_free_terms(names)
        threshold = self.settings.without_spacing_threshold(movie=False, strict=strict)

        series: list[CatalogEntry] = []
        for row in self.catalog.index(kind):
            name = _remove_spacing(row.lenient_name)
            for term in terms:
                if name in term:
                    if self._name_metric.get_similarity(term, name) >= threshold:
                        series.append(row.entry)
                    break

        return list(dict.fromkeys(series))

    def get_probable_matches(
        self,
        query: str | None,
        options: Sequence[CatalogEntry],
        alias: bool,
        strict: bool,
    ) -> list[CatalogEntry]:
        """Filter search results down to the ones probably meant by the query.

        Args:
            query: Original query; None keeps every option
            options: Search results
            alias: Compare against all effective names instead of the primary name
            strict: Use the stricter thresholds when there is a real choice

        Returns:
            Probable matches sorted by name similarity
        """
        if query is None:
            return list(dict.fromkeys(options))

        names: Callable[[CatalogEntry], Sequence[str]]
        if alias:
            names = lambda option: option.effective_names  # noqa: E731
        else:
            names = lambda option: [option.name]  # noqa: E731

        choice = strict and len(options) > 1
        threshold = (
            self.settings.probable_match_threshold if choice else self.settings.probable_match_threshold_lenient
        )
        sanity = self.settings.probable_match_sanity if choice else self.settings.probable_match_sanity_lenient

        # Doctor Who (2005) -> doctor who
        q = remove_trailing_brackets(query).lower()

        probable = []
        for option in options:
            similarity = 0.0
            for name in names(option):
                n = remove_trailing_brackets(name).lower()
                similarity = max(similarity, self._name_metric.get_similarity(q, n))
                # boost matching beginnings
                if similarity >= sanity and n.startswith(q):
                    similarity = 1.0
                    break
            if similarity >= threshold:
                probable.append(option)

        return sort_by_similarity(probable, [query], self._name_metric, names)


__all__ = ["CandidateLookup"]
