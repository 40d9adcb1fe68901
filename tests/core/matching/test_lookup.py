"""Tests for the catalog indices and candidate lookup."""

from __future__ import annotations

import logging
import threading

import pytest

from medialens.config.models.matching_settings import MatchingSettings
from medialens.core.matching.index import Catalog, IndexEntry
from medialens.core.matching.lookup import CandidateLookup
from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.services.catalog_provider import InMemoryCatalogProvider


class TestIndexEntry:
    """Test expansion of catalog entries into index rows."""

    def test_movie_rows_carry_strict_name(self, matrix):
        rows = IndexEntry.from_catalog_entry(matrix)

        assert [(r.lenient_name, r.strict_name) for r in rows] == [
            ("The Matrix", "The Matrix 1999"),
            ("Matrix", "Matrix 1999"),
        ]
        assert [k.key for k in rows[0].strict_key] == ["the", "matrix", "1999"]

    def test_movie_without_year(self):
        movie = CatalogEntry(MediaKind.MOVIE, 1, "Nameless")
        (row,) = IndexEntry.from_catalog_entry(movie)
        assert row.strict_name is None
        assert row.strict_key == row.lenient_key

    def test_series_rows_drop_trailing_qualifier(self, breaking_bad):
        """``Breaking Bad (2008)`` is indexed as ``Breaking Bad``."""
        rows = IndexEntry.from_catalog_entry(breaking_bad)

        assert [r.lenient_name for r in rows] == ["Breaking Bad", "Breaking Bad"]
        assert all(r.strict_name is None for r in rows)
        assert all(r.entry is breaking_bad for r in rows)


class TestCatalog:
    """Test lazy, per-kind index construction."""

    def test_index_built_once(self, mocker, matrix):
        provider = mocker.Mock()
        provider.movies.return_value = [matrix]
        catalog = Catalog(provider)

        first = catalog.movie_index
        second = catalog.index(MediaKind.MOVIE)

        assert first is second
        assert len(first) == 2
        provider.movies.assert_called_once()
        provider.series.assert_not_called()

    def test_reset_rebuilds(self, mocker, matrix):
        provider = mocker.Mock()
        provider.movies.return_value = [matrix]
        catalog = Catalog(provider)

        catalog.movie_index
        catalog.reset()
        catalog.movie_index

        assert provider.movies.call_count == 2

    def test_failing_provider_yields_empty_index(self, mocker, breaking_bad, caplog):
        """A load failure empties that index only and is logged as an error."""
        provider = mocker.Mock()
        provider.movies.side_effect = OSError("disk gone")
        provider.series.return_value = [breaking_bad]
        catalog = Catalog(provider)

        with caplog.at_level(logging.ERROR):
            assert catalog.movie_index == ()
        assert len(catalog.series_index) == 2
        assert any(r.levelno == logging.ERROR for r in caplog.records)

    def test_no_provider(self):
        assert Catalog().anime_index == ()

    def test_concurrent_first_access_builds_once(self, mocker, matrix):
        provider = mocker.Mock()
        provider.movies.return_value = [matrix]
        catalog = Catalog(provider)
        results = []

        def worker():
            results.append(catalog.movie_index)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        provider.movies.assert_called_once()
        assert all(r is results[0] for r in results)


class TestLookup:
    """Test single-name lookups."""

    def test_movie_strict_match(self, lookup, matrix):
        assert lookup.lookup("The Matrix 1999", MediaKind.MOVIE) == [matrix]

    def test_strict_requires_year(self, lookup, matrix):
        """A lenient-key match only counts in non-strict mode."""
        assert lookup.lookup("The Matrix", MediaKind.MOVIE, strict=True) == []
        assert lookup.lookup("The Matrix", MediaKind.MOVIE, strict=False) == [matrix]

    def test_alias_rows_deduplicated(self, lookup, breaking_bad):
        """Two alias rows of one entry yield the entry once."""
        assert lookup.lookup("Breaking Bad", MediaKind.SERIES) == [breaking_bad]

    def test_indices_are_separate(self, lookup, dexter_series, dexter_movie):
        assert lookup.lookup("Dexter", MediaKind.SERIES) == [dexter_series]
        assert lookup.lookup("Dexter", MediaKind.MOVIE, strict=False) == [dexter_movie]

    def test_anime_alias(self, lookup, frieren):
        assert lookup.lookup("Frieren", MediaKind.ANIME) == [frieren]

    def test_short_query_rejected(self, lookup):
        assert lookup.lookup("Up", MediaKind.MOVIE, strict=False) == []
        assert not lookup.is_valid_query("a.b")

    def test_min_query_length_is_configurable(self, catalog, breaking_bad):
        """``Breaking Bad`` carries eleven significant characters."""
        too_short = CandidateLookup(catalog, MatchingSettings(min_query_length=12))
        just_enough = CandidateLookup(catalog, MatchingSettings(min_query_length=11))

        assert too_short.lookup("Breaking Bad", MediaKind.SERIES) == []
        assert just_enough.lookup("Breaking Bad", MediaKind.SERIES) == [breaking_bad]

    def test_clutter_only_query_rejected(self, lookup):
        """Release clutter does not count towards the query length."""
        assert not lookup.is_valid_query("1080p.BluRay.x264")
        assert lookup.lookup("1080p.BluRay.x264", MediaKind.MOVIE, strict=False) == []
        assert lookup.is_valid_query("Dexter.1080p.BluRay")

    def test_empty_catalog(self, empty_catalog):
        assert CandidateLookup(empty_catalog).lookup("Breaking Bad", MediaKind.SERIES) == []

    def test_failing_catalog_returns_empty(self, mocker):
        """A broken catalog resource degrades to no matches."""
        provider = mocker.Mock()
        provider.series.side_effect = ValueError("corrupt snapshot")
        lookup = CandidateLookup(Catalog(provider))

        assert lookup.lookup("Breaking Bad", MediaKind.SERIES) == []

    def test_longest_name_ranked_first(self):
        """Of several full matches the more specific one wins."""
        short = CatalogEntry(MediaKind.SERIES, 1, "Lost")
        long = CatalogEntry(MediaKind.SERIES, 2, "Lost in Space")
        catalog = Catalog(InMemoryCatalogProvider(series=[short, long]))

        result = CandidateLookup(catalog).lookup("Lost in Space 1998", MediaKind.SERIES)

        assert result == [long, short]


class TestMatchHelpers:
    """Test the multi-name matchers used by detection."""

    def test_match_movie_name(self, lookup, matrix):
        assert lookup.match_movie_name(["The.Matrix.1999.1080p"], True, 0) == [matrix]

    def test_match_movie_name_offset(self, lookup, matrix):
        """A start offset allows leading noise words."""
        assert lookup.match_movie_name(["Watch The Matrix 1999"], True, 0) == []
        assert lookup.match_movie_name(["Watch The Matrix 1999"], True, 2) == [matrix]

    @pytest.mark.parametrize(
        ("query", "kind", "expected"),
        [
            ("The The Matrix 1999", MediaKind.MOVIE, "matrix"),
            ("Breaking Breaking Bad", MediaKind.SERIES, "breaking_bad"),
        ],
    )
    def test_repeated_first_word_within_offset(self, lookup, request, query, kind, expected):
        """A name starting inside the offset matches even when its first word also appears earlier."""
        assert lookup.lookup(query, kind, True, 2) == [request.getfixturevalue(expected)]

    def test_longest_run_is_used_for_series(self, breaking_bad):
        trek = CatalogEntry(MediaKind.SERIES, 3, "Star Trek")
        lookup = CandidateLookup(Catalog(InMemoryCatalogProvider(series=[trek, breaking_bad])))

        assert lookup.match_series_by_name(["Star Wars Star Trek"], 2) == ["Star Trek"]
        assert lookup.match_series_entries(["Star Wars Star Trek"], 2) == [trek]
        assert lookup.match_series_by_name(["Star Wars Star Trek"], 1) == []

    def test_match_series_by_name(self, lookup, breaking_bad):
        assert lookup.match_series_by_name(["Breaking Bad S01E01"], 0) == ["Breaking Bad"]
        assert lookup.match_series_entries(["Breaking Bad S01E01"], 0) == [breaking_bad]

    def test_match_movie_without_spacing(self, lookup, matrix):
        assert lookup.match_movie_without_spacing(["Matrix.1999"], True) == [matrix]

    def test_match_movie_without_spacing_thresholds(self, lookup, matrix):
        """A term with extra letters only passes the lenient threshold."""
        assert lookup.match_movie_without_spacing(["TheMatrix1999"], True) == []
        assert lookup.match_movie_without_spacing(["TheMatrix1999"], False) == [matrix]

    def test_match_series_without_spacing(self, lookup, breaking_bad):
        assert lookup.match_series_without_spacing(["BreakingBad"], True) == [breaking_bad]

    def test_probable_matches(self, lookup, matrix, avatar):
        """Prefix matches are boosted, weak matches are dropped."""
        assert lookup.get_probable_matches("Matrix", [matrix, avatar], alias=True, strict=True) == [matrix]

    def test_probable_matches_without_query(self, lookup, matrix):
        assert lookup.get_probable_matches(None, [matrix, matrix], alias=False, strict=True) == [matrix]

    @pytest.mark.parametrize("kind", list(MediaKind))
    def test_empty_names(self, lookup, kind):
        assert lookup.match_series_by_name([], 0, kind) == []
