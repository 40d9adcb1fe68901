"""Tests for the grouping, catalog and metadata models."""

from __future__ import annotations

from pathlib import Path

import pytest

from medialens.core.models.catalog import CatalogEntry, MediaKind
from medialens.core.models.file import MediaFile
from medialens.core.models.grouping import Group, GroupedFile, MediaType, normalize_series_slot
from medialens.core.models.metadata import StoredMetadata
from medialens.core.models.season_episode import SimpleDate, SxE
from medialens.shared.errors import DomainError, ErrorCode


class TestGroupSlots:
    """Test slot assignment and clearing."""

    def test_put_returns_copy(self, matrix):
        group = Group()
        filled = group.put(MediaType.MOVIE, matrix)

        assert group.movie is None
        assert filled.movie == matrix

    def test_clear_is_remembered(self):
        group = Group(series="dexter").clear(MediaType.SERIES)

        assert group.series is None
        assert group.is_cleared(MediaType.SERIES)
        assert not group.is_cleared(MediaType.MOVIE)

    def test_cleared_slot_cannot_be_refilled(self):
        """Once vetoed, a slot stays empty."""
        group = Group().clear(MediaType.MOVIE)

        with pytest.raises(DomainError) as exc_info:
            group.put(MediaType.MOVIE, CatalogEntry(MediaKind.MOVIE, 1, "Film"))

        assert exc_info.value.code is ErrorCode.GROUP_SLOT_CLEARED
        assert exc_info.value.context.additional_data["slot"] == "movie"

    def test_clearing_twice_is_allowed(self):
        group = Group().clear(MediaType.ANIME).clear(MediaType.ANIME)
        assert group.is_cleared(MediaType.ANIME)

    def test_with_helpers(self, matrix, avatar):
        group = Group().with_movie([matrix, avatar]).with_series(["Breaking.Bad"])

        assert group.movie == matrix
        assert group.series == "breaking bad"

    def test_with_empty_list_clears(self):
        group = Group().with_movie([]).with_anime(None)

        assert group.is_cleared(MediaType.MOVIE)
        assert group.is_cleared(MediaType.ANIME)

    def test_with_music_uses_parent_folder(self):
        group = Group().with_music(MediaFile(Path("/music/Artist/Album/01.flac")))
        assert group.music == Path("/music/Artist/Album")

    def test_normalize_series_slot(self):
        assert normalize_series_slot("Marvel's.Agents  of S.H.I.E.L.D.") == "marvels agents of s h i e l d"


class TestGroupQueries:
    """Test types, equality and ordering."""

    def test_types_in_display_order(self, matrix):
        group = Group(anime="frieren", movie=matrix)

        assert group.types() == [MediaType.MOVIE, MediaType.ANIME]
        assert not group.is_empty()
        assert Group().is_empty()

    def test_cleared_slots_do_not_affect_equality(self):
        assert Group().clear(MediaType.MOVIE) == Group()
        assert hash(Group(series="x").clear(MediaType.MOVIE)) == hash(Group(series="x"))

    def test_ordering(self, matrix):
        """Groups sort by slot count, then slot values."""
        groups = [
            Group(movie=matrix, series="matrix"),
            Group(series="b"),
            Group(series="a"),
            Group(movie=matrix),
            Group(),
        ]

        assert sorted(groups) == [
            Group(),
            Group(movie=matrix),
            Group(series="a"),
            Group(series="b"),
            Group(movie=matrix, series="matrix"),
        ]

    def test_to_dict(self, matrix):
        assert Group(movie=matrix).to_dict() == {
            "movie": "The Matrix (1999)",
            "series": None,
            "anime": None,
            "music": None,
        }

    def test_str(self):
        assert str(Group(series="dexter")) == "{'series': 'dexter'}"

    def test_grouped_file_to_dict(self):
        grouped = GroupedFile(MediaFile(Path("/tv/a.mkv")), Group(series="dexter"))

        data = grouped.to_dict()

        assert data["file"] == str(Path("/tv/a.mkv"))
        assert data["group"]["series"] == "dexter"


class TestCatalogEntry:
    """Test effective name derivation."""

    def test_effective_names(self, matrix):
        assert matrix.effective_names_without_year == ["The Matrix", "Matrix"]
        assert matrix.effective_names == ["The Matrix (1999)", "Matrix (1999)"]

    def test_duplicate_and_empty_aliases_dropped(self):
        entry = CatalogEntry(MediaKind.SERIES, 1, "Lost", ("Lost", "", "LOST"))
        assert entry.effective_names == ["Lost", "LOST"]

    def test_nameless_entry(self):
        assert CatalogEntry(MediaKind.ANIME, 1, "").effective_names == []

    def test_equality_ignores_aliases(self):
        assert CatalogEntry(MediaKind.SERIES, 1, "Lost", ("A",)) == CatalogEntry(MediaKind.SERIES, 1, "Lost")

    def test_str(self, matrix, breaking_bad):
        assert str(matrix) == "The Matrix (1999)"
        assert str(breaking_bad) == "Breaking Bad"


class TestStoredMetadata:
    @pytest.mark.parametrize(
        ("metadata", "movie", "episode", "anime"),
        [
            (StoredMetadata(MediaKind.MOVIE), True, False, False),
            (StoredMetadata(MediaKind.SERIES), False, True, False),
            (StoredMetadata(MediaKind.SERIES, database="AniDB"), False, True, True),
            (StoredMetadata(MediaKind.ANIME), False, True, True),
        ],
    )
    def test_properties(self, metadata, movie, episode, anime):
        assert (metadata.is_movie, metadata.is_episode, metadata.is_anime) == (movie, episode, anime)


class TestMediaFile:
    def test_properties(self):
        file = MediaFile("/tv/Dexter/Dexter.S01E01.MKV", 42)

        assert file.path == Path("/tv/Dexter/Dexter.S01E01.MKV")
        assert file.name == "Dexter.S01E01"
        assert file.extension == ".mkv"
        assert file.is_video
        assert not file.is_audio


class TestValueObjects:
    def test_sxe_str(self):
        assert str(SxE(1, 2)) == "1x02"
        assert str(SxE(3)) == "S03"
        assert str(SxE(episode=7)) == "07"
        assert SxE(1, 2).with_season(4) == SxE(4, 2)

    def test_simple_date(self):
        assert str(SimpleDate(2010, 10, 4)) == "2010-10-04"
        with pytest.raises(ValueError):
            SimpleDate(2010, 2, 30).to_date()
