"""Tests for season/episode parsing."""

from __future__ import annotations

import pytest

from medialens.core.models.season_episode import UNDEFINED, SxE
from medialens.core.parser.season_episode import (
    DEFAULT_SANITY,
    SeasonEpisodeMatcher,
    SeasonEpisodePattern,
    SeasonEpisodeUnion,
)


@pytest.fixture
def strict_matcher() -> SeasonEpisodeMatcher:
    return SeasonEpisodeMatcher(DEFAULT_SANITY, strict=True)


@pytest.fixture
def lenient_matcher() -> SeasonEpisodeMatcher:
    return SeasonEpisodeMatcher(DEFAULT_SANITY, strict=False)


class TestStrictPatterns:
    """Test the explicit episode identifier patterns."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Breaking.Bad.S01E01.720p", [SxE(1, 1)]),
            ("Dexter.1x02.avi", [SxE(1, 2)]),
            ("Show.S01E01E02", [SxE(1, 1), SxE(1, 2)]),
            ("Show.S01E01-E03", [SxE(1, 1), SxE(1, 2), SxE(1, 3)]),
            ("Show Season 1 Episode 2", [SxE(1, 2)]),
            ("Show.1.02.avi", [SxE(1, 2)]),
        ],
    )
    def test_explicit_identifiers(self, strict_matcher, name, expected):
        assert strict_matcher.match(name) == expected

    def test_season_pack(self, strict_matcher):
        """A bare ``S01`` token names a whole season."""
        result = strict_matcher.match("Dexter.S01")

        assert result == [SxE(1, UNDEFINED)]
        assert str(result[0]) == "S01"

    def test_no_identifier(self, strict_matcher):
        assert strict_matcher.match("The.Matrix.1999") is None

    def test_implausible_episode_rejected(self, strict_matcher):
        """Episode 75 of season 1 fails the default sanity limits."""
        assert strict_matcher.match("Show.1x75") is None

    def test_strict_ignores_lenient_markers(self, strict_matcher):
        assert strict_matcher.match("Show.ep05") is None


class TestLenientPatterns:
    """Test the additional non-strict patterns."""

    def test_episode_marker(self, lenient_matcher):
        assert lenient_matcher.match("Show.ep05") == [SxE(UNDEFINED, 5)]

    def test_101_token(self, lenient_matcher):
        """``101`` reads as 1x01 and as absolute episode 101."""
        assert lenient_matcher.match("Show 101") == [SxE(1, 1), SxE(UNDEFINED, 101)]

    def test_strict_patterns_still_win(self, lenient_matcher):
        assert lenient_matcher.match("Breaking.Bad.S01E01.720p") == [SxE(1, 1)]


class TestMatchPath:
    """Test parsing of file paths."""

    def test_season_folder_completes_episode(self, lenient_matcher):
        """A ``Season N`` folder supplies the missing season."""
        result = lenient_matcher.match_path("/tv/Dexter/Season 2/Dexter - 05.mkv")
        assert result == [SxE(2, 5)]

    def test_file_name_first(self, strict_matcher):
        assert strict_matcher.match_path("/tv/Show.S02/Show.S01E03.mkv") == [SxE(1, 3)]

    def test_folder_fallback(self, strict_matcher):
        assert strict_matcher.match_path("/tv/Dexter.S03/episode.mkv") == [SxE(3, UNDEFINED)]

    def test_nothing_found(self, strict_matcher):
        assert strict_matcher.match_path("/movies/The Matrix/The.Matrix.1999.mkv") is None


class TestHeadAndFind:
    """Test locating the identifier inside a name."""

    def test_head(self, strict_matcher):
        """Format tokens are stripped before the head is taken."""
        assert strict_matcher.head("Breaking.Bad.S01E01.720p.HDTV.x264") == "Breaking.Bad."

    def test_head_at_start(self, strict_matcher):
        assert strict_matcher.head("S01E01.mkv") is None

    def test_find(self, strict_matcher):
        assert strict_matcher.find("Dexter.S01E02") == 7
        assert strict_matcher.find("Dexter") == -1

    def test_union_find_returns_earliest(self):
        """A union reports the earliest position over all its patterns."""
        late = SeasonEpisodePattern(None, r"ep\d+", lambda m: [SxE(UNDEFINED, 1)])
        early = SeasonEpisodePattern(None, r"\d{3}", lambda m: [SxE(1, 1)])
        union = SeasonEpisodeUnion(late, early)

        assert union.find("Show 101 ep05", 0) == 5
        assert union.match("Show 101 ep05") == [SxE(UNDEFINED, 1), SxE(1, 1)]


class TestSanityFilter:
    """Test plausibility limits."""

    @pytest.mark.parametrize(
        ("sxe", "accepted"),
        [
            (SxE(1, 2), True),
            (SxE(2010, 1), True),
            (SxE(60, 1), False),
            (SxE(1, 60), False),
            (SxE(UNDEFINED, 999), True),
            (SxE(UNDEFINED, 1500), False),
        ],
    )
    def test_accept(self, sxe, accepted):
        assert DEFAULT_SANITY.accept(sxe) is accepted

    def test_accept_in_sequence(self):
        """A value smaller than an earlier one of the same shape is dropped."""
        assert not DEFAULT_SANITY.accept_in_sequence(SxE(1, 1), [SxE(1, 5)])
        assert DEFAULT_SANITY.accept_in_sequence(SxE(1, 6), [SxE(1, 5)])
        assert DEFAULT_SANITY.accept_in_sequence(SxE(1, 1), [SxE(UNDEFINED, 5)])


class TestSxE:
    def test_str(self):
        assert str(SxE(1, 2)) == "1x02"
        assert str(SxE(UNDEFINED, 7)) == "07"

    def test_with_season(self):
        assert SxE(UNDEFINED, 5).with_season(2) == SxE(2, 5)
