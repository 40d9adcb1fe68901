"""Tests for fansub release markers."""

from __future__ import annotations

import logging

from medialens.core.parser.anime_release import AnimeReleaseInfo, parse_anime_release


class TestParseAnimeRelease:
    """Test marker extraction with anitopy."""

    def test_fansub_release(self):
        info = parse_anime_release("[SubsPlease] Sousou no Frieren - 01 (1080p) [ABCD1234].mkv")

        assert info.release_group == "SubsPlease"
        assert info.checksum == "ABCD1234"
        assert info.episode == 1
        assert info.has_release_markers

    def test_list_values_use_first_element(self, mocker):
        mocker.patch(
            "medialens.core.parser.anime_release.anitopy.parse",
            return_value={"anime_title": "Frieren", "episode_number": ["01", "02"]},
        )

        info = parse_anime_release("Frieren - 01-02.mkv")

        assert info == AnimeReleaseInfo(title="Frieren", episode=1)
        assert not info.has_release_markers

    def test_non_numeric_episode(self, mocker):
        mocker.patch(
            "medialens.core.parser.anime_release.anitopy.parse",
            return_value={"episode_number": "OVA"},
        )
        assert parse_anime_release("Show OVA.mkv").episode is None

    def test_parser_failure_degrades_to_empty(self, mocker, caplog):
        """A crashing parser is logged and yields no markers."""
        mocker.patch(
            "medialens.core.parser.anime_release.anitopy.parse",
            side_effect=IndexError("boom"),
        )

        with caplog.at_level(logging.WARNING):
            info = parse_anime_release("[Group] Title - 01.mkv")

        assert info == AnimeReleaseInfo()
        assert "anitopy failed" in caplog.text

    def test_no_result(self, mocker):
        mocker.patch("medialens.core.parser.anime_release.anitopy.parse", return_value=None)
        assert parse_anime_release("x.mkv") == AnimeReleaseInfo()
