"""Tests for settings models and the settings loader."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from pydantic import ValidationError

from medialens.config.loader import SettingsLoader, load_settings
from medialens.config.models import GroupingSettings, LoggingSettings, MatchingSettings, MediaSettings
from medialens.config.models.settings import Settings
from medialens.shared.errors import ApplicationError, ErrorCode


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every test away from real configuration files."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("medialens.config.loader.DEFAULT_CONFIG_PATHS", (tmp_path / "medialens.toml",))
    return tmp_path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    config_file = tmp_path / "custom.toml"
    config_file.write_text(
        """
[logging]
level = "debug"

[matching]
min_query_length = 4

[grouping]
anime_max_duration_minutes = 45

[media]
audio_extensions = ["MP3", ".flac"]
""",
        encoding="utf-8",
    )
    return config_file


class TestSettingsModels:
    """Test model defaults and validation."""

    def test_defaults(self):
        settings = Settings()

        assert settings.logging.level == "INFO"
        assert settings.matching.min_query_length == 3
        assert settings.grouping.max_input_files == 10000
        assert settings.catalog.movie_path == Path("data") / "moviedb.txt.xz"
        assert ".mkv" in settings.media.video_extensions

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_strict_threshold_must_not_be_looser(self):
        with pytest.raises(ValidationError):
            MatchingSettings(probable_match_threshold=0.5, probable_match_threshold_lenient=0.6)

    def test_without_spacing_threshold(self):
        settings = MatchingSettings()

        assert settings.without_spacing_threshold(movie=True, strict=True) == 0.9
        assert settings.without_spacing_threshold(movie=False, strict=False) == 0.5

    def test_grouping_limits(self):
        with pytest.raises(ValidationError):
            GroupingSettings(max_input_files=0)

    def test_extensions_are_normalized(self):
        assert MediaSettings(video_extensions=["MKV", ".Avi"]).video_extensions == [".mkv", ".avi"]

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MEDIALENS_MATCHING__MIN_QUERY_LENGTH", "5")
        monkeypatch.setenv("MEDIALENS_LOGGING__LEVEL", "warning")

        settings = Settings()

        assert settings.matching.min_query_length == 5
        assert settings.logging.level == "WARNING"


class TestTomlFiles:
    """Test TOML loading and saving."""

    def test_from_toml_file(self, config_file):
        settings = Settings.from_toml_file(config_file)

        assert settings.logging.level == "DEBUG"
        assert settings.matching.min_query_length == 4
        assert settings.grouping.anime_max_duration_minutes == 45
        assert settings.media.audio_extensions == [".mp3", ".flac"]

    def test_from_missing_toml_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Settings.from_toml_file(tmp_path / "missing.toml")

    def test_save_and_reload(self, tmp_path):
        settings = Settings(matching=MatchingSettings(min_query_length=7))
        target = tmp_path / "out" / "settings.toml"

        settings.to_toml_file(target)

        assert Settings.from_toml_file(target) == settings


class TestLoadSettings:
    """Test configuration discovery."""

    def test_explicit_path(self, config_file):
        assert load_settings(config_file).matching.min_query_length == 4

    def test_missing_explicit_path_uses_defaults(self, tmp_path, caplog):
        settings = load_settings(tmp_path / "nope.toml")

        assert settings == Settings()
        assert "Configuration file not found" in caplog.text

    def test_default_location(self, isolated_cwd, config_file):
        (isolated_cwd / "medialens.toml").write_text(config_file.read_text(encoding="utf-8"), encoding="utf-8")
        assert load_settings().grouping.anime_max_duration_minutes == 45

    def test_no_files(self):
        assert load_settings() == Settings()

    def test_invalid_toml(self, tmp_path):
        broken = tmp_path / "broken.toml"
        broken.write_text("[matching\nmin_query_length = ", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(broken)

        assert exc_info.value.code is ErrorCode.CONFIG_INVALID
        assert exc_info.value.context.additional_data == {"config_key": str(broken)}

    def test_invalid_values(self, tmp_path):
        invalid = tmp_path / "invalid.toml"
        invalid.write_text('[logging]\nlevel = "LOUD"\n', encoding="utf-8")

        with pytest.raises(ApplicationError):
            load_settings(invalid)

    def test_dotenv_file_is_loaded(self, isolated_cwd, mocker):
        load_dotenv = mocker.patch("medialens.config.loader.load_dotenv")
        (isolated_cwd / ".env").write_text("MEDIALENS_MATCHING__MIN_QUERY_LENGTH=6\n", encoding="utf-8")

        load_settings()

        load_dotenv.assert_called_once_with(Path(".env"), override=False)


class TestSettingsLoader:
    """Test the cached singleton."""

    def test_get_config_is_cached(self):
        loader = SettingsLoader()
        assert loader.get_config() is loader.get_config()

    def test_reload_replaces_instance(self):
        loader = SettingsLoader()
        first = loader.get_config()

        assert loader.reload_config() is not first

    def test_concurrent_get_config_loads_once(self, mocker):
        load = mocker.patch("medialens.config.loader.load_settings", side_effect=lambda: Settings())
        loader = SettingsLoader()
        barrier = threading.Barrier(8)

        def get():
            barrier.wait()
            return loader.get_config()

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: get(), range(8)))

        assert load.call_count == 1
        assert all(r is results[0] for r in results)
