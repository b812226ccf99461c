import pytest
from pydantic import ValidationError

from sourcemap_worker.config.settings import Settings


class TestSettingsDefaults:
    def test_default_threads(self) -> None:
        s = Settings()
        assert s.threads == 3

    def test_gzip_enabled_by_default(self) -> None:
        s = Settings()
        assert s.gzip is True

    def test_default_asset_layout(self) -> None:
        s = Settings()
        assert (s.public_dir, s.assets_dir) == ("public", "assets")

    def test_default_extension_and_marker(self) -> None:
        s = Settings()
        assert s.script_extension == ".js"
        assert s.original_marker == ".orig"

    def test_default_minifier_engine(self) -> None:
        s = Settings()
        assert s.minifier_engine == "rjsmin"


class TestSettingsFromEnv:
    def test_loads_threads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCEMAPS_THREADS", "8")
        s = Settings()
        assert s.threads == 8

    def test_loads_gzip_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCEMAPS_GZIP", "false")
        s = Settings()
        assert s.gzip is False

    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCEMAPS_LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_init_kwargs_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCEMAPS_THREADS", "8")
        s = Settings(threads=2)
        assert s.threads == 2


class TestSettingsValidation:
    def test_non_integer_threads_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOURCEMAPS_THREADS", "many")
        with pytest.raises(ValidationError):
            Settings()

    def test_zero_threads_raises(self) -> None:
        with pytest.raises(ValidationError):
            Settings(threads=0)
