"""Tests for common.config module."""

from pathlib import Path

import pytest

from common.config import (
    AppConfig,
    ClusteringConfig,
    ConfigSingleton,
    SynthesisConfig,
    find_config_path,
    load_config,
)


def _write_config(tmp_path: Path, name: str, body: str) -> None:
    (tmp_path / f"{name}.yaml").write_text(body)


class TestFindConfigPath:
    def test_env_var_selects_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_config(tmp_path, "staging", "{}")
        monkeypatch.setenv("STORY_ENGINE_CONFIG", "staging")
        path = find_config_path(None, tmp_path, env_var="STORY_ENGINE_CONFIG")
        assert path == tmp_path / "staging.yaml"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            find_config_path("nope", tmp_path)


class TestLoadConfig:
    def test_reads_sections(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        _write_config(
            tmp_path,
            "prod",
            "database_url: sqlite:///tmp.db\n"
            "clustering:\n  window_hours: 24\n  pool_size: 10\n"
            "synthesis:\n  max_tokens: 100\n",
        )
        config = load_config("prod", config_dir=tmp_path)
        assert config.database_url == "sqlite:///tmp.db"
        assert config.clustering == ClusteringConfig(window_hours=24, pool_size=10)
        assert config.synthesis.max_tokens == 100
        assert config.synthesis.model == "gpt-4o-mini"

    def test_database_url_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_config(tmp_path, "prod", "database_url: sqlite:///tmp.db\n")
        monkeypatch.setenv("DATABASE_URL", "postgresql://db/stories")
        assert load_config("prod", config_dir=tmp_path).database_url == "postgresql://db/stories"

    def test_empty_file_uses_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        _write_config(tmp_path, "prod", "")
        config = load_config("prod", config_dir=tmp_path)
        assert config.clustering.window_hours == 48
        assert config.clustering.pool_size == 200

    def test_repo_test_config_is_valid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = load_config("test")
        assert config.database_url == "sqlite://"


class TestValidation:
    def test_rejects_non_positive_window(self) -> None:
        with pytest.raises(ValueError):
            ClusteringConfig(window_hours=0)

    def test_rejects_zero_workers(self) -> None:
        with pytest.raises(ValueError):
            SynthesisConfig(max_workers=0)


class TestConfigSingleton:
    def test_lazy_load_set_and_reset(self) -> None:
        calls = []

        def loader() -> AppConfig:
            calls.append(1)
            return AppConfig()

        manager = ConfigSingleton(loader)
        first = manager.get()
        assert manager.get() is first
        assert len(calls) == 1

        custom = AppConfig(database_url="sqlite://")
        manager.set(custom)
        assert manager.get() is custom

        manager.reset()
        manager.get()
        assert len(calls) == 2

    def test_without_loader_raises(self) -> None:
        with pytest.raises(RuntimeError):
            ConfigSingleton().get()
