"""Shared configuration utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, TypeVar

import yaml
from dotenv import load_dotenv

T = TypeVar("T")

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"
CONFIG_ENV_VAR = "STORY_ENGINE_CONFIG"
DEFAULT_DATABASE_URL = "sqlite:///data/stories.sqlite"


def find_config_path(
    config_name: str | None,
    config_dir: Path,
    default_name: str = "prod",
    env_var: str | None = None,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


@dataclass
class ClusteringConfig:
    """Candidate window and comparison pool for a clustering run."""

    window_hours: int = 48
    pool_size: int = 200

    def __post_init__(self) -> None:
        if self.window_hours <= 0:
            raise ValueError(f"window_hours must be positive, got {self.window_hours}")
        if self.pool_size <= 0:
            raise ValueError(f"pool_size must be positive, got {self.pool_size}")


@dataclass
class SynthesisConfig:
    """External analysis settings for story synthesis."""

    model: str = "gpt-4o-mini"
    max_tokens: int = 300
    max_input_chars: int = 4000
    timeout_seconds: float = 20.0
    temperature: float = 0.3
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.max_input_chars <= 0:
            raise ValueError(f"max_input_chars must be positive, got {self.max_input_chars}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")


@dataclass
class AppConfig:
    database_url: str = DEFAULT_DATABASE_URL
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> AppConfig:
    """Load an AppConfig from configs/<name>.yaml.

    DATABASE_URL in the environment (or .env) overrides the file's database_url.
    """
    load_dotenv()
    path = find_config_path(config_name, config_dir, env_var=CONFIG_ENV_VAR)
    data = load_yaml(path)

    return AppConfig(
        database_url=os.environ.get("DATABASE_URL") or data.get("database_url", DEFAULT_DATABASE_URL),
        clustering=ClusteringConfig(**(data.get("clustering") or {})),
        synthesis=SynthesisConfig(**(data.get("synthesis") or {})),
    )


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[AppConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
