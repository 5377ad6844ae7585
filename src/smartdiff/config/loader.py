"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (SMARTDIFF__SECTION__KEY)
3. Explicit config file (--config) or repo config (.smartdiff/config.yaml)
4. Global config (~/.config/smartdiff/config.yaml)
5. GITHUB_TOKEN from the environment, for github.token only
6. Built-in defaults (lowest priority)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from smartdiff.config.models import (
    AnalysisConfig,
    GitHubConfig,
    LoggingConfig,
    SmartDiffConfig,
)
from smartdiff.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/smartdiff/config.yaml").expanduser()
REPO_CONFIG_NAME = Path(".smartdiff") / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class SmartDiffSettings(BaseSettings):
        """Root config. Env vars: SMARTDIFF__LOGGING__LEVEL, SMARTDIFF__GITHUB__TOKEN, etc."""

        model_config = SettingsConfigDict(
            env_prefix="SMARTDIFF__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        github: GitHubConfig = GitHubConfig()
        analysis: AnalysisConfig = AnalysisConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return SmartDiffSettings


def load_config(
    repo_root: Path | None = None,
    *,
    config_path: Path | None = None,
    **kwargs: Any,
) -> SmartDiffConfig:
    """Load config: defaults < GITHUB_TOKEN < global < repo/explicit < env vars < kwargs.

    Args:
        repo_root: Directory holding .smartdiff/config.yaml.
                   Defaults to current working directory.
        config_path: Explicit config file. Must exist; replaces the repo file.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On a missing explicit file, invalid YAML or invalid values.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError.file_not_found(str(config_path))
        local_config = _load_yaml(config_path)
    else:
        local_config = _load_yaml((repo_root or Path.cwd()) / REPO_CONFIG_NAME)

    yaml_config: dict[str, Any] = {}
    if token := os.environ.get("GITHUB_TOKEN"):
        yaml_config["github"] = {"token": token}

    global_config = _load_yaml(GLOBAL_CONFIG_PATH)
    if global_config:
        yaml_config = _deep_merge(yaml_config, global_config)
    if local_config:
        yaml_config = _deep_merge(yaml_config, local_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return SmartDiffConfig.model_validate(settings.model_dump())
