"""Application configuration management.

Handles loading and validating configuration from multiple sources:
    - TOML/JSON config file
    - Environment variables (CODEP_* prefix)
    - Default values

Key components:
    - AppConfig: Main configuration model
    - load_config(): Safe config loading with fallback
    - resolve_config_root(): Locate the editor's per-user config directory
"""

from __future__ import annotations

import json
import os
import sys
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import patch

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from codep.core.models import OutputMode
from codep.core.result import ConfigError, ConfigRootUnavailableError, Err, Ok, Result

CONFIG_ENV_VAR = "CODEP_CONFIG"
EDITOR_DIR_NAME = "Code"


class AppConfig(BaseSettings):
    """codep settings; every field can be overridden with a CODEP_* variable."""

    model_config = SettingsConfigDict(
        env_prefix="CODEP_",
        extra="ignore",
    )

    config_root: Path | None = Field(
        default=None, description="Editor config root (defaults to <config dir>/Code)."
    )
    mode: OutputMode = Field(default=OutputMode.PATH, description="Default output format.")
    max_age_days: int | None = Field(
        default=None, description="Drop candidates older than this many days."
    )
    limit: int | None = Field(default=None, description="Maximum number of candidates printed.")
    include_remote: bool = Field(
        default=True, description="Include non-local (vscode-remote, vscode-vfs, ...) URIs."
    )
    null_terminated: bool = Field(
        default=False, description="Terminate records with NUL instead of newline."
    )
    log_level: str = Field(default="WARNING", description="Log level for diagnostics on stderr.")

    @field_validator("max_age_days", "limit")
    @classmethod
    def non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError("must be >= 0")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
        PydanticBaseSettingsSource,
    ]:
        # Ensure environment variables override config file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)


@dataclass
class ConfigLoadResult:
    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


def _user_config_dir(env_vars: Mapping[str, str]) -> Path | None:
    if sys.platform.startswith("win"):
        appdata = env_vars.get("APPDATA")
        return Path(appdata) if appdata else None
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = env_vars.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


def default_config_root(env: Mapping[str, str] | None = None) -> Path | None:
    """Return the platform default editor config root, or None if it cannot be determined."""
    base = _user_config_dir(os.environ if env is None else env)
    return base / EDITOR_DIR_NAME if base is not None else None


def resolve_config_root(
    config: AppConfig,
    override: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Result[Path, ConfigRootUnavailableError]:
    """Pick the config root (flag > settings > platform default) and check it exists."""
    candidate = override or config.config_root or default_config_root(env)
    if candidate is None:
        return Err(ConfigRootUnavailableError("Cannot determine the editor config directory"))

    root = Path(candidate).expanduser()
    if not root.is_dir():
        return Err(
            ConfigRootUnavailableError(
                "Editor config root does not exist", context={"path": str(root)}
            )
        )
    return Ok(root)


def _resolve_config_path(config_path: Path | None, env_vars: Mapping[str, str]) -> Path:
    candidate = config_path or env_vars.get(CONFIG_ENV_VAR)
    if candidate is None:
        base = _user_config_dir(env_vars) or Path.home() / ".config"
        candidate = base / "codep" / "config.toml"
    return Path(candidate).expanduser()


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    suffix = path.suffix.lower()
    parser = json.loads if suffix == ".json" else tomllib.loads

    try:
        data = parser(raw)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Syntax error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping.")

    return data


def _detect_env_overrides(env_vars: Mapping[str, str]) -> set[str]:
    """Detect which fields are overridden by environment variables (CODEP_MODE, ...)."""
    prefix = AppConfig.model_config.get("env_prefix", "")
    return {
        field for field in AppConfig.model_fields if f"{prefix}{field}".upper() in env_vars
    }


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """
    Load configuration with Safe Mode fallback.
    If the file is invalid, returns default config + error message.
    """
    env_vars: Mapping[str, str] = os.environ if env is None else {**os.environ, **env}
    resolved_path = _resolve_config_path(config_path, env_vars)
    env_overrides = _detect_env_overrides(env_vars)

    error: str | None = None
    file_loaded = False
    file_data: dict[str, Any] = {}

    try:
        file_data = _read_config_file(resolved_path)
        file_loaded = resolved_path.exists()
    except ConfigError as exc:
        error = str(exc)

    context_manager = (
        patch.dict(os.environ, env_vars, clear=False) if env is not None else nullcontext()
    )

    try:
        with context_manager:
            config = AppConfig(**file_data)
    except ValidationError as exc:
        error = str(exc)
        config = AppConfig.model_construct()

    load_result = ConfigLoadResult(
        path=resolved_path,
        file_loaded=file_loaded,
        env_overrides=env_overrides,
        error=error,
    )

    return config, load_result
