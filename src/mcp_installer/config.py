"""Bridge settings.

Values come from environment variables and can be overridden from the
command line.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "goose" / "config.yaml"
DEFAULT_NPM_REGISTRY = "https://registry.npmjs.org"

# Entry written by the repair operation so the host can relaunch us
DEFAULT_SELF_NAME = "mcp-installer"
DEFAULT_SELF_CMD = "uvx"
DEFAULT_SELF_ARGS = ["mcp-installer-bridge"]


class Settings(BaseModel):
    """Runtime configuration for the installer bridge."""

    config_path: Path = DEFAULT_CONFIG_PATH
    npm_registry_url: str = DEFAULT_NPM_REGISTRY
    probe_timeout: float = Field(default=10.0, gt=0)
    registry_timeout: float = Field(default=15.0, gt=0)
    self_name: str = Field(default=DEFAULT_SELF_NAME, min_length=1)
    self_cmd: str = Field(default=DEFAULT_SELF_CMD, min_length=1)
    self_args: List[str] = Field(default_factory=lambda: list(DEFAULT_SELF_ARGS))
    log_level: str = "INFO"

    @field_validator("config_path")
    @classmethod
    def _expand_config_path(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("npm_registry_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


def load_settings(**overrides: Any) -> Settings:
    """Build settings from MCP_INSTALLER_* environment variables.

    Keyword arguments whose value is not None take precedence over the
    environment.
    """
    values: dict[str, Any] = {}

    env_map = {
        "config_path": "MCP_INSTALLER_CONFIG_PATH",
        "npm_registry_url": "MCP_INSTALLER_NPM_REGISTRY",
        "probe_timeout": "MCP_INSTALLER_PROBE_TIMEOUT",
        "registry_timeout": "MCP_INSTALLER_REGISTRY_TIMEOUT",
        "self_name": "MCP_INSTALLER_SELF_NAME",
        "self_cmd": "MCP_INSTALLER_SELF_CMD",
        "log_level": "MCP_INSTALLER_LOG_LEVEL",
    }
    for field_name, env_var in env_map.items():
        value = os.getenv(env_var)
        if value:
            values[field_name] = value

    self_args = os.getenv("MCP_INSTALLER_SELF_ARGS")
    if self_args:
        values["self_args"] = self_args.split()

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)


# Singleton
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the singleton Settings, loading from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the singleton Settings (used by the CLI entry point)."""
    global _settings
    _settings = settings
