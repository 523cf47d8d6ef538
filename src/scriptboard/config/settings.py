"""ScriptBoard configuration settings."""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from scriptboard.exceptions import ConfigurationError, check_config_keys


class ScriptBoardSettings(BaseSettings):
    """ScriptBoard configuration settings.

    Settings are loaded with the following precedence (highest to lowest):
    1. CLI arguments (when provided via command flags)
    2. Config file values (YAML, TOML, or JSON); later files override earlier
    3. Environment variables (prefixed with SCRIPTBOARD_)
       Example: export SCRIPTBOARD_LLM_API_KEY=...
    4. .env file (in current directory or specified path)
    5. Default values (defined in field declarations below)
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Debug settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        pattern="^(?i)(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
    log_format: str = Field(
        default="console",
        description="Log output format (console, json, structured)",
        pattern="^(?i)(console|json|structured)$",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    # Storyboard settings
    summary_length: int = Field(
        default=50,
        description="Characters of scene text shown on a card without a summary",
        ge=1,
    )

    # LLM settings
    llm_provider: str = Field(
        default="gemini",
        description="AI provider: gemini or openai_compatible",
        pattern="^(gemini|openai_compatible)$",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="API key for the configured AI provider",
    )
    llm_endpoint: str | None = Field(
        default=None,
        description="Base URL override for the AI provider",
    )
    llm_model: str | None = Field(
        default=None,
        description=(
            "Model to use for completions. "
            "Use 'default', 'auto', 'none', or empty string for the provider default."
        ),
    )
    llm_temperature: float = Field(
        default=0.7,
        description="Default temperature for completions",
        ge=0.0,
        le=2.0,
    )
    llm_timeout: float = Field(
        default=60.0,
        description="HTTP timeout in seconds for AI requests",
        gt=0.0,
    )

    # AI context settings
    ai_min_content_length: int = Field(
        default=20,
        description="Minimum scene body length before a summary is requested",
        ge=0,
    )
    ai_context_blocks: int = Field(
        default=2,
        description="Neighbouring blocks on each side sent as context",
        ge=0,
    )
    ai_context_char_limit: int = Field(
        default=4000,
        description="Maximum characters of context on each side of a scene",
        gt=0,
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path | None:
        """Expand environment variables and resolve path."""
        if v is None:
            return None
        if isinstance(v, str):
            expanded = os.path.expandvars(v)
            return Path(expanded).expanduser().resolve()
        if isinstance(v, Path):
            return v.resolve()
        raise ValueError(
            f"Path fields must be string or Path. Got {type(v).__name__}: {v!r}"
        )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase for case-insensitive handling."""
        if isinstance(v, str):
            return v.upper()
        raise ValueError(f"log_level must be a string, got {type(v).__name__}")

    @field_validator("log_format", "llm_provider", mode="before")
    @classmethod
    def normalize_lowercase(cls, v: Any) -> str:
        """Normalize enumerated string settings to lowercase."""
        if isinstance(v, str):
            return v.strip().lower()
        raise ValueError(f"Expected a string, got {type(v).__name__}")

    @field_validator("llm_model", mode="before")
    @classmethod
    def normalize_llm_model(cls, v: Any) -> Any:
        """Treat placeholders like "default" or "auto" as unset."""
        if isinstance(v, str) and v.strip().lower() in {"", "default", "auto", "none"}:
            return None
        return v

    @field_validator("llm_api_key", mode="before")
    @classmethod
    def normalize_api_key(cls, v: Any) -> Any:
        """Strip whitespace from the key and treat blank keys as unset."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @classmethod
    def from_env(cls) -> ScriptBoardSettings:
        """Create settings from environment variables."""
        return cls()

    @classmethod
    def from_file(cls, config_path: Path | str) -> ScriptBoardSettings:
        """Load settings from a configuration file.

        Args:
            config_path: Path to configuration file (YAML, TOML, or JSON).

        Returns:
            Settings loaded from the file.

        Raises:
            ConfigurationError: If file format is not supported.
            FileNotFoundError: If config file doesn't exist.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        return cls(**cls._read_file(config_path))

    @staticmethod
    def _read_file(config_path: Path) -> dict[str, Any]:
        suffix = config_path.suffix.lower()

        if suffix in {".yml", ".yaml"}:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        elif suffix == ".toml":
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        elif suffix == ".json":
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ConfigurationError(
                message=f"Unsupported configuration file format: {suffix}",
                hint="Use one of the supported formats: .yml, .yaml, .toml, or .json",
                details={
                    "file": str(config_path),
                    "detected_format": suffix,
                    "supported_formats": [".yml", ".yaml", ".toml", ".json"],
                },
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                message=f"Configuration file must contain a mapping: {config_path}",
                hint="Write settings as top-level key/value pairs",
                details={"file": str(config_path), "type": type(data).__name__},
            )

        # Check for common configuration mistakes
        check_config_keys(data)
        return data

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: list[Path | str] | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> ScriptBoardSettings:
        """Load settings with proper precedence from multiple sources.

        Precedence (highest to lowest):
        1. CLI arguments
        2. Config files (last file wins)
        3. Environment variables and .env file
        4. Default values

        Only keys actually present in a config file override the environment,
        so a file that sets just ``log_level`` leaves env-provided keys alone.

        Args:
            config_files: List of config files to load (later files override earlier).
            cli_args: Dictionary of CLI arguments.

        Returns:
            Merged settings from all sources.
        """
        data: dict[str, Any] = {}

        for config_file in config_files or []:
            path = Path(config_file)
            if not path.exists():
                from scriptboard.config.logging import get_logger as _get_logger

                _get_logger("scriptboard.config.settings").warning(
                    "Configuration file not found, using defaults",
                    config_file=str(config_file),
                )
                continue
            data.update(cls._read_file(path))

        if cli_args:
            data.update({k: v for k, v in cli_args.items() if v is not None})

        return cls(**data)


# Global settings instance
_settings: ScriptBoardSettings | None = None


def _get_config_paths() -> list[Path]:
    """Get existing config files in priority order (later files override)."""
    potential_paths = [
        Path.home() / ".config" / "scriptboard" / "config.yaml",
        Path.home() / ".config" / "scriptboard" / "config.toml",
        Path.home() / ".config" / "scriptboard" / "config.json",
        Path.cwd() / "scriptboard.yaml",
        Path.cwd() / "scriptboard.toml",
        Path.cwd() / "scriptboard.json",
    ]

    existing_paths: list[Path] = []
    for path in potential_paths:
        try:
            if path.is_file():
                existing_paths.append(path)
        except OSError:
            continue
    return existing_paths


def get_settings() -> ScriptBoardSettings:
    """Get the global settings instance.

    Returns:
        Global ScriptBoardSettings instance.
    """
    global _settings
    if _settings is None:
        config_paths = _get_config_paths()
        if config_paths:
            _settings = ScriptBoardSettings.from_multiple_sources(
                config_files=list(config_paths)
            )
        else:
            _settings = ScriptBoardSettings.from_env()
    return _settings


def set_settings(settings: ScriptBoardSettings) -> None:
    """Set the global settings instance.

    Args:
        settings: Settings instance to use globally.
    """
    global _settings
    _settings = settings


def clear_settings_cache() -> None:
    """Clear the global settings cache.

    This forces get_settings() to re-read from environment variables
    and configuration files on the next call.
    """
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ScriptBoardSettings:
    """Get settings for CLI commands with consistent precedence.

    Args:
        config_file: Optional specific config file to load. If not provided,
                    uses the global settings.
        cli_overrides: Dictionary of CLI argument overrides.
                      Only non-None values are applied.

    Returns:
        ScriptBoardSettings instance with all sources merged.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist.
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")
        return ScriptBoardSettings.from_multiple_sources(
            config_files=[config_file],
            cli_args=cli_overrides,
        )

    settings = get_settings()
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    if overrides:
        data = settings.model_dump()
        data.update(overrides)
        settings = ScriptBoardSettings(**data)
    return settings
