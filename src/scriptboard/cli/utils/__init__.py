"""CLI utilities."""

from __future__ import annotations

from scriptboard.cli.utils.cli_handler import (
    CLIHandler,
    async_cli_command,
    cli_command,
    load_config_with_validation,
)

__all__ = [
    "CLIHandler",
    "async_cli_command",
    "cli_command",
    "load_config_with_validation",
]
