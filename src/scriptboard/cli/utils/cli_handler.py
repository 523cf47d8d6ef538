"""Unified CLI handler for standardized error handling and output."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from scriptboard.cli.formatters.json_formatter import JsonFormatter
from scriptboard.config import ScriptBoardSettings, get_logger, get_settings_for_cli
from scriptboard.exceptions import ConfigurationError, ScriptBoardError, ValidationError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Report an error and exit.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use

        Raises:
            typer.Exit: Always.
        """
        logger.error(
            "Command failed", error=str(error), error_type=type(error).__name__
        )

        if json_output:
            print(self.json_formatter.format_error_response(error, exit_code))
        elif isinstance(error, ScriptBoardError):
            label = "Error"
            if isinstance(error, ValidationError):
                label = "Validation Error"
            self.console.print(f"[red]{label}: {escape(error.message)}[/red]")
            if error.hint:
                self.console.print(f"[yellow]Hint: {escape(error.hint)}[/yellow]")
        else:
            self.console.print(f"[red]Error: {escape(str(error))}[/red]")

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Handle success responses consistently.

        Args:
            message: Success message
            data: Optional data to include
            json_output: Whether to output JSON
        """
        if json_output:
            print(self.json_formatter.format_success(message, data))
        else:
            self.console.print(f"[green]{escape(message)}[/green]")


def load_config_with_validation(config: Path | None) -> ScriptBoardSettings:
    """Load settings for a command, honoring an explicit ``--config`` file.

    Raises:
        ConfigurationError: If the config file does not exist.
    """
    try:
        return get_settings_for_cli(config_file=config)
    except FileNotFoundError as e:
        raise ConfigurationError(
            message=str(e),
            hint="Pass an existing YAML, TOML or JSON file to --config",
            details={"config": str(config)},
        ) from e


def cli_command(
    async_func: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator for CLI commands with standardized error handling.

    Args:
        async_func: Whether the decorated function is async

    Returns:
        Decorator function
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            handler = CLIHandler()
            try:
                if async_func or inspect.iscoroutinefunction(func):
                    return asyncio.run(func(*args, **kwargs))
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except Exception as e:
                handler.handle_error(e, kwargs.get("json_output", False))

        return wrapper

    return decorator


def async_cli_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator specifically for async CLI commands."""
    return cli_command(async_func=True)(func)
