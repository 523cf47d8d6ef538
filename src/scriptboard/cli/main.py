"""Main CLI entry point."""

from __future__ import annotations

import os
from typing import Annotated

import typer
from rich.console import Console

from scriptboard import __version__
from scriptboard.cli.commands import (
    ai_app,
    board_command,
    characters_command,
    classify_command,
    export_command,
    new_command,
    outline_command,
    render_command,
    renumber_command,
    scene_app,
)
from scriptboard.cli.formatters.json_formatter import JsonFormatter
from scriptboard.config import (
    configure_logging,
    get_logger,
    get_settings,
    reset_settings,
)

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="scriptboard",
    help="Plain-text screenplays as a storyboard of scene cards",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="classify")(classify_command)
app.command(name="outline")(outline_command)
app.command(name="board")(board_command)
app.command(name="render")(render_command)
app.command(name="export")(export_command)
app.command(name="characters")(characters_command)
app.command(name="new")(new_command)
app.command(name="renumber")(renumber_command)

app.add_typer(scene_app, name="scene")
app.add_typer(ai_app, name="ai")


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show ScriptBoard version."""
    version_info = {
        "name": "ScriptBoard",
        "version": __version__,
        "description": "Plain-text screenplays as a storyboard of scene cards",
    }

    if json_output:
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"ScriptBoard v{version_info['version']}")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug", help="Enable debug logging", envvar="SCRIPTBOARD_DEBUG"
        ),
    ] = False,
) -> None:
    """Configure global options."""
    if debug:
        os.environ["SCRIPTBOARD_LOG_LEVEL"] = "DEBUG"
        os.environ["SCRIPTBOARD_DEBUG"] = "true"
    elif verbose:
        os.environ["SCRIPTBOARD_LOG_LEVEL"] = "INFO"
    else:
        return

    # Force reconfiguration of logging
    reset_settings()
    configure_logging(get_settings())
    logger.debug("Logging reconfigured", debug=debug, verbose=verbose)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
