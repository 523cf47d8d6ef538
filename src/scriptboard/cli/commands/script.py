"""Commands that create or rewrite whole scripts."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from scriptboard.board import ScriptDocument
from scriptboard.cli.utils.cli_handler import CLIHandler
from scriptboard.config import get_logger
from scriptboard.editing import new_script_template, remove_empty_notes, renumber_scenes
from scriptboard.exceptions import ValidationError

logger = get_logger(__name__)
console = Console()


def new_command(
    path: Annotated[Path, typer.Argument(help="Where to create the script")],
    title: Annotated[
        str | None,
        typer.Option("--title", "-t", help="Script title (defaults to the file name)"),
    ] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite an existing file")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Create a new script from the starter template."""
    handler = CLIHandler(console)
    try:
        if path.exists() and not force:
            raise ValidationError(
                message=f"File already exists: {path}",
                hint="Use --force to overwrite it",
                details={"path": str(path)},
            )
        path.parent.mkdir(parents=True, exist_ok=True)
        ScriptDocument(path).write(new_script_template(title or path.stem))
        logger.info("Created script", path=str(path))
        handler.handle_success(f"Created {path}", {"path": str(path)}, json_output)
    except Exception as e:
        handler.handle_error(e, json_output)


def renumber_command(
    path: Annotated[Path, typer.Argument(help="Path to the script file")],
    clean_notes: Annotated[
        bool, typer.Option("--clean-notes", help="Also remove empty note tags")
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the result instead of writing it"),
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Number every scene heading in document order."""
    handler = CLIHandler(console)
    try:
        document = ScriptDocument(path)
        text = renumber_scenes(document.read())
        if clean_notes:
            text = remove_empty_notes(text)
        if dry_run:
            print(text, end="")
            return
        document.write(text)
        handler.handle_success(f"Renumbered {path}", {"path": str(path)}, json_output)
    except Exception as e:
        handler.handle_error(e, json_output)
