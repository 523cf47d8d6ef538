"""Storyboard block commands: move, color, summarize, copy, delete, add, edit."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from scriptboard.board import (
    BoardDocument,
    delete_block,
    duplicate_block,
    edit_block,
    insert_new_scene,
    move_block,
    recolor_block,
    set_block_summary,
)
from scriptboard.board.document import BlockOperation
from scriptboard.cli.utils.cli_handler import CLIHandler
from scriptboard.parser.models import BlockColor
from scriptboard.parser.segmenter import Block

console = Console()

scene_app = typer.Typer(
    name="scene",
    help="Rearrange and edit scene and section blocks",
    pretty_exceptions_enable=False,
    add_completion=False,
)

ScriptArgument = Annotated[Path, typer.Argument(help="Path to the script file")]
IndexArgument = Annotated[
    int, typer.Argument(help="Block index as shown by 'scriptboard board'")
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def _block_data(blocks: list[Block], index: int) -> dict[str, Any]:
    block = blocks[index]
    return {
        "index": index,
        "id": block.id,
        "kind": block.kind.value,
        "title": block.title,
        "blocks": len(blocks),
    }


def _run(
    script: Path,
    json_output: bool,
    operation: BlockOperation,
    *args: Any,
    message: str,
    result_index: int | None = None,
) -> None:
    handler = CLIHandler(console)
    try:
        blocks = BoardDocument(script).apply(operation, *args)
        data = None
        if result_index is not None:
            data = _block_data(blocks, result_index)
        handler.handle_success(message, data, json_output)
    except Exception as e:
        handler.handle_error(e, json_output)


@scene_app.command(name="move")
def move_scene(
    script: ScriptArgument,
    source: Annotated[int, typer.Argument(help="Index of the block to move")],
    target: Annotated[
        int, typer.Argument(help="Slot to drop it into, counted before the move")
    ],
    json_output: JsonOption = False,
) -> None:
    """Move a block to another position.

    Example:
        scriptboard scene move script.md 3 1
    """
    final = target - 1 if target > source else target
    _run(
        script,
        json_output,
        move_block,
        source,
        target,
        message=f"Moved block {source} to position {final}",
        result_index=final,
    )


@scene_app.command(name="color")
def color_scene(
    script: ScriptArgument,
    index: IndexArgument,
    color: Annotated[BlockColor, typer.Argument(help="New color; 'none' clears it")],
    json_output: JsonOption = False,
) -> None:
    """Set or clear a block's color."""
    _run(
        script,
        json_output,
        recolor_block,
        index,
        color,
        message=f"Colored block {index} {color.value}",
        result_index=index,
    )


@scene_app.command(name="summary")
def summarize_scene(
    script: ScriptArgument,
    index: IndexArgument,
    text: Annotated[str, typer.Argument(help="Summary text; empty removes it")] = "",
    json_output: JsonOption = False,
) -> None:
    """Set or remove a block's one-line summary."""
    action = "Updated" if text.strip() else "Removed"
    _run(
        script,
        json_output,
        set_block_summary,
        index,
        text,
        message=f"{action} summary of block {index}",
        result_index=index,
    )


@scene_app.command(name="duplicate")
def duplicate_scene(
    script: ScriptArgument,
    index: IndexArgument,
    json_output: JsonOption = False,
) -> None:
    """Insert a copy of a block right after it."""
    _run(
        script,
        json_output,
        duplicate_block,
        index,
        message=f"Duplicated block {index}",
        result_index=index + 1,
    )


@scene_app.command(name="delete")
def delete_scene(
    script: ScriptArgument,
    index: IndexArgument,
    confirm: Annotated[
        bool,
        typer.Option("--confirm", help="Confirm deletion (required)"),
    ] = False,
    json_output: JsonOption = False,
) -> None:
    """Delete a block and everything in it."""
    handler = CLIHandler(console)
    if not confirm:
        if json_output:
            handler.handle_error(
                ValueError("Deletion requires confirmation (--confirm)"), json_output
            )
        handler.handle_success(
            "Warning: Deletion requires confirmation. Re-run with --confirm to proceed"
        )
        return
    _run(
        script,
        json_output,
        delete_block,
        index,
        message=f"Deleted block {index}",
    )


@scene_app.command(name="add")
def add_scene(
    script: ScriptArgument,
    after: Annotated[
        int, typer.Argument(help="Insert after this block; 0 means after the preamble")
    ] = 0,
    json_output: JsonOption = False,
) -> None:
    """Insert an empty scene."""
    _run(
        script,
        json_output,
        insert_new_scene,
        after,
        message=f"Added a scene after block {after}",
        result_index=after + 1,
    )


@scene_app.command(name="edit")
def edit_scene(
    script: ScriptArgument,
    index: IndexArgument,
    heading: Annotated[
        str, typer.Option("--heading", help="Scene or section heading line")
    ],
    summary: Annotated[
        str, typer.Option("--summary", "-s", help="One-line summary")
    ] = "",
    body: Annotated[str, typer.Option("--body", "-b", help="Body text")] = "",
    body_file: Annotated[
        Path | None,
        typer.Option("--body-file", help="Read the body text from a file"),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Rewrite a block from a heading, summary and body."""
    handler = CLIHandler(console)
    if body_file is not None:
        try:
            body = body_file.read_text(encoding="utf-8")
        except OSError as e:
            handler.handle_error(e, json_output)
    _run(
        script,
        json_output,
        edit_block,
        index,
        heading,
        summary,
        body,
        message=f"Rewrote block {index}",
        result_index=index,
    )
