"""Read-only commands: classification, outlines, boards and renderings."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scriptboard.board import (
    ScriptDocument,
    build_scene_outline,
    build_storyboard,
    export_summary_markdown,
)
from scriptboard.characters import extract_character_names, suggest_characters
from scriptboard.cli.formatters.base import OutputFormat
from scriptboard.cli.formatters.board_formatter import BoardFormatter
from scriptboard.cli.formatters.json_formatter import JsonFormatter
from scriptboard.cli.utils.cli_handler import CLIHandler, load_config_with_validation
from scriptboard.parser import classify_text
from scriptboard.render import (
    annotate_live,
    build_export,
    reading_html,
    render_reading,
    write_export,
)

console = Console()

ScriptArgument = Annotated[
    Path, typer.Argument(help="Path to the script file", show_default=False)
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config", "-c", help="Path to configuration file (YAML, TOML, or JSON)"
    ),
]


class RenderMode(str, Enum):
    """Rendering surfaces offered by ``render``."""

    LIVE = "live"
    READING = "reading"
    HTML = "html"


def classify_command(script: ScriptArgument, json_output: JsonOption = False) -> None:
    """Show the element type of every line."""
    handler = CLIHandler(console)
    try:
        lines = classify_text(ScriptDocument(script).read())
        rows = [
            {
                "line": number,
                "type": line.element_type.value,
                "text": line.display_text,
                "inline_dialogue": line.inline_dialogue,
            }
            for number, line in enumerate(lines)
        ]
        if json_output:
            print(JsonFormatter().format(rows))
            return

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Line", justify="right")
        table.add_column("Type")
        table.add_column("Text")
        for row in rows:
            text = row["text"]
            if row["inline_dialogue"]:
                text = f"{text} {row['inline_dialogue']}"
            table.add_row(str(row["line"]), str(row["type"]), escape(str(text)))
        console.print(table)
    except Exception as e:
        handler.handle_error(e, json_output)


def outline_command(script: ScriptArgument, json_output: JsonOption = False) -> None:
    """Show the title, section and scene headings."""
    handler = CLIHandler(console)
    try:
        entries = build_scene_outline(ScriptDocument(script).read())
        output_format = OutputFormat.JSON if json_output else OutputFormat.TEXT
        BoardFormatter(console).print(entries, output_format)
    except Exception as e:
        handler.handle_error(e, json_output)


def board_command(
    script: ScriptArgument,
    markdown: Annotated[
        bool,
        typer.Option("--markdown", "-m", help="Print the summary outline as Markdown"),
    ] = False,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Show scene cards grouped by section."""
    handler = CLIHandler(console)
    try:
        settings = load_config_with_validation(config)
        document = ScriptDocument(script)
        text = document.read()
        if markdown:
            print(export_summary_markdown(text, document.name), end="")
            return

        board = build_storyboard(
            text, summary_length=settings.summary_length, name=document.name
        )
        output_format = OutputFormat.JSON if json_output else OutputFormat.TEXT
        BoardFormatter(console).print(board, output_format)
    except Exception as e:
        handler.handle_error(e, json_output)


def render_command(
    script: ScriptArgument,
    mode: Annotated[
        RenderMode, typer.Option("--mode", help="Rendering surface")
    ] = RenderMode.READING,
    cursor: Annotated[
        list[int] | None,
        typer.Option("--cursor", help="0-based line holding a cursor (live mode)"),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Render a script in live, reading or HTML form."""
    handler = CLIHandler(console)
    formatter = JsonFormatter()
    try:
        text = ScriptDocument(script).read()
        if mode is RenderMode.HTML:
            print(reading_html(render_reading(text)))
            return

        if mode is RenderMode.LIVE:
            overlay = annotate_live(text, cursor or ())
            if json_output:
                print(formatter.format(overlay))
                return
            for number, line in enumerate(text.split("\n")):
                css_class = overlay.line_class(number) or ""
                console.print(
                    f"[dim]{number:>4}[/dim] [cyan]{css_class:<18}[/cyan] "
                    f"{escape(line)}"
                )
            return

        view = render_reading(text)
        if json_output:
            print(formatter.format(view))
            return
        for paragraph in view.paragraphs:
            if paragraph.kind == "heading":
                console.print(f"[bold]{escape(paragraph.heading or '')}[/bold]")
            elif paragraph.kind == "script":
                for line in paragraph.lines:
                    console.print(
                        f"[cyan]{line.css_class:<22}[/cyan] {escape(line.text)}"
                    )
            console.print()
    except Exception as e:
        handler.handle_error(e, json_output)


def export_command(
    script: ScriptArgument,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to a .json or .txt file"),
    ] = None,
    title: Annotated[
        str | None, typer.Option("--title", help="Document title")
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Lay a script out for printing."""
    handler = CLIHandler(console)
    try:
        document = ScriptDocument(script)
        exported = build_export(document.read(), title=title or "")
        if not exported.title:
            exported.title = document.name
        if output is not None:
            path = write_export(exported, output)
            handler.handle_success(
                f"Exported {len(exported.paragraphs)} paragraphs to {path}",
                {"path": str(path)},
                json_output,
            )
        elif json_output:
            print(exported.to_json())
        else:
            print(exported.to_plain_text(), end="")
    except Exception as e:
        handler.handle_error(e, json_output)


def characters_command(
    script: ScriptArgument,
    query: Annotated[
        str, typer.Option("--query", "-q", help="Only names containing this text")
    ] = "",
    limit: Annotated[
        int, typer.Option("--limit", "-n", help="Maximum number of names", min=1)
    ] = 10,
    json_output: JsonOption = False,
) -> None:
    """List character names, most frequent first."""
    handler = CLIHandler(console)
    try:
        text = ScriptDocument(script).read()
        counts = extract_character_names(text)
        names = suggest_characters(text, query, limit)
        rows = [{"name": name, "cues": counts[name]} for name in names]
        if json_output:
            print(JsonFormatter().format(rows))
            return
        if not rows:
            console.print("[yellow]No characters found[/yellow]")
            return
        for row in rows:
            console.print(f"{escape(str(row['name']))} [dim]({row['cues']})[/dim]")
    except Exception as e:
        handler.handle_error(e, json_output)
