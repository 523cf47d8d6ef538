"""Rich rendering of storyboards and scene outlines."""

from __future__ import annotations

import io
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from scriptboard.board.outline import OutlineEntry, Storyboard
from scriptboard.cli.formatters.base import OutputFormat, OutputFormatter
from scriptboard.cli.formatters.json_formatter import JsonFormatter
from scriptboard.parser.models import BlockColor

COLOR_STYLES = {
    BlockColor.RED: "red",
    BlockColor.BLUE: "blue",
    BlockColor.GREEN: "green",
    BlockColor.YELLOW: "yellow",
    BlockColor.PURPLE: "magenta",
    BlockColor.NONE: "",
}


def _render(renderable: Any) -> str:
    string_io = io.StringIO()
    temp_console = Console(file=string_io, force_terminal=True, width=120)
    temp_console.print(renderable)
    return string_io.getvalue()


class BoardFormatter(OutputFormatter[Any]):
    """Formatter for storyboards and outlines."""

    def format(self, data: Any, format_type: OutputFormat = OutputFormat.TEXT) -> str:
        """Format a ``Storyboard`` or a list of ``OutlineEntry``."""
        if format_type == OutputFormat.JSON:
            return JsonFormatter().format(data)
        return _render(self.renderable(data))

    def print(self, data: Any, format_type: OutputFormat = OutputFormat.TEXT) -> None:
        """Print JSON as text, anything else as a rich renderable."""
        if format_type == OutputFormat.JSON:
            super().print(data, format_type)
        else:
            self.console.print(self.renderable(data))

    def renderable(self, data: Any) -> Any:
        """Build the rich table or tree for ``data``."""
        if isinstance(data, Storyboard):
            return self._storyboard_table(data)
        if isinstance(data, list):
            return self._outline_tree(data)
        return str(data)

    def _storyboard_table(self, board: Storyboard) -> Table:
        table = Table(
            title=escape(board.title), show_header=True, header_style="bold magenta"
        )
        table.add_column("#", justify="right")
        table.add_column("Section")
        table.add_column("Scene")
        table.add_column("Summary")
        table.add_column("Color")

        for section in board.sections:
            for card in section.cards:
                style = COLOR_STYLES.get(card.color, "")
                summary = escape(card.summary)
                if not card.has_summary:
                    summary = f"[dim]{summary}[/dim]"
                table.add_row(
                    str(card.index),
                    escape(section.title),
                    escape(card.title),
                    summary,
                    f"[{style}]{card.color.value}[/{style}]" if style else "",
                )
        return table

    def _outline_tree(self, entries: list[OutlineEntry]) -> Tree | str:
        if not entries:
            return "No headings found"
        tree = Tree("[bold]Outline[/bold]")
        parents: dict[int, Tree] = {0: tree}
        for entry in entries:
            parent_level = max(level for level in parents if level < entry.level)
            label = escape(entry.text)
            if entry.number is not None:
                label = f"{entry.number}. {label}"
            node = parents[parent_level].add(f"{label} [dim](line {entry.line})[/dim]")
            parents = {
                level: branch
                for level, branch in parents.items()
                if level < entry.level
            }
            parents[entry.level] = node
        return tree
