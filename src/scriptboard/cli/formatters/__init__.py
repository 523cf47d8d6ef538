"""Output formatters for the ScriptBoard CLI."""

from __future__ import annotations

from scriptboard.cli.formatters.base import OutputFormat, OutputFormatter
from scriptboard.cli.formatters.board_formatter import BoardFormatter
from scriptboard.cli.formatters.json_formatter import JsonFormatter

__all__ = [
    "BoardFormatter",
    "JsonFormatter",
    "OutputFormat",
    "OutputFormatter",
]
