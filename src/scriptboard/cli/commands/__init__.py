"""ScriptBoard CLI commands."""

from __future__ import annotations

from scriptboard.cli.commands.ai import ai_app
from scriptboard.cli.commands.scene import scene_app
from scriptboard.cli.commands.script import new_command, renumber_command
from scriptboard.cli.commands.view import (
    board_command,
    characters_command,
    classify_command,
    export_command,
    outline_command,
    render_command,
)

__all__ = [
    "ai_app",
    "board_command",
    "characters_command",
    "classify_command",
    "export_command",
    "new_command",
    "outline_command",
    "render_command",
    "renumber_command",
    "scene_app",
]
