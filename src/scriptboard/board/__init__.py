"""Storyboard views and block-level edits."""

from __future__ import annotations

from .document import BoardDocument, ScriptDocument
from .operations import (
    delete_block,
    duplicate_block,
    edit_block,
    insert_new_scene,
    move_block,
    recolor_block,
    set_block_summary,
)
from .outline import (
    OutlineEntry,
    SceneCard,
    Storyboard,
    StoryboardSection,
    build_scene_outline,
    build_storyboard,
    export_summary_markdown,
)

__all__ = [
    "BoardDocument",
    "OutlineEntry",
    "SceneCard",
    "ScriptDocument",
    "Storyboard",
    "StoryboardSection",
    "build_scene_outline",
    "build_storyboard",
    "delete_block",
    "duplicate_block",
    "edit_block",
    "export_summary_markdown",
    "insert_new_scene",
    "move_block",
    "recolor_block",
    "set_block_summary",
]
