"""ScriptBoard: plain-text screenplays as a storyboard of scene cards.

Scripts are Markdown files with lightweight screenplay conventions. The
parser classifies each line, the segmenter cuts a document into scene and
section blocks, and the board and render packages present those blocks as
cards, outlines, reading views and print layouts.
"""

from .board import BoardDocument, ScriptDocument, build_storyboard
from .config import ScriptBoardSettings, get_logger, get_settings
from .parser import (
    Block,
    BlockColor,
    BlockKind,
    ClassifiedLine,
    ElementType,
    classify,
    classify_lines,
    classify_text,
    segment,
    serialize,
)

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockColor",
    "BlockKind",
    "BoardDocument",
    "ClassifiedLine",
    "ElementType",
    "ScriptBoardSettings",
    "ScriptDocument",
    "__version__",
    "build_storyboard",
    "classify",
    "classify_lines",
    "classify_text",
    "get_logger",
    "get_settings",
    "segment",
    "serialize",
]
