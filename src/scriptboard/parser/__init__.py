"""Screenplay line classification and block segmentation for ScriptBoard."""

from __future__ import annotations

from .classifier import classify, classify_lines, classify_text, clean_character_name
from .models import (
    BlockColor,
    BlockKind,
    ClassifiedLine,
    ElementType,
    InlineTag,
    TagKind,
)
from .segmenter import Block, segment, serialize

__all__ = [
    "Block",
    "BlockColor",
    "BlockKind",
    "ClassifiedLine",
    "ElementType",
    "InlineTag",
    "TagKind",
    "classify",
    "classify_lines",
    "classify_text",
    "clean_character_name",
    "segment",
    "serialize",
]
