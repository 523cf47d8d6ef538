"""Decorations for the live-editing overlay.

The host editor owns the text and the cursor; this module only computes
which CSS class each line carries and which character ranges are styled or
hidden. Offsets are relative to the start of each line.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field

from scriptboard.parser import patterns
from scriptboard.parser.classifier import classify_lines
from scriptboard.parser.models import ClassifiedLine, ElementType, TagKind
from scriptboard.render.runs import line_runs

LINE_CLASSES = {
    ElementType.SCENE: "lp-scene",
    ElementType.CHARACTER: "lp-character",
    ElementType.DIALOGUE: "lp-dialogue",
    ElementType.PARENTHETICAL: "lp-parenthetical",
    ElementType.TRANSITION: "lp-transition",
}
NOTE_CLASS = "lp-note"
NOTE_CONTENT_CLASS = "lp-note-content"
HIDDEN_CLASS = "lp-marker-symbol"

NOTE_SUFFIX = "%%"


class LineDecoration(BaseModel):
    """CSS class applied to a whole line."""

    line: int
    css_class: str


class MarkDecoration(BaseModel):
    """CSS class applied to the character range ``[start, end)`` of a line."""

    line: int
    start: int
    end: int
    css_class: str


class LiveOverlay(BaseModel):
    """All decorations for one pass over a document."""

    lines: list[LineDecoration] = Field(default_factory=list)
    marks: list[MarkDecoration] = Field(default_factory=list)

    def line_class(self, line: int) -> str | None:
        """CSS class of ``line``, if it has one."""
        for decoration in self.lines:
            if decoration.line == line:
                return decoration.css_class
        return None

    def marks_on(self, line: int) -> list[MarkDecoration]:
        """Mark decorations on ``line`` in offset order."""
        return [mark for mark in self.marks if mark.line == line]


def _note_marks(number: int, raw: str) -> list[MarkDecoration]:
    prefix = patterns.NOTE_PREFIX_PATTERN.match(raw)
    if prefix is None:
        return []
    content_start = prefix.end()
    content_end = len(raw.rstrip()) - len(NOTE_SUFFIX)
    marks = []
    if content_start < content_end:
        marks.append(
            MarkDecoration(
                line=number,
                start=content_start,
                end=content_end,
                css_class=NOTE_CONTENT_CLASS,
            )
        )
    marks.append(
        MarkDecoration(line=number, start=0, end=content_start, css_class=HIDDEN_CLASS)
    )
    if content_end < len(raw):
        marks.append(
            MarkDecoration(
                line=number,
                start=max(content_end, content_start),
                end=len(raw),
                css_class=HIDDEN_CLASS,
            )
        )
    return marks


def _decorate(
    number: int, line: ClassifiedLine, cursor_on_line: bool
) -> tuple[str | None, list[MarkDecoration]]:
    if line.tag is not None:
        if line.tag.kind is TagKind.NOTE:
            return NOTE_CLASS, _note_marks(number, line.raw_text)
        # color and summary tags disappear unless they are being edited
        return (None if cursor_on_line else HIDDEN_CLASS), []

    css_class = LINE_CLASSES.get(line.element_type)
    marks: list[MarkDecoration] = []

    if line.strip_prefix and not cursor_on_line:
        marks.append(
            MarkDecoration(
                line=number, start=0, end=line.marker_length, css_class=HIDDEN_CLASS
            )
        )

    if line.inline_dialogue is not None:
        dialogue = line_runs(line)[-1]
        marks.append(
            MarkDecoration(
                line=number,
                start=dialogue.start,
                end=dialogue.end,
                css_class=LINE_CLASSES[ElementType.DIALOGUE],
            )
        )

    return css_class, marks


def annotate_live(text: str, cursor_lines: Iterable[int] = ()) -> LiveOverlay:
    """Compute live-overlay decorations for ``text``.

    Args:
        text: Full document text.
        cursor_lines: 0-based lines holding a cursor. Markers and metadata
            tags on these lines stay visible so they can be edited.

    Returns:
        Line and mark decorations in document order.
    """
    cursors = set(cursor_lines)
    overlay = LiveOverlay()
    for number, line in enumerate(classify_lines(text.split("\n"))):
        css_class, marks = _decorate(number, line, number in cursors)
        if css_class is not None:
            overlay.lines.append(LineDecoration(line=number, css_class=css_class))
        overlay.marks.extend(
            sorted(
                (mark for mark in marks if mark.start < mark.end),
                key=lambda mark: mark.start,
            )
        )
    return overlay
