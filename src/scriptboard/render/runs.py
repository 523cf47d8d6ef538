"""Visible text runs of classified lines.

A line normally renders as one run. A colon cue carrying same-line
dialogue (``BOB: Hello.``) renders as a cue run followed by a dialogue run,
and the break between them is computed here once so that every output
surface splits it the same way.
"""

from __future__ import annotations

from pydantic import BaseModel

from scriptboard.parser.models import ClassifiedLine, ElementType


class InlineRun(BaseModel):
    """A span of visible text within one source line."""

    element_type: ElementType
    text: str
    start: int
    end: int


def _skip_spaces(text: str, position: int) -> int:
    while position < len(text) and text[position].isspace():
        position += 1
    return position


def line_runs(line: ClassifiedLine) -> list[InlineRun]:
    """Split a classified line into runs; tags and blank lines have none."""
    if line.element_type is ElementType.EMPTY:
        return []

    raw = line.raw_text
    start = _skip_spaces(raw, line.marker_length if line.strip_prefix else 0)
    end = len(raw.rstrip())

    if line.inline_dialogue is None:
        return [
            InlineRun(
                element_type=line.element_type,
                text=line.display_text,
                start=start,
                end=end,
            )
        ]

    dialogue_start = raw.rfind(line.inline_dialogue)
    cue_end = len(raw[:dialogue_start].rstrip())
    return [
        InlineRun(
            element_type=ElementType.CHARACTER,
            text=line.display_text,
            start=start,
            end=cue_end,
        ),
        InlineRun(
            element_type=ElementType.DIALOGUE,
            text=line.inline_dialogue,
            start=dialogue_start,
            end=dialogue_start + len(line.inline_dialogue),
        ),
    ]
