"""Static reading-mode rendering.

The document body is split into paragraphs at blank lines, the way the host
Markdown renderer does. Headings are passed through untouched, paragraphs
made only of metadata tags are hidden, and every other line becomes a
styled element.
"""

from __future__ import annotations

import html

from pydantic import BaseModel, Field

from scriptboard.editing import strip_front_matter
from scriptboard.parser import patterns
from scriptboard.parser.classifier import classify_lines
from scriptboard.parser.models import ElementType
from scriptboard.render.runs import line_runs

CSS_CLASSES = {
    ElementType.SCENE: "script-scene",
    ElementType.CHARACTER: "script-character",
    ElementType.DIALOGUE: "script-dialogue",
    ElementType.PARENTHETICAL: "script-parenthetical",
    ElementType.TRANSITION: "script-transition",
    ElementType.ACTION: "script-action",
}
LINE_ELEMENT_CLASS = "script-editor-line-element"
HIDDEN_METADATA_CLASS = "script-editor-hidden-metadata"


class ReadingLine(BaseModel):
    """One rendered line."""

    element_type: ElementType
    css_class: str
    text: str


class ReadingParagraph(BaseModel):
    """A paragraph of the reading view.

    ``kind`` is ``heading`` for Markdown headings, ``hidden`` for
    paragraphs holding only metadata, and ``script`` otherwise.
    """

    kind: str
    lines: list[ReadingLine] = Field(default_factory=list)
    heading_level: int | None = None
    heading: str | None = None


class ReadingView(BaseModel):
    """Rendered paragraphs of a whole document."""

    paragraphs: list[ReadingParagraph] = Field(default_factory=list)


def _paragraphs(text: str) -> list[list[str]]:
    groups: list[list[str]] = []
    current: list[str] = []
    for line in text.split("\n"):
        if not line.strip():
            if current:
                groups.append(current)
                current = []
            continue
        if patterns.markdown_heading(line) is not None:
            if current:
                groups.append(current)
                current = []
            groups.append([line])
            continue
        current.append(line)
    if current:
        groups.append(current)
    return groups


def _render_paragraph(lines: list[str]) -> ReadingParagraph:
    rendered = [
        ReadingLine(
            element_type=run.element_type,
            css_class=CSS_CLASSES[run.element_type],
            text=run.text,
        )
        for classified in classify_lines(lines)
        for run in line_runs(classified)
    ]
    if not rendered:
        return ReadingParagraph(kind="hidden")
    return ReadingParagraph(kind="script", lines=rendered)


def render_reading(text: str) -> ReadingView:
    """Render ``text`` for reading mode."""
    view = ReadingView()
    for group in _paragraphs(strip_front_matter(text)):
        heading = patterns.markdown_heading(group[0])
        if heading is not None:
            level, title = heading
            view.paragraphs.append(
                ReadingParagraph(kind="heading", heading_level=level, heading=title)
            )
            continue
        view.paragraphs.append(_render_paragraph(group))
    return view


def reading_html(view: ReadingView) -> str:
    """Serialize a reading view as an HTML fragment."""
    out = ['<div class="script-reading">']
    for paragraph in view.paragraphs:
        if paragraph.kind == "heading":
            level = min(paragraph.heading_level or 1, 6)
            out.append(f"<h{level}>{html.escape(paragraph.heading or '')}</h{level}>")
        elif paragraph.kind == "hidden":
            out.append(f'<div class="{HIDDEN_METADATA_CLASS}"></div>')
        else:
            out.append('<div class="script-paragraph">')
            for line in paragraph.lines:
                out.append(
                    f'<div class="{line.css_class} {LINE_ELEMENT_CLASS}">'
                    f"{html.escape(line.text)}</div>"
                )
            out.append("</div>")
    out.append("</div>")
    return "\n".join(out)
