"""Paginated export document model.

``build_export`` turns a script into a list of formatted paragraphs that a
word-processor encoder can lay out directly. Measurements follow the
WordprocessingML conventions: indents and spacing in twips, font size in
half-points.
"""

from __future__ import annotations

import textwrap
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from scriptboard.config import get_logger
from scriptboard.editing import strip_front_matter
from scriptboard.exceptions import ExportError
from scriptboard.parser import patterns
from scriptboard.parser.classifier import classify_lines
from scriptboard.parser.models import ElementType
from scriptboard.render.runs import InlineRun, line_runs

logger = get_logger(__name__)

FONT = "Courier New"
FONT_SIZE = 24
TWIPS_PER_CHAR = 144  # 12pt Courier sets ten characters to the inch


class Alignment(str, Enum):
    """Paragraph alignment."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class PageMargins(BaseModel):
    """Page margins in twips; the wide left margin leaves room for binding."""

    top: int = 1440
    right: int = 1440
    bottom: int = 1440
    left: int = 2160


class ExportParagraph(BaseModel):
    """One paragraph of the exported document."""

    element: str = Field(..., description="Element type, or title/section/blank")
    text: str = ""
    alignment: Alignment = Alignment.LEFT
    bold: bool = False
    italic: bool = False
    indent_left: int = 0
    indent_right: int = 0
    spacing_before: int = 0
    spacing_after: int = 0


class ExportDocument(BaseModel):
    """A script laid out for printing."""

    title: str = ""
    font: str = FONT
    font_size: int = FONT_SIZE
    margins: PageMargins = Field(default_factory=PageMargins)
    paragraphs: list[ExportParagraph] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize for an external document encoder."""
        return self.model_dump_json(indent=2)

    def to_plain_text(self, width: int = 60) -> str:
        """Monospaced preview of the layout."""
        out: list[str] = []
        for paragraph in self.paragraphs:
            if not paragraph.text:
                out.append("")
                continue
            left = paragraph.indent_left // TWIPS_PER_CHAR
            right = paragraph.indent_right // TWIPS_PER_CHAR
            inner = max(width - left - right, 10)
            for row in textwrap.wrap(paragraph.text, inner) or [""]:
                if paragraph.alignment is Alignment.CENTER:
                    row = row.center(inner).rstrip()
                elif paragraph.alignment is Alignment.RIGHT:
                    row = row.rjust(inner)
                out.append(" " * left + row)
        return "\n".join(out) + "\n"


def _run_paragraph(run: InlineRun) -> ExportParagraph:
    text = run.text
    if run.element_type is ElementType.SCENE:
        return ExportParagraph(
            element=run.element_type.value,
            text=text.upper(),
            alignment=Alignment.CENTER,
            bold=True,
            spacing_before=240,
            spacing_after=120,
        )
    if run.element_type is ElementType.TRANSITION:
        return ExportParagraph(
            element=run.element_type.value,
            text=text.upper(),
            alignment=Alignment.RIGHT,
            spacing_before=240,
            spacing_after=120,
        )
    if run.element_type is ElementType.CHARACTER:
        return ExportParagraph(
            element=run.element_type.value,
            text=text.upper(),
            alignment=Alignment.CENTER,
            spacing_before=240,
        )
    if run.element_type is ElementType.PARENTHETICAL:
        return ExportParagraph(
            element=run.element_type.value,
            text=text,
            alignment=Alignment.CENTER,
            italic=True,
        )
    if run.element_type is ElementType.DIALOGUE:
        return ExportParagraph(
            element=run.element_type.value,
            text=text,
            indent_left=1440,
            indent_right=1440,
        )
    return ExportParagraph(
        element=run.element_type.value,
        text=text,
        spacing_before=120,
        spacing_after=120,
    )


def build_export(text: str, title: str = "") -> ExportDocument:
    """Lay out ``text`` as an export document.

    Front matter and inline tags are dropped; each blank line becomes an
    empty spacer paragraph.
    """
    body = strip_front_matter(text).lstrip("\r\n")
    document = ExportDocument(title=title)

    for line in classify_lines(body.split("\n")):
        if line.is_blank:
            document.paragraphs.append(ExportParagraph(element="blank"))
            continue
        if line.is_tag:
            continue

        heading = patterns.markdown_heading(line.raw_text)
        if heading is not None and heading[0] <= 2:
            level, heading_text = heading
            document.paragraphs.append(
                ExportParagraph(
                    element="title" if level == 1 else "section",
                    text=heading_text.upper(),
                    alignment=Alignment.CENTER,
                    bold=level == 2,
                    spacing_before=480 if level == 1 else 240,
                    spacing_after=240,
                )
            )
            if level == 1 and not document.title:
                document.title = heading_text
            continue

        document.paragraphs.extend(_run_paragraph(run) for run in line_runs(line))

    logger.debug(
        "Built export document",
        title=document.title,
        paragraphs=len(document.paragraphs),
    )
    return document


def write_export(document: ExportDocument, path: Path | str) -> Path:
    """Write ``document`` as ``.json`` or ``.txt``.

    Raises:
        ExportError: If the file extension is not supported or the write fails.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        content = document.to_json()
    elif suffix == ".txt":
        content = document.to_plain_text()
    else:
        raise ExportError(
            message=f"Unsupported export format: {suffix or '(none)'}",
            hint="Use a .json file for document encoders or .txt for a preview",
            details={"path": str(path)},
        )

    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ExportError(
            message=f"Failed to write export: {path}",
            details={"path": str(path), "error": str(e)},
        ) from e
    logger.info("Exported script", path=str(path), paragraphs=len(document.paragraphs))
    return path
