"""Storyboard cards and scene outline built from a segmented script."""

from __future__ import annotations

from pydantic import BaseModel, Field

from scriptboard.parser import patterns
from scriptboard.parser.classifier import classify_lines, classify_text
from scriptboard.parser.models import BlockColor, BlockKind, ElementType
from scriptboard.parser.segmenter import Block, segment

EXCERPT_ELLIPSIS = "..."


class SceneCard(BaseModel):
    """One scene as shown on the storyboard."""

    index: int = Field(..., description="Position in the full block list")
    id: str
    title: str
    color: BlockColor = BlockColor.NONE
    summary: str = ""
    has_summary: bool = False
    notes: list[str] = Field(default_factory=list)
    origin_line: int = 0


class StoryboardSection(BaseModel):
    """A level-2 section and the scenes under it.

    The leading group for scenes that precede every section has no index
    and an empty title.
    """

    index: int | None = None
    id: str | None = None
    title: str = ""
    color: BlockColor = BlockColor.NONE
    summary: str = ""
    cards: list[SceneCard] = Field(default_factory=list)


class Storyboard(BaseModel):
    """Cards for every scene, grouped by section."""

    title: str
    sections: list[StoryboardSection] = Field(default_factory=list)

    @property
    def cards(self) -> list[SceneCard]:
        """All scene cards in document order."""
        return [card for section in self.sections for card in section.cards]


class OutlineEntry(BaseModel):
    """A heading or scene line in the document outline."""

    level: int = Field(..., ge=1, le=3)
    kind: str
    text: str
    line: int = Field(..., description="0-based line number in the document")
    number: int | None = Field(default=None, description="1-based scene number")


def document_title(text: str, name: str | None = None) -> str:
    """First level-1 heading of ``text``, else ``name``."""
    for line in text.split("\n"):
        if patterns.is_title_heading(line):
            return patterns.heading_text(line)
    return name or ""


def block_excerpt(block: Block, length: int = 50) -> str:
    """Plain-text preview of a block's body.

    Uses the display text of every classified body line, with inline
    comments and links removed, cut to ``length`` characters.
    """
    parts: list[str] = []
    for line in classify_lines(block.lines)[1:]:
        if line.element_type is ElementType.EMPTY:
            continue
        parts.append(line.display_text)
        if line.inline_dialogue:
            parts.append(line.inline_dialogue)
    text = " ".join(patterns.strip_inline_markup(" ".join(parts)).split())
    if len(text) > length:
        return text[:length] + EXCERPT_ELLIPSIS
    return text


def _card(index: int, block: Block, summary_length: int) -> SceneCard:
    summary = block.summary
    has_summary = summary is not None
    if summary is None:
        summary = block_excerpt(block, summary_length)
    return SceneCard(
        index=index,
        id=block.id,
        title=block.display_title,
        color=block.color,
        summary=summary,
        has_summary=has_summary,
        notes=block.notes,
        origin_line=block.origin_line,
    )


def build_storyboard(
    text: str, summary_length: int = 50, name: str | None = None
) -> Storyboard:
    """Group the scenes of ``text`` into storyboard sections.

    Args:
        text: Full document text.
        summary_length: Characters of body text shown when a scene has no
            summary tag.
        name: Fallback title when the document has no level-1 heading.

    Returns:
        The storyboard, with a leading untitled section only when scenes
        appear before the first section heading.
    """
    blocks = segment(text)
    leading = StoryboardSection()
    sections: list[StoryboardSection] = []
    current = leading

    for index, block in enumerate(blocks):
        if block.kind is BlockKind.SECTION:
            current = StoryboardSection(
                index=index,
                id=block.id,
                title=block.title,
                color=block.color,
                summary=block.summary or "",
            )
            sections.append(current)
        elif block.kind is BlockKind.SCENE:
            current.cards.append(_card(index, block, summary_length))

    if leading.cards:
        sections.insert(0, leading)
    return Storyboard(title=document_title(text, name), sections=sections)


def build_scene_outline(text: str) -> list[OutlineEntry]:
    """List the title, section and scene headings of ``text`` in order."""
    entries: list[OutlineEntry] = []
    scene_number = 0
    for line_number, line in enumerate(classify_text(text)):
        if line.element_type is ElementType.SCENE:
            scene_number += 1
            entries.append(
                OutlineEntry(
                    level=3,
                    kind="scene",
                    text=line.display_text,
                    line=line_number,
                    number=scene_number,
                )
            )
        elif patterns.is_section_heading(line.raw_text):
            entries.append(
                OutlineEntry(
                    level=2,
                    kind="section",
                    text=patterns.heading_text(line.raw_text),
                    line=line_number,
                )
            )
        elif patterns.is_title_heading(line.raw_text):
            entries.append(
                OutlineEntry(
                    level=1,
                    kind="title",
                    text=patterns.heading_text(line.raw_text),
                    line=line_number,
                )
            )
    return entries


def export_summary_markdown(text: str, name: str | None = None) -> str:
    """Render the storyboard as a Markdown summary document."""
    board = build_storyboard(text, name=name)
    out: list[str] = [f"# {board.title or 'Untitled'}", ""]
    scene_number = 0
    for section in board.sections:
        if section.title:
            out.append(f"## {section.title}")
            out.append("")
            if section.summary:
                out.append(section.summary)
                out.append("")
        for card in section.cards:
            scene_number += 1
            out.append(f"### {scene_number}. {card.title}")
            out.append("")
            out.append(card.summary if card.has_summary else "_No summary_")
            out.append("")
    return "\n".join(out).rstrip("\n") + "\n"
