"""Split a script into preamble, section and scene blocks."""

from __future__ import annotations

import dataclasses
import hashlib
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from scriptboard.parser import patterns
from scriptboard.parser.models import BlockColor, BlockKind, InlineTag, TagKind

BLOCK_ID_PREFIX = "block-"


@dataclass(frozen=True)
class Block:
    """A contiguous run of source lines forming one structural unit.

    ``lines`` are kept verbatim; joining every block's lines with ``\\n``
    reproduces the document exactly.
    """

    id: str
    kind: BlockKind
    title: str
    lines: tuple[str, ...]
    origin_line: int = 0

    @property
    def heading(self) -> str | None:
        """The heading line, or ``None`` for the preamble."""
        if self.kind is BlockKind.PREAMBLE or not self.lines:
            return None
        return self.lines[0]

    @property
    def display_title(self) -> str:
        """Title with any forced scene marker removed."""
        if self.kind is not BlockKind.SCENE:
            return self.title
        marker = patterns.scene_marker_length(self.title)
        return self.title[marker:].strip()

    def _tags(self) -> Iterable[tuple[int, InlineTag]]:
        start = 0 if self.kind is BlockKind.PREAMBLE else 1
        for offset, line in enumerate(self.lines[start:], start=start):
            tag = patterns.match_inline_tag(line)
            if tag is not None:
                yield offset, tag

    def _first_tag(self, kind: TagKind) -> InlineTag | None:
        if self.kind is BlockKind.PREAMBLE:
            return None
        for _, tag in self._tags():
            if tag.kind is kind:
                return tag
        return None

    @property
    def summary(self) -> str | None:
        """Explicit summary from a ``%%summary: ...%%`` line, if any."""
        tag = self._first_tag(TagKind.SUMMARY)
        return tag.value if tag is not None else None

    @property
    def color(self) -> BlockColor:
        """Card color from a ``%%color: ...%%`` line, ``none`` by default."""
        tag = self._first_tag(TagKind.COLOR)
        return BlockColor(tag.value) if tag is not None else BlockColor.NONE

    @property
    def notes(self) -> list[str]:
        """Values of every ``%%note: ...%%`` line in the block."""
        return [tag.value for _, tag in self._tags() if tag.kind is TagKind.NOTE]

    @property
    def body(self) -> list[str]:
        """Lines after the heading, without color and summary tag lines."""
        if self.kind is BlockKind.PREAMBLE:
            return list(self.lines)
        return [line for line in self.lines[1:] if not is_metadata_line(line)]

    @property
    def content_hash(self) -> str:
        """Truncated SHA256 of the block's text."""
        content = "\n".join(self.lines)
        return hashlib.sha256(content.encode("utf-8")).hexdigest()[:16]

    def with_lines(self, lines: Iterable[str]) -> Block:
        """Copy of this block with new lines and a title re-read from them."""
        new_lines = tuple(lines)
        title = self.title
        if self.kind is not BlockKind.PREAMBLE and new_lines:
            title = _block_title(self.kind, new_lines[0])
        return dataclasses.replace(self, lines=new_lines, title=title)


def is_metadata_line(line: str) -> bool:
    """Whether ``line`` is a color or summary tag."""
    tag = patterns.match_inline_tag(line)
    return tag is not None and tag.kind in (TagKind.COLOR, TagKind.SUMMARY)


def block_id(number: int) -> str:
    """Format the id of the ``number``-th block minted in a pass."""
    return f"{BLOCK_ID_PREFIX}{number}"


def next_block_id(blocks: Iterable[Block]) -> str:
    """Mint an id one past the highest numeric suffix in ``blocks``."""
    highest = -1
    for block in blocks:
        suffix = block.id.removeprefix(BLOCK_ID_PREFIX)
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return block_id(highest + 1)


def _block_title(kind: BlockKind, heading: str) -> str:
    if kind is BlockKind.SECTION:
        return patterns.heading_text(heading)
    return heading.strip()


def heading_kind(line: str) -> BlockKind | None:
    """Kind of block that ``line`` opens, or ``None`` for ordinary lines."""
    if patterns.is_section_heading(line):
        return BlockKind.SECTION
    if patterns.is_scene_heading(line):
        return BlockKind.SCENE
    return None


def segment(text: str) -> list[Block]:
    """Split ``text`` into blocks.

    The first block is always the preamble, which may be empty. Each level-2
    heading opens a section and each scene heading opens a scene; every
    other line belongs to the block currently open.
    """
    blocks: list[Block] = []
    kind = BlockKind.PREAMBLE
    title = ""
    origin = 0
    current: list[str] = []

    for index, line in enumerate(text.split("\n")):
        kind_of_line = heading_kind(line)
        if kind_of_line is None:
            current.append(line)
            continue
        blocks.append(
            Block(block_id(len(blocks)), kind, title, tuple(current), origin)
        )
        kind = kind_of_line
        title = _block_title(kind_of_line, line)
        origin = index
        current = [line]

    blocks.append(Block(block_id(len(blocks)), kind, title, tuple(current), origin))
    return blocks


def serialize(blocks: Iterable[Block]) -> str:
    """Join every block's lines back into a document."""
    return "\n".join(line for block in blocks for line in block.lines)


def relocate(blocks: Iterable[Block]) -> list[Block]:
    """Recompute ``origin_line`` after blocks were reordered or resized."""
    located: list[Block] = []
    position = 0
    for block in blocks:
        located.append(dataclasses.replace(block, origin_line=position))
        position += len(block.lines)
    return located


@dataclass(frozen=True)
class BlockRef:
    """Identity of a block that survives edits made elsewhere in the document.

    Verbatim copies share a content hash, so the reference also records which
    copy it names (``occurrence``), how many copies existed (``copies``) and
    the block's position when the reference was taken.
    """

    content_hash: str
    occurrence: int
    copies: int
    index: int

    @classmethod
    def of(cls, blocks: Sequence[Block], index: int) -> BlockRef:
        """Reference the block at ``index``."""
        content_hash = blocks[index].content_hash
        matches = [i for i, b in enumerate(blocks) if b.content_hash == content_hash]
        return cls(content_hash, matches.index(index), len(matches), index)

    @property
    def key(self) -> str:
        """Stable key for tracking work on this block."""
        return f"{self.content_hash}:{self.occurrence}"

    def find(self, blocks: Sequence[Block]) -> int | None:
        """Index of the referenced block in ``blocks``, or None if it changed.

        While every copy is still present the copy with the same rank is
        chosen. Otherwise the block must still sit at its original index.
        """
        matches = [
            i for i, b in enumerate(blocks) if b.content_hash == self.content_hash
        ]
        if len(matches) == self.copies:
            return matches[self.occurrence]
        if (
            self.index < len(blocks)
            and blocks[self.index].content_hash == self.content_hash
        ):
            return self.index
        return None
