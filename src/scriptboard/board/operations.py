"""Block-level mutations used by the storyboard.

Each operation takes the full block list and returns a new one; callers
serialize the result and write the whole document back. Index 0 is always
the preamble, which can be neither moved, edited nor removed.
"""

from __future__ import annotations

from collections.abc import Sequence

from scriptboard.config import get_logger
from scriptboard.exceptions import BlockIndexError, ValidationError
from scriptboard.parser import patterns
from scriptboard.parser.models import BlockColor, BlockKind, TagKind
from scriptboard.parser.segmenter import (
    Block,
    heading_kind,
    next_block_id,
    relocate,
)

logger = get_logger(__name__)

NEW_SCENE_LINES = ("EXT. ", "")


def _check_index(blocks: Sequence[Block], index: int, action: str) -> Block:
    if index < 0 or index >= len(blocks):
        raise BlockIndexError(
            f"Cannot {action} block {index}: no such block",
            index=index,
            block_count=len(blocks),
        )
    block = blocks[index]
    if block.kind is BlockKind.PREAMBLE:
        raise BlockIndexError(
            f"Cannot {action} the preamble",
            index=index,
            block_count=len(blocks),
        )
    return block


def normalize_color(color: BlockColor | str) -> BlockColor:
    """Coerce a color name, including the CJK spellings of ``none``.

    Raises:
        ValidationError: If ``color`` is not a known card color.
    """
    if isinstance(color, BlockColor):
        return color
    tag = patterns.match_inline_tag(patterns.format_tag(TagKind.COLOR, color.strip()))
    if tag is None:
        raise ValidationError(
            message=f"Unknown color '{color}'",
            hint="Use one of: " + ", ".join(c.value for c in BlockColor),
            details={"color": color},
        )
    return BlockColor(tag.value)


def _without_tag(lines: Sequence[str], kind: TagKind) -> list[str]:
    kept = [lines[0]]
    for line in lines[1:]:
        tag = patterns.match_inline_tag(line)
        if tag is not None and tag.kind is kind:
            continue
        kept.append(line)
    return kept


def _tag_line(block: Block, kind: TagKind, value: str) -> str:
    line = patterns.format_tag(kind, value)
    if block.lines and block.lines[0].endswith("\r"):
        line += "\r"
    return line


def move_block(blocks: Sequence[Block], source: int, target: int) -> list[Block]:
    """Move the block at ``source`` so that it lands in slot ``target``.

    ``target`` addresses the gaps of the list before removal (``1`` is just
    after the preamble, ``len(blocks)`` is the end). When the target lies
    after the source it is shifted down by one to account for the removal.
    """
    _check_index(blocks, source, "move")
    if target < 1 or target > len(blocks):
        raise BlockIndexError(
            f"Cannot move block {source} to slot {target}",
            index=target,
            block_count=len(blocks),
        )

    adjusted = target - 1 if target > source else target
    result = list(blocks)
    if adjusted == source:
        return result

    moved = result.pop(source)
    result.insert(adjusted, moved)
    logger.info("Moved block", block_id=moved.id, source=source, target=adjusted)
    return relocate(result)


def recolor_block(
    blocks: Sequence[Block], index: int, color: BlockColor | str
) -> list[Block]:
    """Replace the block's color tag; ``none`` removes it entirely."""
    block = _check_index(blocks, index, "recolor")
    new_color = normalize_color(color)

    lines = _without_tag(block.lines, TagKind.COLOR)
    if new_color is not BlockColor.NONE:
        lines.insert(1, _tag_line(block, TagKind.COLOR, new_color.value))

    result = list(blocks)
    result[index] = block.with_lines(lines)
    logger.info("Recolored block", block_id=block.id, color=new_color.value)
    return relocate(result)


def set_block_summary(blocks: Sequence[Block], index: int, text: str) -> list[Block]:
    """Replace the block's summary tag; an empty summary removes it."""
    block = _check_index(blocks, index, "summarize")
    summary = " ".join(text.split())

    lines = _without_tag(block.lines, TagKind.SUMMARY)
    if summary:
        lines.insert(1, _tag_line(block, TagKind.SUMMARY, summary))

    result = list(blocks)
    result[index] = block.with_lines(lines)
    logger.info("Updated block summary", block_id=block.id, length=len(summary))
    return relocate(result)


def duplicate_block(blocks: Sequence[Block], index: int) -> list[Block]:
    """Insert a verbatim copy of the block right after it."""
    block = _check_index(blocks, index, "duplicate")
    clone = Block(
        id=next_block_id(blocks),
        kind=block.kind,
        title=block.title,
        lines=block.lines,
    )
    result = list(blocks)
    result.insert(index + 1, clone)
    logger.info("Duplicated block", block_id=block.id, clone_id=clone.id)
    return relocate(result)


def delete_block(blocks: Sequence[Block], index: int) -> list[Block]:
    """Remove the block and all of its lines."""
    block = _check_index(blocks, index, "delete")
    result = list(blocks)
    del result[index]
    logger.info("Deleted block", block_id=block.id, lines=len(block.lines))
    return relocate(result)


def insert_new_scene(blocks: Sequence[Block], after: int) -> list[Block]:
    """Insert a blank ``EXT.`` scene after the block at ``after``.

    ``after`` may be 0 to add the scene directly below the preamble.
    """
    if after < 0 or after >= len(blocks):
        raise BlockIndexError(
            f"Cannot insert a scene after block {after}: no such block",
            index=after,
            block_count=len(blocks),
        )
    scene = Block(
        id=next_block_id(blocks),
        kind=BlockKind.SCENE,
        title=NEW_SCENE_LINES[0].strip(),
        lines=NEW_SCENE_LINES,
    )
    result = list(blocks)
    result.insert(after + 1, scene)
    logger.info("Inserted scene", block_id=scene.id, after=after)
    return relocate(result)


def edit_block(
    blocks: Sequence[Block],
    index: int,
    heading: str,
    summary: str = "",
    body: str | Sequence[str] = "",
) -> list[Block]:
    """Rewrite a block from its heading, summary and body.

    The block's existing color tag line is preserved. The rebuilt block is
    laid out as heading, summary tag, color tag, then the body lines.

    Raises:
        ValidationError: If ``heading`` does not open a scene or section.
    """
    block = _check_index(blocks, index, "edit")
    kind = heading_kind(heading)
    if kind is None:
        raise ValidationError(
            message=f"'{heading}' is not a scene or section heading",
            hint="Start scenes with INT./EXT., '.' or '### ' and sections with '## '",
            details={"index": index},
        )

    lines = [heading]
    summary = " ".join(summary.split())
    if summary:
        lines.append(_tag_line(block, TagKind.SUMMARY, summary))
    for line in block.lines[1:]:
        tag = patterns.match_inline_tag(line)
        if tag is not None and tag.kind is TagKind.COLOR:
            lines.append(line)
            break
    body_lines = body.split("\n") if isinstance(body, str) else list(body)
    lines.extend(body_lines)

    result = list(blocks)
    result[index] = Block(
        id=block.id, kind=kind, title=block.title, lines=block.lines
    ).with_lines(lines)
    logger.info("Edited block", block_id=block.id, kind=kind.value)
    return relocate(result)
