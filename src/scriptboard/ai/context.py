"""Text sent to the AI collaborator, cut from a segmented script."""

from __future__ import annotations

from collections.abc import Sequence

from scriptboard.ai.prompts import SUMMARY_REQUEST_MARKER, TRANSCRIPT_SEPARATOR
from scriptboard.parser.models import BlockKind
from scriptboard.parser.segmenter import Block


def block_content(block: Block) -> str:
    """Body text of a block without heading, color or summary lines."""
    return "\n".join(block.body).strip()


def _join(blocks: Sequence[Block]) -> str:
    return "\n".join(line for block in blocks for line in block.lines).strip()


def context_before(
    blocks: Sequence[Block], index: int, count: int = 2, char_limit: int = 4000
) -> str:
    """Raw text of up to ``count`` blocks ending just before ``index``.

    Only the last ``char_limit`` characters are kept.
    """
    text = _join(blocks[max(0, index - count) : index])
    return text[-char_limit:] if len(text) > char_limit else text


def context_after(
    blocks: Sequence[Block], index: int, count: int = 2, char_limit: int = 4000
) -> str:
    """Raw text of up to ``count`` blocks starting just after ``index``.

    Only the first ``char_limit`` characters are kept.
    """
    text = _join(blocks[index + 1 : index + 1 + count])
    return text[:char_limit]


def needs_summary(block: Block) -> bool:
    """Whether a bulk request should ask for this block's summary."""
    return block.kind is BlockKind.SCENE and block.summary is None


def build_transcript(blocks: Sequence[Block]) -> str:
    """Number every block as ``[BLOCK i]`` for a bulk summary request.

    Scenes without a summary are followed by the request marker. The
    numbers are positions in ``blocks``, so replies map straight back to
    block indices.
    """
    parts = []
    for index, block in enumerate(blocks):
        start = 0 if block.kind is BlockKind.PREAMBLE else 1
        body = "\n".join(block.lines[start:])
        text = f"[BLOCK {index}] {block.title}\n{body}"
        if needs_summary(block):
            text += f"\n{SUMMARY_REQUEST_MARKER}"
        parts.append(text)
    return TRANSCRIPT_SEPARATOR.join(parts)


def fingerprint(blocks: Sequence[Block]) -> tuple[str, ...]:
    """Content hashes of every block, in order."""
    return tuple(block.content_hash for block in blocks)
