"""AI-assisted storyboard actions.

Every action reads the whole document, sends one request, then re-reads the
document before writing so that edits made while the request was in flight
are never overwritten. A block is found again through a ``BlockRef``; if it
no longer exists the reply is discarded.

Failures never raise. They are reported through ``AIResult`` and leave the
document untouched.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from pydantic import BaseModel

from scriptboard.ai import context, prompts
from scriptboard.board.document import ScriptDocument
from scriptboard.board.operations import (
    edit_block,
    insert_new_scene,
    set_block_summary,
)
from scriptboard.config import ScriptBoardSettings, get_logger, get_settings
from scriptboard.exceptions import BlockIndexError, LLMProviderError
from scriptboard.llm.base import BaseLLMProvider
from scriptboard.llm.models import CompletionRequest
from scriptboard.parser import patterns
from scriptboard.parser.models import BlockKind
from scriptboard.parser.segmenter import (
    Block,
    BlockRef,
    segment,
    serialize,
)

logger = get_logger(__name__)

KEY_NOT_CONFIGURED = "key not configured"
EMPTY_RESPONSE = "empty response"
NO_CONTENT = "scene has no content"
IN_PROGRESS = "request already in progress"
BLOCK_CHANGED = "block changed during request"
BULK_KEY = "bulk"


class AIResult(BaseModel):
    """Outcome of a single AI action."""

    success: bool
    text: str = ""
    error: str | None = None
    block_index: int | None = None

    @classmethod
    def failure(cls, error: str) -> AIResult:
        """Build a failed result."""
        return cls(success=False, error=error)


class BulkSummaryResult(BaseModel):
    """Outcome of a bulk summary request."""

    success: bool
    applied: int = 0
    attempted: int = 0
    error: str | None = None


def _trailing_blank_lines(block: Block) -> list[str]:
    """Blank lines that separate ``block`` from whatever follows it."""
    body = block.lines[1:]
    count = 0
    for line in reversed(body):
        if line.strip():
            break
        count += 1
    return list(body[len(body) - count :])


class _RequestFailed(Exception):
    """Internal signal carrying a failure reason to the action boundary."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class AIService:
    """Runs AI actions against one script document."""

    def __init__(
        self,
        document: ScriptDocument,
        provider: BaseLLMProvider,
        settings: ScriptBoardSettings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            document: Script to read and update.
            provider: LLM provider used for every request.
            settings: Settings for model choice and context sizes.
        """
        self.document = document
        self.provider = provider
        self.settings = settings or get_settings()
        self._in_flight: set[str] = set()

    @property
    def model(self) -> str:
        """Model name sent with each request."""
        return self.settings.llm_model or self.provider.default_model

    def _blocks(self) -> list[Block]:
        return segment(self.document.read())

    def _target(self, blocks: Sequence[Block], index: int) -> Block:
        if index < 1 or index >= len(blocks):
            raise BlockIndexError(
                f"Block {index} does not exist",
                index=index,
                block_count=len(blocks),
            )
        return blocks[index]

    def _window(self, blocks: Sequence[Block], index: int) -> tuple[str, str]:
        count = self.settings.ai_context_blocks
        limit = self.settings.ai_context_char_limit
        return (
            context.context_before(blocks, index, count, limit),
            context.context_after(blocks, index, count, limit),
        )

    @asynccontextmanager
    async def _claim(self, key: str) -> AsyncIterator[None]:
        if key in self._in_flight:
            raise _RequestFailed(IN_PROGRESS)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)

    async def _require_provider(self) -> None:
        if not await self.provider.is_available():
            raise _RequestFailed(KEY_NOT_CONFIGURED)

    async def _ask(self, prompt: str) -> str:
        request = CompletionRequest.from_prompt(
            prompt, self.model, temperature=self.settings.llm_temperature
        )
        try:
            response = await self.provider.complete(request)
        except LLMProviderError as e:
            logger.warning("AI request failed", error=e.message)
            raise _RequestFailed(f"request failed: {e.message}") from e

        text = response.content.strip()
        if not text:
            raise _RequestFailed(EMPTY_RESPONSE)
        return text

    def _relocate(self, ref: BlockRef) -> tuple[list[Block], int]:
        blocks = self._blocks()
        index = ref.find(blocks)
        if index is None:
            raise _RequestFailed(BLOCK_CHANGED)
        return blocks, index

    def _content(self, block: Block) -> str:
        content = context.block_content(block)
        if len(content) <= self.settings.ai_min_content_length:
            raise _RequestFailed(NO_CONTENT)
        return content

    async def summarize_block(self, index: int) -> AIResult:
        """Write a one-sentence summary tag into the block at ``index``.

        Raises:
            BlockIndexError: If ``index`` does not name a scene or section.
        """
        blocks = self._blocks()
        block = self._target(blocks, index)
        ref = BlockRef.of(blocks, index)
        try:
            await self._require_provider()
            content = self._content(block)
            async with self._claim(ref.key):
                reply = await self._ask(prompts.summary_prompt(content))
                summary = prompts.clean_summary(reply)
                if not summary:
                    raise _RequestFailed(EMPTY_RESPONSE)
                blocks, current = self._relocate(ref)
        except _RequestFailed as failed:
            logger.info("AI summary not applied", index=index, reason=failed.reason)
            return AIResult.failure(failed.reason)

        self.document.write(serialize(set_block_summary(blocks, current, summary)))
        logger.info("AI summary applied", block_id=block.id, index=current)
        return AIResult(success=True, text=summary, block_index=current)

    async def summarize_all(self) -> BulkSummaryResult:
        """Summarize every scene that has no summary in one request.

        Replies are matched to blocks by the index in each ``BLOCK N:`` line.
        Lines naming a block that is not a scene are ignored.
        """
        blocks = self._blocks()
        requested = [block for block in blocks if context.needs_summary(block)]
        if not requested:
            return BulkSummaryResult(success=True)

        snapshot = context.fingerprint(blocks)
        transcript = context.build_transcript(blocks)
        try:
            await self._require_provider()
            async with self._claim(BULK_KEY):
                reply = await self._ask(prompts.bulk_summary_prompt(transcript))
                current = self._blocks()
                if context.fingerprint(current) != snapshot:
                    raise _RequestFailed(BLOCK_CHANGED)
        except _RequestFailed as failed:
            logger.info("Bulk summaries not applied", reason=failed.reason)
            return BulkSummaryResult(
                success=False, attempted=len(requested), error=failed.reason
            )

        applied = 0
        for block_index, summary in prompts.parse_bulk_response(reply):
            if block_index >= len(current):
                continue
            if current[block_index].kind is not BlockKind.SCENE:
                continue
            current = set_block_summary(current, block_index, summary)
            applied += 1

        if applied:
            self.document.write(serialize(current))
        logger.info(
            "Bulk summaries applied", applied=applied, attempted=len(requested)
        )
        return BulkSummaryResult(
            success=True, applied=applied, attempted=len(requested)
        )

    async def rewrite_block(self, index: int) -> AIResult:
        """Replace a block's body with an expanded rewrite and set its summary.

        Raises:
            BlockIndexError: If ``index`` does not name a scene or section.
        """
        blocks = self._blocks()
        block = self._target(blocks, index)
        ref = BlockRef.of(blocks, index)
        before, after = self._window(blocks, index)
        try:
            await self._require_provider()
            content = self._content(block)
            async with self._claim(ref.key):
                reply = await self._ask(prompts.rewrite_prompt(content, before, after))
                rewrite = prompts.parse_rewrite_response(reply)
                if not rewrite.content:
                    raise _RequestFailed(EMPTY_RESPONSE)
                current_blocks, current = self._relocate(ref)
        except _RequestFailed as failed:
            logger.info("AI rewrite not applied", index=index, reason=failed.reason)
            return AIResult.failure(failed.reason)

        target = current_blocks[current]
        body = rewrite.content.split("\n") + _trailing_blank_lines(target)
        updated = edit_block(
            current_blocks, current, target.lines[0], rewrite.summary, body
        )
        self.document.write(serialize(updated))
        logger.info("AI rewrite applied", block_id=block.id, index=current)
        return AIResult(success=True, text=rewrite.content, block_index=current)

    async def generate_scene(self, after: int) -> AIResult:
        """Insert a new scene bridging the blocks around slot ``after``.

        ``after`` may be 0 to generate the opening scene after the preamble.

        Raises:
            BlockIndexError: If ``after`` is not a block index.
        """
        blocks = self._blocks()
        if after < 0 or after >= len(blocks):
            raise BlockIndexError(
                f"Block {after} does not exist", index=after, block_count=len(blocks)
            )
        anchor = blocks[after]
        ref = BlockRef.of(blocks, after)
        count = self.settings.ai_context_blocks
        limit = self.settings.ai_context_char_limit
        before = context.context_before(blocks, after + 1, count, limit)
        following = context.context_after(blocks, after, count, limit)
        try:
            await self._require_provider()
            async with self._claim(ref.key):
                reply = await self._ask(prompts.generate_prompt(before, following))
                scene = prompts.parse_generated_scene(reply)
                if not scene.title and not scene.content:
                    raise _RequestFailed(EMPTY_RESPONSE)
                current_blocks, current = self._relocate(ref)
        except _RequestFailed as failed:
            logger.info("AI scene not generated", after=after, reason=failed.reason)
            return AIResult.failure(failed.reason)

        heading = scene.title or "EXT. "
        if not patterns.is_scene_heading(heading):
            heading = f"### {heading}"
        updated = insert_new_scene(current_blocks, current)
        updated = edit_block(
            updated, current + 1, heading, scene.summary, scene.content + "\n"
        )
        self.document.write(serialize(updated))
        logger.info("AI scene inserted", after=current, title=heading)
        return AIResult(success=True, text=heading, block_index=current + 1)

    async def brainstorm(self, index: int) -> AIResult:
        """Ask for questions about a block; the document is not changed.

        Raises:
            BlockIndexError: If ``index`` does not name a scene or section.
        """
        blocks = self._blocks()
        block = self._target(blocks, index)
        ref = BlockRef.of(blocks, index)
        before, after = self._window(blocks, index)
        try:
            await self._require_provider()
            content = self._content(block)
            async with self._claim(ref.key):
                reply = await self._ask(
                    prompts.brainstorm_prompt(content, before, after)
                )
        except _RequestFailed as failed:
            logger.info("AI brainstorm failed", index=index, reason=failed.reason)
            return AIResult.failure(failed.reason)
        return AIResult(success=True, text=reply, block_index=index)
