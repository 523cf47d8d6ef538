"""Tests for the AI collaborator service."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from scriptboard.ai.service import (
    BLOCK_CHANGED,
    EMPTY_RESPONSE,
    IN_PROGRESS,
    KEY_NOT_CONFIGURED,
    NO_CONTENT,
    AIService,
)
from scriptboard.board import BoardDocument, ScriptDocument
from scriptboard.board.operations import delete_block, edit_block, recolor_block
from scriptboard.config import ScriptBoardSettings
from scriptboard.exceptions import BlockIndexError, LLMProviderError
from scriptboard.llm.base import BaseLLMProvider
from scriptboard.llm.models import CompletionResponse, LLMProvider
from scriptboard.parser.models import BlockColor, BlockKind
from scriptboard.parser.segmenter import segment


def completion(text: str) -> CompletionResponse:
    """Build a provider reply carrying ``text``."""
    return CompletionResponse(
        id="reply-1",
        model="test-model",
        choices=[
            {
                "index": 0,
                "message": {"role": "assistant", "content": text},
                "finish_reason": "stop",
            }
        ],
        provider=LLMProvider.GEMINI,
    )


def make_provider(reply: str = "", available: bool = True) -> MagicMock:
    """Create a mock provider returning ``reply`` for every request."""
    provider = MagicMock(spec=BaseLLMProvider)
    provider.default_model = "test-model"
    provider.is_available = AsyncMock(return_value=available)
    provider.complete = AsyncMock(return_value=completion(reply))
    return provider


def sent_prompt(provider: MagicMock) -> str:
    request = provider.complete.await_args.args[0]
    return request.messages[0]["content"]


@pytest.fixture
def document(script_file):
    return ScriptDocument(script_file)


def blocks_of(document: ScriptDocument):
    return segment(document.read())


class TestSummarizeBlock:
    @pytest.mark.asyncio
    async def test_writes_summary_tag(self, document):
        provider = make_provider("Summary: The vault opens without a fight.")
        service = AIService(document, provider)

        result = await service.summarize_block(3)

        assert result.success is True
        assert result.text == "The vault opens without a fight."
        assert result.block_index == 3
        block = blocks_of(document)[3]
        assert block.lines[1] == "%%summary: The vault opens without a fight.%%"
        assert block.summary == "The vault opens without a fight."
        assert "The door swings open." in sent_prompt(provider)

    @pytest.mark.asyncio
    async def test_uses_provider_default_model(self, document):
        provider = make_provider("A summary.")
        await AIService(document, provider).summarize_block(3)
        assert provider.complete.await_args.args[0].model == "test-model"

    @pytest.mark.asyncio
    async def test_configured_model_wins(self, document):
        provider = make_provider("A summary.")
        settings = ScriptBoardSettings(_env_file=None, llm_model="custom-model")
        await AIService(document, provider, settings).summarize_block(3)
        assert provider.complete.await_args.args[0].model == "custom-model"

    @pytest.mark.asyncio
    async def test_replaces_existing_summary(self, document):
        provider = make_provider("The crew splits up.")
        result = await AIService(document, provider).summarize_block(2)
        assert result.success is True
        block = blocks_of(document)[2]
        assert block.summary == "The crew splits up."
        assert block.color is BlockColor.RED
        assert document.read().count("%%summary:") == 1

    @pytest.mark.asyncio
    async def test_key_not_configured(self, document):
        original = document.read()
        provider = make_provider("unused", available=False)

        result = await AIService(document, provider).summarize_block(3)

        assert result.success is False
        assert result.error == KEY_NOT_CONFIGURED
        provider.complete.assert_not_awaited()
        assert document.read() == original

    @pytest.mark.asyncio
    async def test_short_scene_has_no_content(self, tmp_path):
        document = ScriptDocument(tmp_path / "short.md")
        document.write("INT. CLOSET - DAY\n\nDark.\n")
        provider = make_provider("unused")

        result = await AIService(document, provider).summarize_block(1)

        assert result.error == NO_CONTENT
        provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_key_checked_before_content(self, tmp_path):
        document = ScriptDocument(tmp_path / "short.md")
        document.write("INT. CLOSET - DAY\n\nDark.\n")
        result = await AIService(
            document, make_provider(available=False)
        ).summarize_block(1)
        assert result.error == KEY_NOT_CONFIGURED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["", "   \n ", "Summary: []"])
    async def test_empty_response(self, document, reply):
        original = document.read()
        result = await AIService(document, make_provider(reply)).summarize_block(3)
        assert result.error == EMPTY_RESPONSE
        assert document.read() == original

    @pytest.mark.asyncio
    async def test_provider_error_is_reported(self, document):
        original = document.read()
        provider = make_provider()
        provider.complete.side_effect = LLMProviderError("Gemini API error 500")

        result = await AIService(document, provider).summarize_block(3)

        assert result.success is False
        assert result.error.startswith("request failed")
        assert "Gemini API error 500" in result.error
        assert document.read() == original

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [0, 6, -1])
    async def test_invalid_index(self, document, index):
        with pytest.raises(BlockIndexError):
            await AIService(document, make_provider("x")).summarize_block(index)

    @pytest.mark.asyncio
    async def test_block_edited_during_request(self, document):
        board = BoardDocument(document)

        async def edit_then_reply(request):
            board.apply(edit_block, 3, "INT. VAULT - CONTINUOUS", "", "Empty shelves.")
            return completion("Too late.")

        provider = make_provider()
        provider.complete.side_effect = edit_then_reply
        result = await AIService(document, provider).summarize_block(3)

        assert result.success is False
        assert result.error == BLOCK_CHANGED
        block = blocks_of(document)[3]
        assert block.summary is None
        assert block.body == ["Empty shelves."]

    @pytest.mark.asyncio
    async def test_other_edits_during_request_are_kept(self, document):
        board = BoardDocument(document)

        async def edit_then_reply(request):
            board.apply(recolor_block, 5, "blue")
            board.apply(delete_block, 2)
            return completion("The vault opens.")

        provider = make_provider()
        provider.complete.side_effect = edit_then_reply
        result = await AIService(document, provider).summarize_block(3)

        assert result.success is True
        assert result.block_index == 2
        blocks = blocks_of(document)
        assert blocks[2].title == "INT. VAULT - CONTINUOUS"
        assert blocks[2].summary == "The vault opens."
        assert blocks[4].color is BlockColor.BLUE

    @pytest.mark.asyncio
    async def test_second_request_for_same_block_is_refused(self, document):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_reply(request):
            started.set()
            await release.wait()
            return completion("The vault opens.")

        provider = make_provider()
        provider.complete.side_effect = slow_reply
        service = AIService(document, provider)

        first = asyncio.create_task(service.summarize_block(3))
        await started.wait()
        second = await service.summarize_block(3)
        release.set()
        first_result = await first

        assert second.error == IN_PROGRESS
        assert first_result.success is True
        assert provider.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_block_released_after_failure(self, document):
        provider = make_provider()
        provider.complete.side_effect = [
            LLMProviderError("timeout"),
            completion("The vault opens."),
        ]
        service = AIService(document, provider)

        assert (await service.summarize_block(3)).success is False
        assert (await service.summarize_block(3)).success is True

    @pytest.mark.asyncio
    async def test_second_of_two_identical_scenes(self, tmp_path):
        document = ScriptDocument(tmp_path / "twins.md")
        scene = "EXT. PARK - DAY\nThey stand apart, arguing about the map.\n\n"
        document.write(scene + scene + "EXT. END\n")

        result = await AIService(
            document, make_provider("They argue.")
        ).summarize_block(2)

        assert result.success is True
        assert result.block_index == 2
        blocks = blocks_of(document)
        assert blocks[1].summary is None
        assert blocks[2].summary == "They argue."

    @pytest.mark.asyncio
    async def test_identical_scenes_summarized_together(self, tmp_path):
        document = ScriptDocument(tmp_path / "twins.md")
        scene = "EXT. PARK - DAY\nThey stand apart, arguing about the map.\n\n"
        document.write(scene + scene + "EXT. END\n")
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_reply(request):
            started.set()
            await release.wait()
            return completion("They argue.")

        provider = make_provider()
        provider.complete.side_effect = slow_reply
        service = AIService(document, provider)

        first = asyncio.create_task(service.summarize_block(1))
        await started.wait()
        second = asyncio.create_task(service.summarize_block(2))
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(first, second)

        assert [r.success for r in results] == [True, True]
        assert [b.summary for b in blocks_of(document)[1:3]] == [
            "They argue.",
            "They argue.",
        ]


class TestSummarizeAll:
    @pytest.mark.asyncio
    async def test_applies_replies_by_position(self, document):
        provider = make_provider(
            "BLOCK 3: The vault opens.\n"
            "BLOCK 5: They flee.\n"
            "BLOCK 4: Not a scene.\n"
            "BLOCK 99: Out of range."
        )

        result = await AIService(document, provider).summarize_all()

        assert result.success is True
        assert result.attempted == 2
        assert result.applied == 2
        blocks = blocks_of(document)
        assert blocks[2].summary == "The crew cases the bank."
        assert blocks[3].summary == "The vault opens."
        assert blocks[4].kind is BlockKind.SECTION
        assert "Not a scene" not in document.read()
        assert blocks[5].summary == "They flee."
        assert blocks[5].notes == ["needs a chase"]

    @pytest.mark.asyncio
    async def test_partial_reply_updates_only_named_block(self, document):
        provider = make_provider("BLOCK 3: The vault opens.")

        result = await AIService(document, provider).summarize_all()

        assert result.applied == 1
        assert result.attempted == 2
        blocks = blocks_of(document)
        assert blocks[3].summary == "The vault opens."
        assert blocks[5].summary is None

    @pytest.mark.asyncio
    async def test_transcript_marks_requested_blocks(self, document):
        provider = make_provider("BLOCK 3: The vault opens.")
        await AIService(document, provider).summarize_all()
        prompt = sent_prompt(provider)
        assert "[BLOCK 3] INT. VAULT - CONTINUOUS" in prompt
        assert prompt.count("(REQUEST_SUMMARY_FOR_THIS_BLOCK)") == 3

    @pytest.mark.asyncio
    async def test_nothing_to_summarize(self, tmp_path):
        document = ScriptDocument(tmp_path / "done.md")
        document.write("INT. A\n%%summary: Done.%%\nText.\n")
        provider = make_provider("unused")

        result = await AIService(document, provider).summarize_all()

        assert result.success is True
        assert result.attempted == 0
        provider.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_key_not_configured(self, document):
        result = await AIService(
            document, make_provider(available=False)
        ).summarize_all()
        assert result.success is False
        assert result.error == KEY_NOT_CONFIGURED
        assert result.attempted == 2

    @pytest.mark.asyncio
    async def test_document_changed_during_request(self, document):
        board = BoardDocument(document)

        async def edit_then_reply(request):
            board.apply(recolor_block, 1, "green")
            return completion("BLOCK 3: The vault opens.")

        provider = make_provider()
        provider.complete.side_effect = edit_then_reply
        result = await AIService(document, provider).summarize_all()

        assert result.success is False
        assert result.error == BLOCK_CHANGED
        assert blocks_of(document)[3].summary is None

    @pytest.mark.asyncio
    async def test_unparseable_reply_applies_nothing(self, document):
        original = document.read()
        result = await AIService(
            document, make_provider("I could not read that.")
        ).summarize_all()
        assert result.success is True
        assert result.applied == 0
        assert document.read() == original


class TestRewriteBlock:
    @pytest.mark.asyncio
    async def test_replaces_body_and_summary(self, document):
        provider = make_provider(
            "SUMMARY: The vault yields.\nCONTENT:\nJOHN\nJackpot.\n"
        )

        result = await AIService(document, provider).rewrite_block(3)

        assert result.success is True
        assert result.text == "JOHN\nJackpot."
        block = blocks_of(document)[3]
        assert block.lines[0] == "INT. VAULT - CONTINUOUS"
        assert block.summary == "The vault yields."
        assert block.body == ["JOHN", "Jackpot.", ""]

    @pytest.mark.asyncio
    async def test_sends_surrounding_context(self, document):
        provider = make_provider("SUMMARY: S.\nCONTENT:\nText.")
        await AIService(document, provider).rewrite_block(3)
        prompt = sent_prompt(provider)
        assert "Rain hammers the empty street." in prompt
        assert "Tires squeal" in prompt

    @pytest.mark.asyncio
    async def test_keeps_color(self, document):
        provider = make_provider("SUMMARY: New beat.\nCONTENT:\nNew text.")
        await AIService(document, provider).rewrite_block(2)
        block = blocks_of(document)[2]
        assert block.color is BlockColor.RED
        assert block.summary == "New beat."

    @pytest.mark.asyncio
    async def test_keeps_blank_line_before_next_scene(self, tmp_path):
        document = ScriptDocument(tmp_path / "rough.md")
        document.write(
            "EXT. A\nSome rough notes that are long enough.\n\nEXT. B\nMore.\n"
        )
        provider = make_provider("SUMMARY: s.\nCONTENT:\nNew action line.\n")

        result = await AIService(document, provider).rewrite_block(1)

        assert result.success is True
        assert document.read() == (
            "EXT. A\n%%summary: s.%%\nNew action line.\n\nEXT. B\nMore.\n"
        )

    @pytest.mark.asyncio
    async def test_reply_without_content(self, document):
        original = document.read()
        result = await AIService(
            document, make_provider("SUMMARY: Only a summary.")
        ).rewrite_block(3)
        assert result.error == EMPTY_RESPONSE
        assert document.read() == original


class TestGenerateScene:
    @pytest.mark.asyncio
    async def test_inserts_scene_after_anchor(self, document):
        provider = make_provider(
            "TITLE: INT. GARAGE - NIGHT\n"
            "SUMMARY: They load the van.\n"
            "CONTENT:\n"
            "Engines idle."
        )

        result = await AIService(document, provider).generate_scene(3)

        assert result.success is True
        assert result.text == "INT. GARAGE - NIGHT"
        assert result.block_index == 4
        blocks = blocks_of(document)
        assert len(blocks) == 7
        assert blocks[4].title == "INT. GARAGE - NIGHT"
        assert blocks[4].summary == "They load the van."
        assert blocks[4].body == ["Engines idle.", ""]
        assert blocks[5].title == "Act Two"

    @pytest.mark.asyncio
    async def test_title_that_is_not_a_heading(self, document):
        provider = make_provider("TITLE: The Garage\nCONTENT:\nEngines idle.")
        result = await AIService(document, provider).generate_scene(3)
        block = blocks_of(document)[4]
        assert result.text == "### The Garage"
        assert block.kind is BlockKind.SCENE
        assert block.lines[0] == "### The Garage"

    @pytest.mark.asyncio
    async def test_opening_scene(self, document):
        provider = make_provider("TITLE: EXT. CITY - DAWN\nCONTENT:\nSirens.")
        result = await AIService(document, provider).generate_scene(0)
        blocks = blocks_of(document)
        assert result.block_index == 1
        assert blocks[1].title == "EXT. CITY - DAWN"
        assert blocks[2].title == "Act One"

    @pytest.mark.asyncio
    async def test_unlabeled_reply(self, document):
        result = await AIService(
            document, make_provider("Nothing useful.")
        ).generate_scene(3)
        assert result.error == EMPTY_RESPONSE
        assert len(blocks_of(document)) == 6

    @pytest.mark.asyncio
    @pytest.mark.parametrize("after", [-1, 6])
    async def test_invalid_anchor(self, document, after):
        with pytest.raises(BlockIndexError):
            await AIService(document, make_provider("x")).generate_scene(after)


class TestBrainstorm:
    @pytest.mark.asyncio
    async def test_returns_questions_without_writing(self, document):
        original = document.read()
        provider = make_provider("What does John want from the vault?")

        result = await AIService(document, provider).brainstorm(3)

        assert result.success is True
        assert result.text == "What does John want from the vault?"
        assert result.block_index == 3
        assert document.read() == original

    @pytest.mark.asyncio
    async def test_short_scene(self, tmp_path):
        document = ScriptDocument(tmp_path / "short.md")
        document.write("INT. CLOSET - DAY\nDark.\n")
        result = await AIService(document, make_provider("x")).brainstorm(1)
        assert result.error == NO_CONTENT
