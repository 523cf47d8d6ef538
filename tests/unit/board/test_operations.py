"""Tests for block mutation operations."""

import pytest

from scriptboard.board.operations import (
    NEW_SCENE_LINES,
    delete_block,
    duplicate_block,
    edit_block,
    insert_new_scene,
    move_block,
    normalize_color,
    recolor_block,
    set_block_summary,
)
from scriptboard.exceptions import BlockIndexError, ValidationError
from scriptboard.parser import BlockColor, BlockKind, segment, serialize

DOC = "Intro\nINT. A\nOne.\nINT. B\nTwo.\nINT. C\nThree."


@pytest.fixture
def blocks():
    return segment(DOC)


def titles(blocks):
    return [block.title for block in blocks[1:]]


class TestMove:
    """Reordering blocks."""

    def test_move_down_lands_before_target_slot(self, blocks):
        moved = move_block(blocks, 1, 3)
        assert titles(moved) == ["INT. B", "INT. A", "INT. C"]

    def test_move_to_end(self, blocks):
        moved = move_block(blocks, 1, 4)
        assert titles(moved) == ["INT. B", "INT. C", "INT. A"]

    def test_move_up(self, blocks):
        moved = move_block(blocks, 3, 1)
        assert titles(moved) == ["INT. C", "INT. A", "INT. B"]

    def test_move_onto_itself_is_a_no_op(self, blocks):
        assert serialize(move_block(blocks, 2, 2)) == DOC
        assert serialize(move_block(blocks, 2, 3)) == DOC

    def test_move_keeps_every_line(self, blocks):
        moved = move_block(blocks, 1, 4)
        assert sorted(serialize(moved).split("\n")) == sorted(DOC.split("\n"))
        assert moved[0].lines == ("Intro",)

    def test_preamble_cannot_move(self, blocks):
        with pytest.raises(BlockIndexError):
            move_block(blocks, 0, 2)

    @pytest.mark.parametrize("target", [0, 5, -1])
    def test_target_out_of_range(self, blocks, target):
        with pytest.raises(BlockIndexError):
            move_block(blocks, 1, target)

    def test_origin_lines_are_recomputed(self, blocks):
        moved = move_block(blocks, 3, 1)
        assert [block.origin_line for block in moved] == [0, 1, 3, 5]


class TestRecolor:
    """Color tag replacement."""

    def test_adds_one_tag_after_heading(self, blocks):
        result = recolor_block(blocks, 2, "green")
        assert result[2].lines == ("INT. B", "%%color: green%%", "Two.")
        assert result[2].color is BlockColor.GREEN

    def test_replaces_existing_tag(self):
        blocks = segment("INT. A\nText\n%%color: red%%")
        result = recolor_block(blocks, 1, BlockColor.BLUE)
        assert result[1].lines == ("INT. A", "%%color: blue%%", "Text")

    def test_none_removes_tag_line(self):
        blocks = segment("INT. A\n%%color: red%%\nText")
        result = recolor_block(blocks, 1, "none")
        assert result[1].lines == ("INT. A", "Text")
        assert result[1].color is BlockColor.NONE

    def test_cjk_none(self):
        blocks = segment("INT. A\n%%color: red%%\nText")
        assert recolor_block(blocks, 1, "无")[1].lines == ("INT. A", "Text")

    def test_other_blocks_untouched(self, blocks):
        result = recolor_block(blocks, 2, "red")
        assert result[1].lines == blocks[1].lines
        assert result[3].lines == blocks[3].lines

    def test_unknown_color(self, blocks):
        with pytest.raises(ValidationError):
            recolor_block(blocks, 1, "orange")

    def test_crlf_document_keeps_line_endings(self):
        blocks = segment("INT. A\r\nText\r\n")
        result = recolor_block(blocks, 1, "blue")
        assert result[1].lines == ("INT. A\r", "%%color: blue%%\r", "Text\r", "")
        assert result[1].color is BlockColor.BLUE

    def test_normalize_color(self):
        assert normalize_color(" Purple ") is BlockColor.PURPLE
        assert normalize_color(BlockColor.RED) is BlockColor.RED


class TestSummary:
    """Summary tag replacement."""

    def test_inserts_after_heading(self, blocks):
        result = set_block_summary(blocks, 1, "A opens.")
        assert result[1].lines == ("INT. A", "%%summary: A opens.%%", "One.")
        assert result[1].summary == "A opens."

    def test_collapses_to_one_line(self, blocks):
        result = set_block_summary(blocks, 1, "  First\nsecond  ")
        assert result[1].summary == "First second"

    def test_replaces_and_keeps_color(self):
        blocks = segment("INT. A\n%%color: red%%\n%%summary: old%%\nText")
        result = set_block_summary(blocks, 1, "new")
        assert result[1].lines == (
            "INT. A",
            "%%summary: new%%",
            "%%color: red%%",
            "Text",
        )

    def test_crlf_document_keeps_line_endings(self):
        blocks = segment("INT. A\r\nText\r\n")
        result = set_block_summary(blocks, 1, "A opens.")
        assert serialize(result) == "INT. A\r\n%%summary: A opens.%%\r\nText\r\n"
        assert result[1].summary == "A opens."

    def test_empty_summary_removes_tag(self):
        blocks = segment("INT. A\n%%summary: old%%\nText")
        assert set_block_summary(blocks, 1, "  ")[1].lines == ("INT. A", "Text")


class TestDuplicateDeleteInsert:
    """Block copies, removals and new scenes."""

    def test_duplicate(self, blocks):
        result = duplicate_block(blocks, 2)
        assert titles(result) == ["INT. A", "INT. B", "INT. B", "INT. C"]
        assert result[3].lines == result[2].lines
        assert result[3].id == "block-4"
        assert result[3].origin_line == result[2].origin_line + 2

    def test_delete(self, blocks):
        result = delete_block(blocks, 2)
        assert serialize(result) == "Intro\nINT. A\nOne.\nINT. C\nThree."

    def test_delete_preamble_is_rejected(self, blocks):
        with pytest.raises(BlockIndexError):
            delete_block(blocks, 0)

    def test_delete_out_of_range(self, blocks):
        with pytest.raises(BlockIndexError) as exc:
            delete_block(blocks, 9)
        assert exc.value.block_count == 4

    def test_insert_after_preamble(self, blocks):
        result = insert_new_scene(blocks, 0)
        assert result[1].lines == NEW_SCENE_LINES
        assert result[1].kind is BlockKind.SCENE
        assert serialize(result).startswith("Intro\nEXT. \n\nINT. A")

    def test_insert_after_last(self, blocks):
        result = insert_new_scene(blocks, 3)
        assert serialize(result) == DOC + "\nEXT. \n"

    def test_insert_out_of_range(self, blocks):
        with pytest.raises(BlockIndexError):
            insert_new_scene(blocks, 4)


class TestEdit:
    """Rebuilding a block from heading, summary and body."""

    def test_layout_keeps_color(self):
        blocks = segment("INT. A\n%%color: blue%%\n%%summary: old%%\nOld body")
        result = edit_block(blocks, 1, "EXT. B", "New beat.", "New body")
        assert result[1].lines == (
            "EXT. B",
            "%%summary: New beat.%%",
            "%%color: blue%%",
            "New body",
        )
        assert result[1].title == "EXT. B"
        assert result[1].id == blocks[1].id

    def test_scene_can_become_section(self, blocks):
        result = edit_block(blocks, 1, "## Act One", body=["Notes"])
        assert result[1].kind is BlockKind.SECTION
        assert result[1].title == "Act One"

    def test_rejects_plain_heading(self, blocks):
        with pytest.raises(ValidationError):
            edit_block(blocks, 1, "Just words")
