"""Tests for whole-document reads and writes."""

import pytest

from scriptboard.board import (
    BoardDocument,
    ScriptDocument,
    delete_block,
    recolor_block,
)
from scriptboard.exceptions import ScriptBoardFileNotFoundError


def test_missing_file(tmp_path):
    with pytest.raises(ScriptBoardFileNotFoundError) as exc:
        ScriptDocument(tmp_path / "missing.md").read()
    assert "missing.md" in exc.value.message
    assert exc.value.hint


def test_crlf_survives_rewrite(tmp_path):
    path = tmp_path / "crlf.md"
    path.write_bytes(b"Intro\r\nINT. A\r\nOne.\r\nINT. B\r\nTwo.\r\n")
    BoardDocument(path).apply(delete_block, 1)
    assert path.read_bytes() == b"Intro\r\nINT. B\r\nTwo.\r\n"


def test_name(tmp_path):
    assert ScriptDocument(tmp_path / "heist.md").name == "heist"


def test_apply_writes_and_returns_blocks(script_file):
    board = BoardDocument(str(script_file))
    blocks = board.apply(recolor_block, 3, "yellow")
    assert blocks[3].color.value == "yellow"
    assert "%%color: yellow%%" in script_file.read_text(encoding="utf-8")
    assert board.blocks()[3].color.value == "yellow"


def test_accepts_script_document(script_file):
    document = ScriptDocument(script_file)
    assert BoardDocument(document).document is document
