"""Tests for the storyboard block commands."""

import pytest
from typer.testing import CliRunner

from scriptboard.cli.main import app
from scriptboard.parser.models import BlockColor, BlockKind
from scriptboard.parser.segmenter import segment
from tests.cli_fixtures import json_payload, output_text

runner = CliRunner()


def titles(path):
    return [block.title for block in segment(path.read_text(encoding="utf-8"))]


def blocks(path):
    return segment(path.read_text(encoding="utf-8"))


class TestMove:
    def test_move_up(self, script_file):
        result = runner.invoke(
            app, ["scene", "move", str(script_file), "5", "2", "--json"]
        )
        assert result.exit_code == 0
        payload = json_payload(result)
        assert payload["message"] == "Moved block 5 to position 2"
        assert payload["data"]["title"] == ".THE GETAWAY"
        assert titles(script_file)[1:4] == [
            "Act One",
            ".THE GETAWAY",
            "EXT. BANK - NIGHT",
        ]

    def test_move_down_counts_slot_before_removal(self, script_file):
        result = runner.invoke(app, ["scene", "move", str(script_file), "2", "5"])
        assert result.exit_code == 0
        assert "Moved block 2 to position 4" in output_text(result)
        assert titles(script_file)[1:] == [
            "Act One",
            "INT. VAULT - CONTINUOUS",
            "Act Two",
            "EXT. BANK - NIGHT",
            ".THE GETAWAY",
        ]

    def test_preamble_is_fixed(self, script_file):
        original = script_file.read_text(encoding="utf-8")
        result = runner.invoke(app, ["scene", "move", str(script_file), "0", "3"])
        assert result.exit_code == 1
        assert "Validation Error" in output_text(result)
        assert script_file.read_text(encoding="utf-8") == original

    def test_out_of_range_json(self, script_file):
        result = runner.invoke(
            app, ["scene", "move", str(script_file), "9", "1", "--json"]
        )
        assert result.exit_code == 1
        assert '"success": false' in output_text(result)


class TestColor:
    def test_set_color(self, script_file):
        result = runner.invoke(app, ["scene", "color", str(script_file), "3", "blue"])
        assert result.exit_code == 0
        assert "Colored block 3 blue" in output_text(result)
        assert blocks(script_file)[3].color is BlockColor.BLUE

    def test_clear_color(self, script_file):
        result = runner.invoke(app, ["scene", "color", str(script_file), "2", "none"])
        assert result.exit_code == 0
        assert blocks(script_file)[2].color is BlockColor.NONE
        assert "%%color" not in script_file.read_text(encoding="utf-8")

    def test_unknown_color(self, script_file):
        result = runner.invoke(app, ["scene", "color", str(script_file), "3", "pink"])
        assert result.exit_code == 2


class TestSummary:
    def test_set_summary(self, script_file):
        result = runner.invoke(
            app, ["scene", "summary", str(script_file), "3", "The vault opens."]
        )
        assert result.exit_code == 0
        assert "Updated summary of block 3" in output_text(result)
        assert blocks(script_file)[3].summary == "The vault opens."

    def test_remove_summary(self, script_file):
        result = runner.invoke(app, ["scene", "summary", str(script_file), "2"])
        assert result.exit_code == 0
        assert "Removed summary of block 2" in output_text(result)
        assert blocks(script_file)[2].summary is None


class TestDuplicate:
    def test_duplicate(self, script_file):
        result = runner.invoke(
            app, ["scene", "duplicate", str(script_file), "3", "--json"]
        )
        assert result.exit_code == 0
        data = json_payload(result)["data"]
        assert data == {
            "index": 4,
            "id": "block-6",
            "kind": "scene",
            "title": "INT. VAULT - CONTINUOUS",
            "blocks": 7,
        }
        assert titles(script_file)[3] == titles(script_file)[4]


class TestDelete:
    def test_requires_confirmation(self, script_file):
        original = script_file.read_text(encoding="utf-8")
        result = runner.invoke(app, ["scene", "delete", str(script_file), "3"])
        assert result.exit_code == 0
        assert "requires confirmation" in output_text(result)
        assert script_file.read_text(encoding="utf-8") == original

    def test_requires_confirmation_json(self, script_file):
        result = runner.invoke(
            app, ["scene", "delete", str(script_file), "3", "--json"]
        )
        assert result.exit_code == 1
        assert "--confirm" in output_text(result)

    def test_delete(self, script_file):
        result = runner.invoke(
            app, ["scene", "delete", str(script_file), "3", "--confirm"]
        )
        assert result.exit_code == 0
        assert "INT. VAULT - CONTINUOUS" not in titles(script_file)
        assert len(titles(script_file)) == 5


class TestAdd:
    def test_add_after_preamble(self, script_file):
        result = runner.invoke(app, ["scene", "add", str(script_file), "--json"])
        assert result.exit_code == 0
        data = json_payload(result)["data"]
        assert data["index"] == 1
        assert data["kind"] == "scene"
        assert blocks(script_file)[1].lines[0] == "EXT. "

    def test_add_after_block(self, script_file):
        result = runner.invoke(app, ["scene", "add", str(script_file), "3"])
        assert result.exit_code == 0
        assert "Added a scene after block 3" in output_text(result)
        assert blocks(script_file)[4].kind is BlockKind.SCENE


class TestEdit:
    def test_edit(self, script_file):
        result = runner.invoke(
            app,
            [
                "scene",
                "edit",
                str(script_file),
                "2",
                "--heading",
                "EXT. BANK - DAWN",
                "-s",
                "They give up.",
                "-b",
                "Sunrise.\nNobody speaks.",
            ],
        )
        assert result.exit_code == 0
        block = blocks(script_file)[2]
        assert block.title == "EXT. BANK - DAWN"
        assert block.summary == "They give up."
        assert block.color is BlockColor.RED
        assert block.body == ["Sunrise.", "Nobody speaks."]

    def test_edit_turns_scene_into_section(self, script_file):
        result = runner.invoke(
            app, ["scene", "edit", str(script_file), "3", "--heading", "## Interlude"]
        )
        assert result.exit_code == 0
        assert blocks(script_file)[3].kind is BlockKind.SECTION

    def test_body_file(self, script_file, tmp_path):
        body = tmp_path / "body.txt"
        body.write_text("From a file.\n", encoding="utf-8")
        result = runner.invoke(
            app,
            [
                "scene",
                "edit",
                str(script_file),
                "3",
                "--heading",
                "INT. VAULT - LATER",
                "--body-file",
                str(body),
            ],
        )
        assert result.exit_code == 0
        assert blocks(script_file)[3].body == ["From a file.", ""]

    def test_missing_body_file(self, script_file, tmp_path):
        result = runner.invoke(
            app,
            [
                "scene",
                "edit",
                str(script_file),
                "3",
                "--heading",
                "INT. VAULT",
                "--body-file",
                str(tmp_path / "missing.txt"),
            ],
        )
        assert result.exit_code == 1

    @pytest.mark.parametrize("heading", ["Just prose", "# Title"])
    def test_rejects_non_heading(self, script_file, heading):
        result = runner.invoke(
            app, ["scene", "edit", str(script_file), "3", "--heading", heading]
        )
        assert result.exit_code == 1
        assert "not a scene or section heading" in output_text(result)

    def test_heading_required(self, script_file):
        result = runner.invoke(app, ["scene", "edit", str(script_file), "3"])
        assert result.exit_code == 2
