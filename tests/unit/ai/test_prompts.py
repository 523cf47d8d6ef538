"""Tests for AI prompt templates and reply parsing."""

import pytest

from scriptboard.ai.prompts import (
    LANGUAGE_RULE,
    SUMMARY_REQUEST_MARKER,
    brainstorm_prompt,
    bulk_summary_prompt,
    clean_summary,
    generate_prompt,
    parse_bulk_response,
    parse_generated_scene,
    parse_labeled_fields,
    parse_rewrite_response,
    rewrite_prompt,
    summary_prompt,
)


class TestPromptTemplates:
    def test_summary_prompt_embeds_content(self):
        prompt = summary_prompt("The door swings open.")
        assert prompt.endswith("Scene Content:\nThe door swings open.")
        assert LANGUAGE_RULE in prompt

    def test_bulk_prompt_explains_marker_and_format(self):
        prompt = bulk_summary_prompt("[BLOCK 1] INT. A")
        assert SUMMARY_REQUEST_MARKER in prompt
        assert "BLOCK X: Summary text" in prompt
        assert prompt.endswith("[BLOCK 1] INT. A")

    def test_rewrite_prompt_orders_context(self):
        prompt = rewrite_prompt("MIDDLE_TEXT", "BEFORE_TEXT", "AFTER_TEXT")
        assert (
            prompt.index("BEFORE_TEXT")
            < prompt.index("MIDDLE_TEXT")
            < prompt.index("AFTER_TEXT")
        )
        assert "SUMMARY:" in prompt
        assert "CONTENT:" in prompt

    def test_generate_prompt_asks_for_title(self):
        prompt = generate_prompt("before", "after")
        assert "TITLE:" in prompt
        assert "Context Before:\nbefore" in prompt
        assert "Context After:\nafter" in prompt

    def test_brainstorm_prompt_forbids_suggestions(self):
        prompt = brainstorm_prompt("middle", "before", "after")
        assert "Do NOT provide any plot suggestions" in prompt
        assert "Current Scene Content:\nmiddle" in prompt


class TestCleanSummary:
    @pytest.mark.parametrize(
        ("reply", "expected"),
        [
            ("The crew cases the bank.", "The crew cases the bank."),
            ("Summary: The crew cases the bank.", "The crew cases the bank."),
            ("summary:   [The crew cases the bank.]", "The crew cases the bank."),
            ("  Line one\n  line two  ", "Line one line two"),
            ("[]", ""),
            ("", ""),
        ],
    )
    def test_clean(self, reply, expected):
        assert clean_summary(reply) == expected


class TestBulkResponse:
    def test_pairs_in_reply_order(self):
        reply = (
            "Here are your summaries:\n"
            "BLOCK 3: The vault opens.\n"
            "block 5: Summary: They flee.\n"
            "BLOCK 7:   \n"
            "- BLOCK 2: [The crew waits.]"
        )
        assert parse_bulk_response(reply) == [
            (3, "The vault opens."),
            (5, "They flee."),
            (2, "The crew waits."),
        ]

    def test_no_matches(self):
        assert parse_bulk_response("I cannot help with that.") == []


class TestLabeledFields:
    def test_fields_run_until_next_label(self):
        reply = "SUMMARY: One line.\nCONTENT:\nJOHN\nHello.\n\n"
        assert parse_labeled_fields(reply) == {
            "SUMMARY": "One line.",
            "CONTENT": "JOHN\nHello.",
        }

    def test_first_label_wins(self):
        fields = parse_labeled_fields("TITLE: First\nTITLE: Second")
        assert fields["TITLE"] == "First"

    def test_lowercase_labels_are_text(self):
        assert parse_labeled_fields("summary: nope") == {}

    def test_rewrite_response(self):
        result = parse_rewrite_response(
            "SUMMARY: [The vault yields.]\nCONTENT:\nJOHN\nJackpot."
        )
        assert result.summary == "The vault yields."
        assert result.content == "JOHN\nJackpot."

    def test_rewrite_response_without_labels(self):
        result = parse_rewrite_response("Just some prose.")
        assert result.summary == ""
        assert result.content == ""

    def test_generated_scene(self):
        scene = parse_generated_scene(
            "TITLE:  INT.  GARAGE - NIGHT\n"
            "SUMMARY: They load the van.\n"
            "CONTENT:\n"
            "Engines idle."
        )
        assert scene.title == "INT. GARAGE - NIGHT"
        assert scene.summary == "They load the van."
        assert scene.content == "Engines idle."
