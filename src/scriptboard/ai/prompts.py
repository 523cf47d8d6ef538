"""Prompt templates and response parsing for the AI collaborator."""

from __future__ import annotations

import re

from pydantic import BaseModel

LANGUAGE_RULE = (
    "Detect the language of the input content and respond in the EXACT SAME "
    "language and script (e.g., if input is Traditional Chinese, respond in "
    "Traditional Chinese; if English, respond in English)."
)
PLAIN_TEXT_RULE = (
    "Return PLAIN TEXT ONLY. Do NOT use HTML tags (e.g., <b>, <i>) or "
    "Markdown bolding (**)."
)

SUMMARY_REQUEST_MARKER = "(REQUEST_SUMMARY_FOR_THIS_BLOCK)"
TRANSCRIPT_SEPARATOR = "\n\n---\n\n"

BULK_LINE_PATTERN = re.compile(r"BLOCK\s+(\d+):\s*(.*)", re.IGNORECASE)
SUMMARY_PREFIX_PATTERN = re.compile(r"^Summary:\s*", re.IGNORECASE)
FIELD_PATTERN = re.compile(r"^\s*(TITLE|SUMMARY|CONTENT):[ \t]*", re.MULTILINE)


class RewriteResult(BaseModel):
    """Parsed reply to a rewrite request."""

    summary: str = ""
    content: str = ""


class GeneratedScene(BaseModel):
    """Parsed reply to a gap-fill request."""

    title: str = ""
    summary: str = ""
    content: str = ""


def summary_prompt(content: str) -> str:
    """Prompt for a one-sentence beat summary of a single scene."""
    return f"""Act as a professional screenwriter and script doctor.
Summarize the following scene content into a concise BEAT.
Requirements:
1. Provide exactly ONE short, punchy sentence summarising the scene.
2. Language Requirement: {LANGUAGE_RULE}
3. Do not include any other text, intros, explanations, or quotes.
4. {PLAIN_TEXT_RULE}
Format: Just the summary text.

Scene Content:
{content}"""


def bulk_summary_prompt(transcript: str) -> str:
    """Prompt for summaries of every marked block in a transcript."""
    return f"""Act as a professional screenwriter.
Below is a structured screenplay.
Some blocks are marked with {SUMMARY_REQUEST_MARKER}.
Please generate a concise ONE-sentence summary for each of those marked blocks.

Requirements:
1. Provide exactly ONE short, punchy sentence per marked block.
2. Language Requirement: {LANGUAGE_RULE}
3. {PLAIN_TEXT_RULE}
4. Respond ONLY with a list of summaries in the following format:
BLOCK X: Summary text

Screenplay:
{transcript}"""


def rewrite_prompt(content: str, before: str, after: str) -> str:
    """Prompt to expand rough scene notes into screenplay text."""
    return f"""Role: You are a professional Screenwriter.
Task: Rewrite the "Current Scene Content" into a full, evocative screenplay scene while STRICTLY maintaining the original language style.

Requirement:
1. Maintain consistency with the provided "Context Before" and "Context After".
2. Expand rough notes into lean, cinematic Action descriptions and natural Dialogue.
3. SHOW, DON'T TELL: Focus only on what can be SEEN or HEARD on screen.
4. BE EFFICIENT: Avoid filler or "purple prose".
5. Provide the rewritten script content in standard screenplay format.
6. DO NOT include the Scene Heading (e.g., INT. / EXT.) in the "CONTENT" section.
7. Language Requirement: {LANGUAGE_RULE}
8. Return ONLY the following format:

SUMMARY: [One sentence summary]
CONTENT:
[The rewritten script content]

Context Before:
{before}

Current Scene Content:
{content}

Context After:
{after}"""  # noqa: E501


def generate_prompt(before: str, after: str) -> str:
    """Prompt for a new scene bridging the gap between two contexts."""
    return f"""Role: You are a professional Screenwriter.
Task: Write the missing scene that connects "Context Before" to "Context After".

Requirement:
1. The new scene must make the transition from Before to After feel earned.
2. SHOW, DON'T TELL: Focus only on what can be SEEN or HEARD on screen.
3. The TITLE must be a scene heading (e.g., INT. KITCHEN - NIGHT).
4. The SUMMARY must be exactly one sentence.
5. Language Requirement: {LANGUAGE_RULE}
6. {PLAIN_TEXT_RULE}
7. Return ONLY the following format:

TITLE: [Scene heading]
SUMMARY: [One sentence summary]
CONTENT:
[The scene content without the heading]

Context Before:
{before}

Context After:
{after}"""


def brainstorm_prompt(content: str, before: str, after: str) -> str:
    """Prompt asking for questions that challenge the writer."""
    return f"""Role: You are a sharp Script Doctor.
Goal: Challenge and inspire the writer by analyzing the "Current Scene Content" as a GAP between contexts.

TASK:
1. Analyze the scene's current dramatic status, focusing on character Need/Want, intentions, and conflicts and ask 2-3 provocative questions that help fill the gap logically to make the transition from Before to After feel earned.
2. Do NOT provide any plot suggestions or direction.
3. Language Requirement: {LANGUAGE_RULE}
4. Return PLAIN TEXT ONLY.

Context Before:
{before}

Current Scene Content:
{content}

Context After:
{after}"""  # noqa: E501


def clean_summary(text: str) -> str:
    """Normalize a one-sentence reply into a single summary line.

    Drops a leading ``Summary:`` label and wrapping square brackets.
    """
    cleaned = SUMMARY_PREFIX_PATTERN.sub("", text.strip())
    if cleaned.startswith("["):
        cleaned = cleaned[1:]
    if cleaned.endswith("]"):
        cleaned = cleaned[:-1]
    return " ".join(cleaned.split())


def parse_bulk_response(text: str) -> list[tuple[int, str]]:
    """Extract ``(block index, summary)`` pairs from ``BLOCK N: ...`` lines.

    Lines that do not match are ignored.
    """
    pairs: list[tuple[int, str]] = []
    for line in text.split("\n"):
        match = BULK_LINE_PATTERN.search(line)
        if match is None:
            continue
        summary = clean_summary(match.group(2))
        if summary:
            pairs.append((int(match.group(1)), summary))
    return pairs


def parse_labeled_fields(text: str) -> dict[str, str]:
    """Split a ``TITLE:`` / ``SUMMARY:`` / ``CONTENT:`` reply into fields.

    Each field runs until the next label; the first occurrence of a label
    wins.
    """
    fields: dict[str, str] = {}
    matches = list(FIELD_PATTERN.finditer(text))
    ends = [match.start() for match in matches[1:]] + [len(text)]
    for match, end in zip(matches, ends, strict=True):
        label = match.group(1).upper()
        if label not in fields:
            fields[label] = text[match.end() : end].strip("\n").rstrip()
    return fields


def parse_rewrite_response(text: str) -> RewriteResult:
    """Parse a rewrite reply."""
    fields = parse_labeled_fields(text)
    return RewriteResult(
        summary=clean_summary(fields.get("SUMMARY", "")),
        content=fields.get("CONTENT", ""),
    )


def parse_generated_scene(text: str) -> GeneratedScene:
    """Parse a gap-fill reply."""
    fields = parse_labeled_fields(text)
    return GeneratedScene(
        title=" ".join(fields.get("TITLE", "").split()),
        summary=clean_summary(fields.get("SUMMARY", "")),
        content=fields.get("CONTENT", ""),
    )
