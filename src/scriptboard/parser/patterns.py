"""Line-shape matchers for the script markup.

Every regular expression that recognises script syntax lives here. The
classifier, the segmenter and all render adapters call these helpers; none
of them compile their own patterns.

All matchers are pure functions of one line of text and never look at
neighbouring lines.
"""

from __future__ import annotations

import re

from scriptboard.parser.models import BlockColor, InlineTag, TagKind

CHARACTER_MARKER = "@"
PARENTHETICAL_MARKER = "("

# CJK unified ideographs accepted in character names
_CJK = "一-龥"
_ASIDE = r"(?:\s*[(（].*?[)）])?"
_CUE_NAME = rf"[{_CJK}A-Z0-9\s-]{{1,30}}{_ASIDE}"

SCENE_PATTERN = re.compile(
    r"^\s*(?:"
    r"(?P<heading>###)\s+"
    r"|(?P<dot>\.)(?=[^.\s])"
    r"|(?:\d+[.\s]\s*)?(?:INT|EXT|INT/EXT|I/E)[.\s]"
    r")",
    re.IGNORECASE,
)
TRANSITION_PATTERN = re.compile(r"^\s*((?:FADE (?:IN|OUT)|[A-Z\s]+ TO)[:.]?)$")
PARENTHETICAL_PATTERN = re.compile(r"^\s*[(（].+[)）]\s*$")
OFF_SCREEN_PATTERN = re.compile(r"^\s*(OS|VO|ＯＳ|ＶＯ)[:：]\s*", re.IGNORECASE)
CHARACTER_COLON_PATTERN = re.compile(rf"^\s*({_CUE_NAME})([:：])\s*$")
CHARACTER_INLINE_DIALOGUE_PATTERN = re.compile(
    rf"^\s*(?=[^:：]*[{_CJK}A-Z])({_CUE_NAME})([:：])\s*(\S.*?)\s*$"
)
CHARACTER_CAPS_PATTERN = re.compile(
    rf"^\s*(?=[^(（]*[A-Z])[A-Z0-9\s-]{{2,30}}{_ASIDE}$"
)

COLOR_TAG_PATTERN = re.compile(
    r"^\s*%%color:\s*(red|blue|green|yellow|purple|none|无|無)\s*%%$",
    re.IGNORECASE,
)
SUMMARY_TAG_PATTERN = re.compile(r"^\s*%%summary:\s*(.*?)\s*%%$", re.IGNORECASE)
NOTE_TAG_PATTERN = re.compile(r"^\s*%%note:\s*(.*)%%$", re.IGNORECASE)
NOTE_PREFIX_PATTERN = re.compile(r"^\s*%%note:\s*", re.IGNORECASE)

TITLE_HEADING_PATTERN = re.compile(r"^#\s+")
MARKDOWN_HEADING_PATTERN = re.compile(r"^\s*(#{1,6})\s+(.*?)\s*$")
SECTION_HEADING_PATTERN = re.compile(r"^##\s+")
SCENE_NUMBER_PATTERN = re.compile(r"^\d+[.\s]\s*")

INLINE_COMMENT_PATTERN = re.compile(r"%%.*?%%")
WIKI_LINK_PATTERN = re.compile(r"\[\[.*?\]\]")
ASIDE_PATTERN = re.compile(r"[(（].*?[)）]")
TRAILING_COLON_PATTERN = re.compile(r"[:：]\s*$")
SUGGEST_TRIGGER_PATTERN = re.compile(r"@([^ ]*)$")

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<body>.*?)^---[ \t]*\r?$\n?", re.MULTILINE | re.DOTALL
)

_CJK_COLOR_NONE = {"无", "無"}


def match_inline_tag(text: str) -> InlineTag | None:
    """Return the payload of a color, summary or note tag line."""
    stripped = text.strip()
    if match := COLOR_TAG_PATTERN.match(stripped):
        value = match.group(1).lower()
        if value in _CJK_COLOR_NONE:
            value = BlockColor.NONE.value
        return InlineTag(TagKind.COLOR, value)
    if match := SUMMARY_TAG_PATTERN.match(stripped):
        return InlineTag(TagKind.SUMMARY, match.group(1))
    if match := NOTE_TAG_PATTERN.match(stripped):
        return InlineTag(TagKind.NOTE, match.group(1).strip())
    return None


def format_tag(kind: TagKind, value: str) -> str:
    """Render an inline tag line in canonical form."""
    return f"%%{kind.value}: {value}%%"


def is_scene_heading(text: str) -> bool:
    """Whether ``text`` opens a scene (INT/EXT heading or forced marker)."""
    return SCENE_PATTERN.match(text) is not None


def scene_marker_length(text: str) -> int:
    """Length of the forced-scene marker (``.`` or ``###``) at the line start.

    Leading whitespace before the marker is counted. Returns 0 for ordinary
    INT/EXT headings and for lines that are not scene headings.
    """
    match = SCENE_PATTERN.match(text)
    if match is None:
        return 0
    if match.group("heading"):
        return match.end("heading")
    if match.group("dot"):
        return match.end("dot")
    return 0


def is_transition(text: str) -> bool:
    """Whether ``text`` is a FADE IN/OUT or ``... TO:`` transition."""
    return TRANSITION_PATTERN.match(text) is not None


def is_parenthetical(text: str) -> bool:
    """Whether ``text`` is wholly wrapped in ASCII or fullwidth parentheses."""
    return PARENTHETICAL_PATTERN.match(text) is not None


def is_off_screen(text: str) -> bool:
    """Whether ``text`` starts with an ``OS:`` / ``VO:`` tag."""
    return OFF_SCREEN_PATTERN.match(text) is not None


def has_character_marker(text: str) -> bool:
    """Whether the first non-blank character is the ``@`` cue marker."""
    return text.lstrip().startswith(CHARACTER_MARKER)


def is_character_colon(text: str) -> bool:
    """Whether ``text`` is a standalone ``NAME:`` cue."""
    return CHARACTER_COLON_PATTERN.match(text) is not None


def split_character_dialogue(text: str) -> tuple[str, str] | None:
    """Split ``NAME: words`` into the cue (colon kept) and the dialogue."""
    match = CHARACTER_INLINE_DIALOGUE_PATTERN.match(text)
    if match is None:
        return None
    return match.group(1).strip() + match.group(2), match.group(3)


def is_character_caps(text: str) -> bool:
    """Whether ``text`` is an all-caps name line."""
    return CHARACTER_CAPS_PATTERN.match(text) is not None


def is_title_heading(text: str) -> bool:
    """Whether ``text`` is a level-1 heading (``# Title``)."""
    return TITLE_HEADING_PATTERN.match(text.strip()) is not None


def is_section_heading(text: str) -> bool:
    """Whether ``text`` is a level-2 heading (``## Act One``)."""
    return text.strip().startswith("## ")


def markdown_heading(text: str) -> tuple[int, str] | None:
    """Level and text of a Markdown heading that is not a forced scene."""
    if is_scene_heading(text):
        return None
    match = MARKDOWN_HEADING_PATTERN.match(text)
    if match is None:
        return None
    return len(match.group(1)), match.group(2)


def heading_text(text: str) -> str:
    """Strip a level-1 or level-2 heading marker from ``text``."""
    stripped = text.strip()
    if is_section_heading(stripped):
        return SECTION_HEADING_PATTERN.sub("", stripped, count=1)
    return TITLE_HEADING_PATTERN.sub("", stripped, count=1)


def strip_inline_markup(text: str) -> str:
    """Remove ``%%comments%%`` and ``[[links]]`` from a fragment of text."""
    return WIKI_LINK_PATTERN.sub("", INLINE_COMMENT_PATTERN.sub("", text))


def clean_character_name(text: str) -> str:
    """Reduce a cue line to the bare character name.

    Drops the ``@`` marker, a trailing colon, and any parenthetical asides.
    """
    name = text.strip()
    if name.startswith(CHARACTER_MARKER):
        name = name[len(CHARACTER_MARKER) :]
    name = TRAILING_COLON_PATTERN.sub("", name)
    name = ASIDE_PATTERN.sub("", name)
    return name.strip()
