"""Data models shared by the pattern library, classifier and segmenter."""

from dataclasses import dataclass
from enum import Enum


class ElementType(str, Enum):
    """Screenplay role of a single line."""

    SCENE = "SCENE"
    TRANSITION = "TRANSITION"
    CHARACTER = "CHARACTER"
    PARENTHETICAL = "PARENTHETICAL"
    DIALOGUE = "DIALOGUE"
    ACTION = "ACTION"
    EMPTY = "EMPTY"  # blank lines and inline tags


# Element types after which an unmarked line continues the dialogue
DIALOGUE_CONTEXT = frozenset(
    {ElementType.CHARACTER, ElementType.PARENTHETICAL, ElementType.DIALOGUE}
)


class TagKind(str, Enum):
    """Kinds of inline ``%%keyword: value%%`` metadata tags."""

    COLOR = "color"
    SUMMARY = "summary"
    NOTE = "note"


class BlockKind(str, Enum):
    """Structural unit produced by the segmenter."""

    PREAMBLE = "preamble"
    SECTION = "section"
    SCENE = "scene"


class BlockColor(str, Enum):
    """Card colors a block can be tagged with."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    NONE = "none"


@dataclass(frozen=True)
class InlineTag:
    """Payload of a matched inline tag."""

    kind: TagKind
    value: str


@dataclass(frozen=True)
class ClassifiedLine:
    """Classification result for one line of a script.

    Instances are derived from ``(raw_text, previous_type)`` and never
    mutated. ``marker_length`` counts characters from the start of
    ``raw_text`` (leading whitespace included) that a display surface hides
    when ``strip_prefix`` is set.
    """

    raw_text: str
    element_type: ElementType
    display_text: str = ""
    strip_prefix: bool = False
    marker_length: int = 0
    tag: InlineTag | None = None
    inline_dialogue: str | None = None

    @property
    def is_tag(self) -> bool:
        """Whether this line is an inline metadata tag."""
        return self.tag is not None

    @property
    def is_blank(self) -> bool:
        """Whether this line carries no text at all."""
        return not self.raw_text.strip()
