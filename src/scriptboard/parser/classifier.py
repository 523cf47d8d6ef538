"""Line classifier shared by every rendering surface.

``classify`` maps one line plus the element type of the line before it to a
``ClassifiedLine``. ``classify_lines`` is the fold that threads the previous
type through a whole sequence; every adapter goes through it so that the
live overlay, the reading view, the exporter and the storyboard agree on
what each line is.
"""

from __future__ import annotations

from collections.abc import Iterable

from scriptboard.parser import patterns
from scriptboard.parser.models import DIALOGUE_CONTEXT, ClassifiedLine, ElementType


def _matchable(text: str) -> str:
    """Drop a trailing carriage return left by CRLF documents."""
    return text[:-1] if text.endswith("\r") else text


def classify(
    text: str, previous_type: ElementType = ElementType.EMPTY
) -> ClassifiedLine:
    """Classify a single line.

    Args:
        text: Raw line text, without the newline.
        previous_type: Element type of the preceding line.

    Returns:
        The classification of ``text``. Never raises.
    """
    line = _matchable(text)
    stripped = line.strip()

    if not stripped:
        return ClassifiedLine(raw_text=text, element_type=ElementType.EMPTY)

    tag = patterns.match_inline_tag(stripped)
    if tag is not None:
        return ClassifiedLine(
            raw_text=text,
            element_type=ElementType.EMPTY,
            display_text=tag.value,
            tag=tag,
        )

    leading = len(line) - len(line.lstrip())

    if patterns.is_scene_heading(stripped):
        marker = patterns.scene_marker_length(stripped)
        if marker:
            return ClassifiedLine(
                raw_text=text,
                element_type=ElementType.SCENE,
                display_text=stripped[marker:].strip(),
                strip_prefix=True,
                marker_length=leading + marker,
            )
        return ClassifiedLine(
            raw_text=text, element_type=ElementType.SCENE, display_text=stripped
        )

    if patterns.is_transition(stripped):
        return ClassifiedLine(
            raw_text=text, element_type=ElementType.TRANSITION, display_text=stripped
        )

    if patterns.is_off_screen(stripped) or patterns.is_parenthetical(stripped):
        return ClassifiedLine(
            raw_text=text,
            element_type=ElementType.PARENTHETICAL,
            display_text=stripped,
        )

    if patterns.has_character_marker(stripped):
        marker = len(patterns.CHARACTER_MARKER)
        return ClassifiedLine(
            raw_text=text,
            element_type=ElementType.CHARACTER,
            display_text=stripped[marker:].strip(),
            strip_prefix=True,
            marker_length=leading + marker,
        )

    if patterns.is_character_colon(stripped):
        return ClassifiedLine(
            raw_text=text, element_type=ElementType.CHARACTER, display_text=stripped
        )

    split = patterns.split_character_dialogue(stripped)
    if split is not None:
        cue, dialogue = split
        return ClassifiedLine(
            raw_text=text,
            element_type=ElementType.CHARACTER,
            display_text=cue,
            inline_dialogue=dialogue,
        )

    if patterns.is_character_caps(stripped):
        return ClassifiedLine(
            raw_text=text, element_type=ElementType.CHARACTER, display_text=stripped
        )

    if previous_type in DIALOGUE_CONTEXT:
        return ClassifiedLine(
            raw_text=text, element_type=ElementType.DIALOGUE, display_text=stripped
        )
    return ClassifiedLine(
        raw_text=text, element_type=ElementType.ACTION, display_text=stripped
    )


def classify_lines(
    lines: Iterable[str], previous_type: ElementType = ElementType.EMPTY
) -> list[ClassifiedLine]:
    """Classify a sequence of lines, carrying each result into the next call."""
    classified: list[ClassifiedLine] = []
    for line in lines:
        result = classify(line, previous_type)
        classified.append(result)
        previous_type = result.element_type
    return classified


def classify_text(text: str) -> list[ClassifiedLine]:
    """Classify every line of a document."""
    return classify_lines(text.split("\n"))


def clean_character_name(text: str) -> str:
    """Return the bare character name of a cue line."""
    return patterns.clean_character_name(_matchable(text))
