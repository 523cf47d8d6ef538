"""Text-level editing helpers for script documents."""

from __future__ import annotations

from typing import Any

import yaml

from scriptboard.config import get_logger
from scriptboard.exceptions import ValidationError
from scriptboard.parser import patterns
from scriptboard.parser.classifier import classify_text
from scriptboard.parser.models import ElementType, TagKind

logger = get_logger(__name__)

SCRIPT_CSS_CLASSES = ("fountain", "script")
PARENTHETICAL_CLOSE = ")"


def parse_front_matter(text: str) -> dict[str, Any]:
    """Parse the YAML front matter block at the top of ``text``.

    Returns:
        The front matter mapping, or an empty dict when there is none.

    Raises:
        ValidationError: If the front matter is not valid YAML.
    """
    match = patterns.FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}
    try:
        data = yaml.safe_load(match.group("body"))
    except yaml.YAMLError as e:
        raise ValidationError(
            message="Front matter is not valid YAML",
            hint="Check the block between the leading '---' lines",
            details={"error": str(e)},
        ) from e
    return data if isinstance(data, dict) else {}


def strip_front_matter(text: str) -> str:
    """Remove a leading YAML front matter block."""
    match = patterns.FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return text
    return text[match.end() :]


def is_script(text: str) -> bool:
    """Whether the front matter marks ``text`` as a script.

    A document is a script when its ``cssclasses`` (or ``cssclass``) entry
    includes ``fountain`` or ``script``.
    """
    try:
        front_matter = parse_front_matter(text)
    except ValidationError as e:
        logger.warning("Ignoring unreadable front matter", error=e.message)
        return False

    classes = front_matter.get("cssclasses") or front_matter.get("cssclass") or []
    if isinstance(classes, str):
        classes = [classes]
    if not isinstance(classes, list):
        return False
    return any(name in classes for name in SCRIPT_CSS_CLASSES)


def new_script_template(title: str) -> str:
    """Text of a new, empty script titled ``title``."""
    front_matter = yaml.safe_dump(
        {"cssclasses": [SCRIPT_CSS_CLASSES[0]]}, default_flow_style=False
    )
    return f"---\n{front_matter}---\n\n# {title}\n\nFADE IN:\n\nEXT. LOCATION - DAY\n\n"


def renumber_scenes(text: str) -> str:
    """Number every scene heading ``1.``, ``2.``, ... in document order.

    Existing numbers are replaced; forced-scene markers are kept in front of
    the number.
    """
    lines = text.split("\n")
    number = 0
    for index, line in enumerate(classify_text(text)):
        if line.element_type is not ElementType.SCENE:
            continue
        number += 1
        raw = line.raw_text
        start = line.marker_length if line.strip_prefix else 0
        start += len(raw[start:]) - len(raw[start:].lstrip())
        rest = patterns.SCENE_NUMBER_PATTERN.sub("", raw[start:], count=1)
        lines[index] = f"{raw[:start]}{number}. {rest}"
    logger.info("Renumbered scenes", scenes=number)
    return "\n".join(lines)


def toggle_line_prefix(line: str, marker: str) -> str:
    """Add or remove a cue marker on one line.

    ``@`` toggles the character marker. ``(`` wraps the line in
    parentheses, or unwraps an existing parenthetical.
    """
    indent = line[: len(line) - len(line.lstrip())]
    content = line.strip()

    if marker == patterns.PARENTHETICAL_MARKER:
        if patterns.is_parenthetical(content):
            return indent + content[1:-1].strip()
        return f"{indent}({content}{PARENTHETICAL_CLOSE}"

    if content.startswith(marker):
        return indent + content[len(marker) :].lstrip()
    return indent + marker + content


def remove_empty_notes(text: str) -> str:
    """Drop ``%%note:%%`` lines that carry no text."""
    kept = []
    removed = 0
    for line in text.split("\n"):
        tag = patterns.match_inline_tag(line)
        if tag is not None and tag.kind is TagKind.NOTE and not tag.value:
            removed += 1
            continue
        kept.append(line)
    if removed:
        logger.debug("Removed empty notes", count=removed)
    return "\n".join(kept)
