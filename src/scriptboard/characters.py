"""Character name index and cue completion."""

from __future__ import annotations

from collections import Counter

from scriptboard.parser import patterns
from scriptboard.parser.classifier import classify, clean_character_name
from scriptboard.parser.models import ElementType

MAX_CUE_LENGTH = 50
DEFAULT_SUGGESTION_LIMIT = 10


def extract_character_names(text: str) -> Counter[str]:
    """Count how often each character name appears as a cue.

    Every line is judged on its own, so a name counts wherever it forms a
    cue, regardless of the lines around it. Lines longer than 50 characters
    are never cues.
    """
    counts: Counter[str] = Counter()
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped or len(stripped) > MAX_CUE_LENGTH:
            continue
        classified = classify(stripped)
        if classified.element_type is not ElementType.CHARACTER:
            continue
        name = clean_character_name(classified.display_text)
        if name:
            counts[name] += 1
    return counts


def suggest_characters(
    text: str, query: str = "", limit: int = DEFAULT_SUGGESTION_LIMIT
) -> list[str]:
    """Names containing ``query`` (case-insensitive), most frequent first."""
    needle = query.lower()
    counts = extract_character_names(text)
    matches = [(name, n) for name, n in counts.items() if needle in name.lower()]
    matches.sort(key=lambda item: item[1], reverse=True)
    return [name for name, _ in matches[:limit]]


def completion_query(line: str, column: int) -> str | None:
    """Partial name typed after ``@`` before ``column``, if completion applies."""
    match = patterns.SUGGEST_TRIGGER_PATTERN.search(line[:column])
    if match is None:
        return None
    return match.group(1)


def complete_cue(name: str) -> str:
    """Text that replaces the ``@query`` being typed."""
    return f"{patterns.CHARACTER_MARKER}{name}"
