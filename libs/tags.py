"""
Two-stage parsing for loosely formatted tag lists.

Upstream note tags arrive either as a JSON document (usually an array, sometimes
a bare scalar) or as a comma-separated string. `parse_tags` tries the structured
form first and falls back to splitting on commas; both stages are exposed so
they can be exercised on their own.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from libs.errors import ParseFailure

SOURCE_JSON = "json"
SOURCE_DELIMITED = "delimited"
SOURCE_EMPTY = "empty"


@dataclass(frozen=True)
class TagParseResult:
    """Outcome of parsing one raw tag value."""

    tags: tuple[str, ...] = field(default_factory=tuple)
    source: str = SOURCE_EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.tags

    def as_list(self) -> list[str] | None:
        """Tags as a list, or None when nothing was parsed."""
        return list(self.tags) if self.tags else None


def json_tag(value: object) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def parse_structured_tags(raw: str) -> tuple[str, ...]:
    """
    Parse a JSON tag document.

    Arrays yield one tag per element; any other JSON value becomes a single tag.
    Null elements are dropped. Strings are kept as-is and other values keep
    their JSON spelling, so true stays "true".

    Raises:
        ParseFailure: If raw is not valid JSON.
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ParseFailure(f"Not a JSON tag document: {raw!r}") from exc

    if isinstance(parsed, list):
        return tuple(json_tag(item) for item in parsed if item is not None)
    if parsed is None:
        return ()
    return (json_tag(parsed),)


def parse_delimited_tags(raw: str, delimiter: str = ",") -> tuple[str, ...]:
    """Split on a delimiter, trimming each part and dropping empty ones."""
    return tuple(part.strip() for part in raw.split(delimiter) if part.strip())


def parse_tags(raw: str | None) -> TagParseResult:
    """
    Parse a raw tag value, never raising.

    Example:
        >>> parse_tags('["DeFi", "L2"]').tags
        ('DeFi', 'L2')
        >>> parse_tags("DeFi, L2").source
        'delimited'
    """
    if raw is None or not str(raw).strip():
        return TagParseResult()

    text = str(raw)
    try:
        tags = parse_structured_tags(text)
        source = SOURCE_JSON
    except ParseFailure:
        tags = parse_delimited_tags(text)
        source = SOURCE_DELIMITED

    if not tags:
        return TagParseResult()
    return TagParseResult(tags=tags, source=source)
