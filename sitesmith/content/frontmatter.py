"""Front matter splitting and field coercion."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from sitesmith.errors import ParseError

# Opening and closing --- must each sit on their own line.
_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)

_DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Split a source file into YAML frontmatter and body.

    Returns (yaml_str, body). yaml_str is None if no frontmatter found.
    """
    match = _FRONTMATTER_RE.match(content)
    if match is None:
        return None, content
    return match.group(1), content[match.end():]


def parse_frontmatter(content: str, source: str | Path = "<string>") -> tuple[dict[str, Any], str]:
    """Parse frontmatter into a dict. Raises ParseError on malformed YAML."""
    yaml_str, body = split_frontmatter(content)
    if yaml_str is None or not yaml_str.strip():
        return {}, body

    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ParseError(source, f"malformed front matter: {e}") from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise ParseError(source, f"front matter must be a mapping, got {type(data).__name__}")
    return data, body


def coerce_tags(value: Any) -> frozenset[str]:
    """Front matter tags may be a single string or a list of strings."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(v) for v in value if v is not None)
    return frozenset([str(value)])


def to_utc(value: Any) -> datetime | None:
    """Coerce a date, datetime, or ISO 8601 string to an aware UTC datetime.

    Naive values are taken to be UTC already. Returns None when the value
    can't be interpreted.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def split_date_prefix(stem: str) -> tuple[datetime | None, str]:
    """2025-06-06-record-shredding -> (2025-06-06 UTC, 'record-shredding')."""
    match = _DATE_PREFIX_RE.match(stem)
    if match is None:
        return None, stem
    year, month, day, rest = match.groups()
    try:
        return datetime(int(year), int(month), int(day), tzinfo=timezone.utc), rest
    except ValueError:
        return None, stem
