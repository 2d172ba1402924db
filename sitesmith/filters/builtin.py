"""Built-in template filters.

Every filter is pure: identical input gives identical output, with no
dependence on the process locale or timezone.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any
from unicodedata import normalize

from sitesmith.content.frontmatter import to_utc

# English abbreviations, fixed so output doesn't follow the process locale
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def as_utc(value: datetime | date | str) -> datetime:
    dt = to_utc(value)
    if dt is None:
        raise ValueError(f"Expected a date, got {value!r}")
    return dt


def readable_date(value: datetime | date | str) -> str:
    """06 Jun 2025"""
    dt = as_utc(value)
    return f"{dt.day:02d} {_MONTHS[dt.month - 1]} {dt.year:04d}"


def html_date_string(value: datetime | date | str) -> str:
    """Valid HTML date string, e.g. 2025-06-06."""
    dt = as_utc(value)
    return f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"


def head(seq: Any, n: int) -> list:
    """First ``n`` items, or the last ``|n|`` when ``n`` is negative.

    Anything that isn't a non-empty sequence (strings included) yields [].
    """
    if not isinstance(seq, Sequence) or isinstance(seq, (str, bytes)) or len(seq) == 0:
        return []
    if n < 0:
        return list(seq[n:])
    return list(seq[:n])


def min_value(*numbers: Any) -> Any:
    if not numbers:
        raise ValueError("min filter requires at least one argument")
    return min(numbers)


def slugify(text: Any, max_len: int = 80) -> str:
    """Convert text to a URL-friendly ASCII slug.

    >>> slugify("Record Shredding: Part 1")
    'record-shredding-part-1'
    """
    normalized = normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug[:max_len].rstrip("-")


def make_url_filter(path_prefix: str):
    """Build the ``url`` filter for a site deployed under ``path_prefix``."""
    prefix = "/" + path_prefix.strip("/")
    if prefix != "/":
        prefix += "/"

    def url(path: str) -> str:
        path = str(path)
        # Absolute URLs and protocol-relative links pass through
        if "://" in path or path.startswith("//") or not path.startswith("/"):
            return path
        return prefix + path.lstrip("/")

    return url
