"""Deterministic mapping from a source document to its output path and URL."""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath
from typing import Any

from sitesmith.errors import RenderError


def _normalize(rel: str, source_path: str) -> str:
    norm = posixpath.normpath(rel.lstrip("/"))
    if norm in ("", ".") or norm == ".." or norm.startswith("../"):
        raise RenderError(source_path, f"output path {rel!r} escapes the output root")
    return norm


def url_for(output_path: str) -> str:
    """posts/a/index.html -> /posts/a/ ; feed.xml -> /feed.xml"""
    if output_path == "index.html":
        return "/"
    if output_path.endswith("/index.html"):
        return "/" + output_path[: -len("index.html")]
    return "/" + output_path


def resolve_output_path(
    source_path: str,
    front_matter: dict[str, Any],
) -> tuple[str | None, str | None]:
    """Return (output_path, url) for a document, or (None, None) if it isn't written.

    A ``permalink`` in front matter wins; ``permalink: false`` suppresses
    output. Otherwise ``dir/name.ext`` maps to ``dir/name/index.html`` and
    ``dir/index.ext`` to ``dir/index.html``.
    """
    permalink = front_matter.get("permalink")
    if permalink is False:
        return None, None

    if permalink not in (None, True):
        link = str(permalink)
        rel = link.lstrip("/")
        if rel == "" or rel.endswith("/"):
            rel += "index.html"
        output_path = _normalize(rel, source_path)
        return output_path, url_for(output_path)

    source = PurePosixPath(source_path)
    parent = source.parent
    if source.stem == "index":
        target = parent / "index.html"
    else:
        target = parent / source.stem / "index.html"
    output_path = _normalize(target.as_posix(), source_path)
    return output_path, url_for(output_path)
