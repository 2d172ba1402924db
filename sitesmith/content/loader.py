"""Document discovery and loading from the content root."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from sitesmith.config.models import SiteConfig
from sitesmith.content.frontmatter import (
    coerce_tags,
    parse_frontmatter,
    split_date_prefix,
    to_utc,
)
from sitesmith.content.models import Document
from sitesmith.errors import NotFoundError, ParseError

logger = logging.getLogger(__name__)

# Directory names never scanned for content
_IGNORE_DIRS = {"node_modules", "__pycache__"}


def _is_hidden(name: str) -> bool:
    return name.startswith(".") or name.startswith("_")


def _sort_key(doc: Document) -> tuple[datetime, str]:
    return doc.date, doc.source_path


class DocumentLoader:
    """Scans a content root and parses each template file into a Document.

    The includes, data and output directories are skipped, as are hidden
    (``.``) and private (``_``) path components and any file that is a
    passthrough source.
    """

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.content_root = Path(config.content_root).resolve()
        self._formats = {f.lower() for f in config.template_formats}
        self._excluded = self._excluded_paths()

    def _excluded_paths(self) -> list[Path]:
        root = self.content_root
        excluded = [
            (root / self.config.includes_dir).resolve(),
            (root / self.config.data_dir).resolve(),
            Path(self.config.output_root).resolve(),
        ]
        excluded.extend((root / entry.src).resolve() for entry in self.config.passthrough)
        return excluded

    def _is_excluded(self, path: Path) -> bool:
        return any(path == ex or path.is_relative_to(ex) for ex in self._excluded)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def discover(self) -> list[Path]:
        """Return every template file under the content root, sorted by path."""
        if not self.content_root.is_dir():
            raise NotFoundError(self.content_root)

        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.content_root):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames
                if not _is_hidden(d)
                and d not in _IGNORE_DIRS
                and not self._is_excluded(current / d)
            )
            for name in sorted(filenames):
                if _is_hidden(name):
                    continue
                path = current / name
                if path.suffix.lower().lstrip(".") not in self._formats:
                    continue
                if self._is_excluded(path):
                    continue
                found.append(path)

        logger.debug("discovered %d source file(s) under %s", len(found), self.content_root)
        return found

    def load_file(self, path: Path) -> Document:
        """Parse a single source file. Raises ParseError on malformed front matter."""
        rel = path.resolve().relative_to(self.content_root).as_posix()
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(rel, f"not valid UTF-8: {e}") from e

        front_matter, body = parse_frontmatter(content, rel)
        prefix_date, slug = split_date_prefix(path.stem)

        doc_date = None
        if "date" in front_matter:
            doc_date = to_utc(front_matter["date"])
            if doc_date is None:
                raise ParseError(rel, f"unrecognized date {front_matter['date']!r}")
        if doc_date is None:
            doc_date = prefix_date
        if doc_date is None:
            doc_date = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)

        # index files take the slug of their directory
        if slug == "index" and "/" in rel:
            slug = Path(rel).parent.name

        return Document(
            source_path=rel,
            input_path=str(path.resolve()),
            template_format=path.suffix.lower().lstrip("."),
            file_slug=slug,
            body=body,
            date=doc_date,
            front_matter=front_matter,
            tags=coerce_tags(front_matter.get("tags")),
        )

    def load(self, map_fn: Callable[..., Iterable[Document]] = map) -> list[Document]:
        """Load every document, ordered by (date, source path).

        ``map_fn`` lets callers parse files concurrently (e.g. ``executor.map``).
        The first malformed file raises ParseError.
        """
        docs = list(map_fn(self.load_file, self.discover()))
        return sort_documents(docs)


def sort_documents(docs: Iterable[Document]) -> list[Document]:
    return sorted(docs, key=_sort_key)


def load_documents(config: SiteConfig) -> list[Document]:
    return DocumentLoader(config).load()


def load_global_data(data_dir: str | Path) -> dict[str, Any]:
    """Read *.json / *.yaml / *.yml files from the data directory, keyed by stem."""
    data_dir = Path(data_dir)
    data: dict[str, Any] = {}
    if not data_dir.is_dir():
        return data

    for path in sorted(data_dir.iterdir()):
        if not path.is_file() or _is_hidden(path.name):
            continue
        suffix = path.suffix.lower()
        try:
            if suffix == ".json":
                data[path.stem] = json.loads(path.read_text(encoding="utf-8"))
            elif suffix in (".yaml", ".yml"):
                data[path.stem] = yaml.safe_load(path.read_text(encoding="utf-8"))
            else:
                continue
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ParseError(path, f"malformed data file: {e}") from e
        logger.debug("loaded global data '%s' from %s", path.stem, path)

    return data
