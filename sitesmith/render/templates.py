"""Jinja2 template engine with front-matter layout chains."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Undefined
from pydantic import BaseModel, Field

from sitesmith.config.models import SiteConfig
from sitesmith.content.frontmatter import parse_frontmatter

logger = logging.getLogger(__name__)


class Layout(BaseModel):
    """A template in the includes directory that wraps page content."""

    name: str
    path: str
    front_matter: dict[str, Any] = Field(default_factory=dict)
    body: str

    @property
    def parent(self) -> str | None:
        parent = self.front_matter.get("layout")
        return str(parent) if parent else None


class LayoutNotFoundError(LookupError):
    pass


class LayoutCycleError(ValueError):
    pass


class TemplateEngine:
    """Renders template strings and layout chains.

    Filters come from a frozen FilterRegistry mapping and are installed once
    at construction. Layouts are parsed lazily and cached; the cache is the
    only mutable state and is guarded by a lock so worker threads can share
    one engine.
    """

    def __init__(
        self,
        config: SiteConfig,
        filters: Mapping[str, Any],
        *,
        strict: bool = False,
    ) -> None:
        self.config = config
        content_root = Path(config.content_root)
        self.includes_dir = (content_root / config.includes_dir).resolve()
        self.env = Environment(
            loader=FileSystemLoader([str(self.includes_dir), str(content_root.resolve())]),
            autoescape=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict else Undefined,
        )
        self.env.filters.update(filters)
        self._layouts: dict[str, Layout] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget cached layouts so the next build rereads them from disk."""
        with self._lock:
            self._layouts.clear()

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:
        return self.env.from_string(source).render(context)

    def apply_layouts(
        self,
        layout_name: str | None,
        content: str,
        context: Mapping[str, Any],
        page_data: Mapping[str, Any],
    ) -> str:
        """Wrap ``content`` in the layout chain starting at ``layout_name``.

        Each layout sees the accumulated layout front matter, overridden by
        ``page_data``, plus ``content`` holding the inner HTML.
        """
        chain = self.layout_chain(layout_name)
        layout_data: dict[str, Any] = {}
        # Data cascades from the outermost layout inward
        for layout in reversed(chain):
            layout_data.update(layout.front_matter)
        layout_data.pop("layout", None)

        for layout in chain:
            ctx = {**context, **layout_data, **page_data, "content": content}
            content = self.render_string(layout.body, ctx)
        return content

    def layout_chain(self, layout_name: str | None) -> list[Layout]:
        """Innermost first. Raises LayoutCycleError if a layout includes itself."""
        chain: list[Layout] = []
        seen: set[str] = set()
        name = layout_name
        while name:
            layout = self.load_layout(name)
            if layout.path in seen:
                raise LayoutCycleError(
                    "layout cycle: " + " -> ".join([*(item.name for item in chain), layout.name])
                )
            seen.add(layout.path)
            chain.append(layout)
            name = layout.parent
        return chain

    def load_layout(self, name: str) -> Layout:
        with self._lock:
            cached = self._layouts.get(name)
        if cached is not None:
            return cached

        path = self._find_layout(name)
        content = path.read_text(encoding="utf-8")
        front_matter, body = parse_frontmatter(content, path)
        layout = Layout(name=name, path=str(path), front_matter=front_matter, body=body)

        with self._lock:
            self._layouts.setdefault(name, layout)
        logger.debug("loaded layout %s from %s", name, path)
        return layout

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _find_layout(self, name: str) -> Path:
        candidates = [self.includes_dir / name]
        if not Path(name).suffix:
            candidates.extend(
                self.includes_dir / f"{name}.{fmt}" for fmt in self.config.template_formats
            )
        for candidate in candidates:
            resolved = candidate.resolve()
            if not resolved.is_relative_to(self.includes_dir):
                continue
            if resolved.is_file():
                return resolved
        raise LayoutNotFoundError(f"layout '{name}' not found in {self.includes_dir}")
