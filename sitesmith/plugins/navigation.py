"""Navigation tree built from ``navigation`` front matter."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

from sitesmith.content.models import Document
from sitesmith.filters.registry import FilterRegistry
from sitesmith.plugins.base import Plugin, Site

logger = logging.getLogger(__name__)


class NavNode(BaseModel):
    key: str
    title: str
    url: str | None = None
    order: int = 0
    parent: str | None = None
    children: list[NavNode] = Field(default_factory=list)


def _node_for(doc: Document) -> NavNode | None:
    nav = doc.front_matter.get("navigation")
    if not isinstance(nav, dict) or not nav.get("key"):
        return None
    key = str(nav["key"])
    try:
        order = int(nav.get("order") or 0)
    except (TypeError, ValueError):
        logger.warning("navigation order %r in %s is not an integer, using 0", nav.get("order"), doc.source_path)
        order = 0
    return NavNode(
        key=key,
        title=str(nav.get("title") or key),
        url=nav.get("url") or doc.url,
        order=order,
        parent=str(nav["parent"]) if nav.get("parent") else None,
    )


def _sort(nodes: list[NavNode]) -> list[NavNode]:
    nodes.sort(key=lambda n: (n.order, n.key))
    for n in nodes:
        _sort(n.children)
    return nodes


def build_navigation(documents: Iterable[Document], start_key: str | None = None) -> list[NavNode]:
    """Return the root nodes (or the children of ``start_key``), sorted by order then key.

    A node whose parent key doesn't exist is treated as a root.
    """
    by_key: dict[str, NavNode] = {}
    for doc in documents:
        node = _node_for(doc)
        if node is None:
            continue
        if node.key in by_key:
            logger.warning("duplicate navigation key %r in %s, keeping the first", node.key, doc.source_path)
            continue
        by_key[node.key] = node

    roots: list[NavNode] = []
    for node in by_key.values():
        parent = by_key.get(node.parent) if node.parent else None
        if parent is None:
            roots.append(node)
        else:
            parent.children.append(node)
    _sort(roots)

    if start_key is None:
        return roots
    start = by_key.get(start_key)
    return start.children if start is not None else []


def breadcrumb(documents: Iterable[Document], key: str, include_self: bool = False) -> list[NavNode]:
    """Ancestors of ``key`` from the root down."""
    by_key = {n.key: n for n in (_node_for(d) for d in documents) if n is not None}
    trail: list[NavNode] = []
    node = by_key.get(key)
    if node is None:
        return trail
    if include_self:
        trail.append(node)
    seen = {node.key}
    while node.parent and node.parent in by_key and node.parent not in seen:
        node = by_key[node.parent]
        seen.add(node.key)
        trail.append(node)
    trail.reverse()
    return trail


class NavigationPlugin(Plugin):
    name = "navigation"

    def register_filters(self, registry: FilterRegistry) -> None:
        registry.register("navigation", build_navigation)
        registry.register("navigationBreadcrumb", breadcrumb)

    def prepare(self, site: Site) -> dict[str, Any]:
        return {"navigation": build_navigation(site.collections.get("all", site.documents))}
