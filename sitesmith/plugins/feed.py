"""Atom feed for a collection, written after the render phase."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from datetime import datetime
from urllib.parse import urljoin
from xml.etree.ElementTree import Element, SubElement, tostring

from sitesmith.content.models import Document
from sitesmith.filters.builtin import as_utc
from sitesmith.filters.registry import FilterRegistry
from sitesmith.output.models import RenderResult
from sitesmith.output.paths import url_for
from sitesmith.plugins.base import Plugin, Site

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
FEED_SOURCE = "<feed>"

# href="/..." or src="/..." but not protocol-relative "//"
_ROOT_RELATIVE_RE = re.compile(r'(\s(?:href|src)=)(["\'])(/(?!/)[^"\']*)\2')


def date_to_rfc3339(value) -> str:
    dt = as_utc(value)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def absolute_url(url: str, base: str) -> str:
    return urljoin(base, url)


def html_to_absolute_urls(html: str, base: str) -> str:
    return _ROOT_RELATIVE_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}{urljoin(base, m.group(3))}{m.group(2)}", html)


def newest_collection_item_date(collection: Sequence[Document]) -> datetime | None:
    if not collection:
        return None
    return max(doc.date for doc in collection)


class FeedPlugin(Plugin):
    name = "feed"

    def register_filters(self, registry: FilterRegistry) -> None:
        base = self.config.feed.url

        registry.register("dateToRfc3339", date_to_rfc3339)
        registry.register("absoluteUrl", lambda url, base_url=base: absolute_url(url, base_url))
        registry.register("htmlToAbsoluteUrls", lambda html, base_url=base: html_to_absolute_urls(html, base_url))
        registry.register("getNewestCollectionItemDate", newest_collection_item_date)

    def entries(self, site: Site) -> list[Document]:
        """Newest first, limited to feed.limit."""
        collection = site.collections.get(self.config.feed.collection, ())
        docs = sorted(
            (d for d in collection if d.is_written),
            key=lambda d: (d.date, d.source_path),
            reverse=True,
        )
        return docs[: self.config.feed.limit]

    def finalize(self, site: Site, results: list[RenderResult]) -> list[RenderResult]:
        content_by_source = {r.source_path: r.content for r in results}
        xml = self.render_feed(self.entries(site), content_by_source)
        logger.info("feed %s: %d entries", self.config.feed.path, xml.count("<entry>"))
        return [
            RenderResult(
                path=self.config.feed.path.lstrip("/"),
                data=xml.encode("utf-8"),
                source_path=FEED_SOURCE,
            )
        ]

    def render_feed(self, entries: list[Document], content_by_source: dict[str, str]) -> str:
        cfg = self.config.feed
        base = cfg.url

        root = Element("feed", attrib={"xmlns": ATOM_NS})
        SubElement(root, "title").text = cfg.title
        if cfg.subtitle:
            SubElement(root, "subtitle").text = cfg.subtitle
        SubElement(root, "link", attrib={
            "href": absolute_url(url_for(cfg.path.lstrip("/")), base),
            "rel": "self",
        })
        SubElement(root, "link", attrib={"href": base})

        newest = newest_collection_item_date(entries)
        # Newest entry date keeps repeated builds byte-identical
        SubElement(root, "updated").text = date_to_rfc3339(newest) if newest else "1970-01-01T00:00:00Z"
        SubElement(root, "id").text = base

        if cfg.author_name:
            author = SubElement(root, "author")
            SubElement(author, "name").text = cfg.author_name
            if cfg.author_email:
                SubElement(author, "email").text = cfg.author_email

        for doc in entries:
            url = absolute_url(doc.url or "/", base)
            entry = SubElement(root, "entry")
            SubElement(entry, "title").text = doc.title
            SubElement(entry, "link", attrib={"href": url})
            SubElement(entry, "updated").text = date_to_rfc3339(doc.date)
            SubElement(entry, "id").text = url
            content = content_by_source.get(doc.source_path, "")
            SubElement(entry, "content", attrib={"type": "html"}).text = html_to_absolute_urls(content, base)

        return '<?xml version="1.0" encoding="utf-8"?>\n' + tostring(root, encoding="unicode") + "\n"
