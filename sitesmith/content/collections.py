"""Tag collections with draft exclusion for production builds."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sitesmith.content.models import Document

ALL_COLLECTION = "all"


def build_collection(
    tag: str,
    documents: Sequence[Document],
    is_production: bool,
) -> tuple[Document, ...]:
    """Documents tagged ``tag``, in input order, minus drafts when in production.

    Tags are a set, so a document is a member at most once no matter how
    many times the tag was repeated in its front matter.
    """
    return tuple(
        doc for doc in documents
        if tag in doc.tags and not (is_production and doc.draft)
    )


def build_collections(
    documents: Sequence[Document],
    is_production: bool,
) -> dict[str, tuple[Document, ...]]:
    """Build one collection per tag in use, plus ``all``.

    ``all`` holds every document that gets written to the output.
    """
    collections = {
        tag: build_collection(tag, documents, is_production)
        for tag in sorted(_all_tags(documents))
    }
    collections[ALL_COLLECTION] = tuple(
        doc for doc in documents
        if doc.is_written and not (is_production and doc.draft)
    )
    return collections


def _all_tags(documents: Iterable[Document]) -> set[str]:
    tags: set[str] = set()
    for doc in documents:
        tags.update(doc.tags)
    return tags
