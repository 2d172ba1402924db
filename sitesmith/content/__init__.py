"""Content subsystem: source documents, front matter, and collections."""

from sitesmith.content.collections import ALL_COLLECTION, build_collection, build_collections
from sitesmith.content.frontmatter import parse_frontmatter, split_frontmatter
from sitesmith.content.loader import DocumentLoader, load_documents, load_global_data
from sitesmith.content.models import Document

__all__ = [
    "ALL_COLLECTION",
    "Document",
    "DocumentLoader",
    "build_collection",
    "build_collections",
    "load_documents",
    "load_global_data",
    "parse_frontmatter",
    "split_frontmatter",
]
