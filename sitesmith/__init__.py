"""sitesmith - a static site build pipeline: load, collect, render, copy."""

from sitesmith.config import SiteConfig, is_production_env, load_config
from sitesmith.content import Document, DocumentLoader, build_collection, build_collections
from sitesmith.filters import FilterRegistry, default_registry
from sitesmith.output import OutputWriter, PassthroughCopier
from sitesmith.pipeline import BuildReport, SiteBuilder, build_site
from sitesmith.render import DocumentRenderer, TemplateEngine

__version__ = "0.1.0"

__all__ = [
    "BuildReport",
    "Document",
    "DocumentLoader",
    "DocumentRenderer",
    "FilterRegistry",
    "OutputWriter",
    "PassthroughCopier",
    "SiteBuilder",
    "SiteConfig",
    "TemplateEngine",
    "build_collection",
    "build_collections",
    "build_site",
    "default_registry",
    "is_production_env",
    "load_config",
]
