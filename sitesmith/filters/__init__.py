"""Filter registry and the default set of template filters."""

from __future__ import annotations

from sitesmith.config.models import SiteConfig
from sitesmith.filters.builtin import (
    head,
    html_date_string,
    make_url_filter,
    min_value,
    readable_date,
    slugify,
)
from sitesmith.filters.registry import FilterRegistry


def default_registry(config: SiteConfig | None = None) -> FilterRegistry:
    """A registry holding the built-in filters. Not yet frozen."""
    config = config or SiteConfig()
    registry = FilterRegistry()
    registry.register("readableDate", readable_date)
    registry.register("htmlDateString", html_date_string)
    registry.register("head", head)
    registry.register("min", min_value)
    registry.register("slug", slugify)
    registry.register("url", make_url_filter(config.path_prefix))
    return registry


__all__ = [
    "FilterRegistry",
    "default_registry",
    "head",
    "html_date_string",
    "min_value",
    "readable_date",
    "slugify",
]
