"""Plugin stages run around the render phase in configured order."""

from __future__ import annotations

from abc import ABC
from typing import Any

from pydantic import BaseModel, Field

from sitesmith.config.models import SiteConfig
from sitesmith.content.models import Document
from sitesmith.filters.registry import FilterRegistry
from sitesmith.output.models import RenderResult


class Site(BaseModel):
    """Read-only view of a build handed to plugin stages."""

    config: SiteConfig
    documents: list[Document] = Field(default_factory=list)
    collections: dict[str, tuple[Document, ...]] = Field(default_factory=dict)
    global_data: dict[str, Any] = Field(default_factory=dict)
    is_production: bool = False


class Plugin(ABC):
    """A post-processing stage with a narrow contract.

    - ``register_filters`` runs at configuration time, before the registry
      is frozen.
    - ``prepare`` runs after collections are built and returns variables to
      add to every template context.
    - ``finalize`` runs after every document has rendered and returns extra
      output files.
    """

    name: str = ""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config

    def register_filters(self, registry: FilterRegistry) -> None:
        return None

    def prepare(self, site: Site) -> dict[str, Any]:
        return {}

    def finalize(self, site: Site, results: list[RenderResult]) -> list[RenderResult]:
        return []


class PluginPipeline:
    def __init__(self, plugins: list[Plugin]):
        self.plugins = plugins

    def register_filters(self, registry: FilterRegistry) -> None:
        for p in self.plugins:
            p.register_filters(registry)

    def prepare(self, site: Site) -> dict[str, Any]:
        context: dict[str, Any] = {}
        for p in self.plugins:
            context.update(p.prepare(site))
        return context

    def finalize(self, site: Site, results: list[RenderResult]) -> list[RenderResult]:
        extra: list[RenderResult] = []
        for p in self.plugins:
            extra.extend(p.finalize(site, results))
        return extra
