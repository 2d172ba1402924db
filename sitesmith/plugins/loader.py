"""Plugin discovery and loading via built-ins and entry points."""

from __future__ import annotations

import importlib
import importlib.metadata
import logging

from sitesmith.config.models import SiteConfig
from sitesmith.errors import PluginNotFoundError
from sitesmith.plugins.base import Plugin, PluginPipeline

logger = logging.getLogger(__name__)


class PluginLoader:
    """Resolves plugin names: built-ins first, then the entry point group."""

    GROUP = "sitesmith.plugins"

    # Built-in stages (lazy import paths)
    BUILTINS = {
        "navigation": ("sitesmith.plugins.navigation", "NavigationPlugin"),
        "feed": ("sitesmith.plugins.feed", "FeedPlugin"),
    }

    def __init__(self, config: SiteConfig):
        self._config = config

    def discover(self) -> list[str]:
        """Every loadable plugin name, built-ins first."""
        names = list(self.BUILTINS)
        for ep in importlib.metadata.entry_points(group=self.GROUP):
            if ep.name not in names:
                names.append(ep.name)
        return names

    def _load_builtin(self, name: str) -> type[Plugin] | None:
        if name not in self.BUILTINS:
            return None
        module_path, class_name = self.BUILTINS[name]
        module = importlib.import_module(module_path)
        return getattr(module, class_name)

    def _load_from_entry_point(self, name: str) -> type[Plugin] | None:
        for ep in importlib.metadata.entry_points(group=self.GROUP):
            if ep.name == name:
                return ep.load()
        return None

    def load(self, name: str) -> Plugin:
        plugin_cls = self._load_builtin(name) or self._load_from_entry_point(name)
        if plugin_cls is None:
            raise PluginNotFoundError(name)
        logger.debug("loaded plugin %s (%s)", name, plugin_cls.__name__)
        return plugin_cls(self._config)

    def load_pipeline(self, names: list[str] | None = None) -> PluginPipeline:
        """Load the named plugins (default: config.plugins) in order."""
        names = self._config.plugins if names is None else names
        return PluginPipeline([self.load(n) for n in names])
