"""Post-processing stages: navigation and feed, plus the loader for third-party plugins."""

from sitesmith.plugins.base import Plugin, PluginPipeline, Site
from sitesmith.plugins.loader import PluginLoader

__all__ = [
    "Plugin",
    "PluginLoader",
    "PluginPipeline",
    "Site",
]
