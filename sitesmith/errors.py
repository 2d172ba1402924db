"""Error taxonomy for the build pipeline.

Configuration-time errors (duplicate or unknown filters, unknown plugins,
invalid config) are raised before any I/O. Per-document errors (render,
copy) are collected into the BuildReport. Parse errors and path collisions
abort the build through BuildError.
"""

from __future__ import annotations

from pathlib import Path


class SiteError(Exception):
    """Base class for every sitesmith error."""


class ConfigError(SiteError):
    """Raised when sitesmith.yaml cannot be read or validated."""


class NotFoundError(SiteError):
    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"Not found: {self.path}")


class ParseError(SiteError):
    """Malformed front matter or data file."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class DuplicateNameError(SiteError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Filter '{name}' is already registered")


class UnknownFilterError(SiteError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No filter named '{name}'")


class PluginNotFoundError(SiteError):
    """Raised when a configured plugin name cannot be resolved."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No plugin found with name '{name}'")


class RenderError(SiteError):
    """A single document failed to render."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class CopyError(SiteError):
    """A passthrough path could not be copied."""

    def __init__(self, src: str | Path, reason: str) -> None:
        self.src = str(src)
        self.reason = reason
        super().__init__(f"{self.src}: {reason}")


class PathCollisionError(SiteError):
    """Two or more documents resolved to the same output path."""

    def __init__(self, path: str, sources: list[str]) -> None:
        self.path = path
        self.sources = list(sources)
        super().__init__(
            f"Output path {path} is written by more than one source: "
            + ", ".join(self.sources)
        )


class BuildError(SiteError):
    """Aggregate of fatal errors that aborted a build."""

    def __init__(self, errors: list[SiteError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(str(e) for e in self.errors[:3])
        if len(self.errors) > 3:
            summary += f" (+{len(self.errors) - 3} more)"
        super().__init__(f"Build failed with {len(self.errors)} error(s): {summary}")


class BuildCancelled(SiteError):
    """The build was cancelled between phases."""

    def __init__(self, phase: str) -> None:
        self.phase = phase
        super().__init__(f"Build cancelled before {phase}")
