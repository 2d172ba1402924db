"""Output subsystem: path mapping, writing, and passthrough copies."""

from sitesmith.output.models import CopyReport, RenderResult
from sitesmith.output.passthrough import PassthroughCopier
from sitesmith.output.paths import resolve_output_path, url_for
from sitesmith.output.writer import OutputWriter

__all__ = [
    "CopyReport",
    "OutputWriter",
    "PassthroughCopier",
    "RenderResult",
    "resolve_output_path",
    "url_for",
]
