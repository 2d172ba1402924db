"""Build orchestration."""

from sitesmith.pipeline.builder import SiteBuilder, build_site, detect_collisions
from sitesmith.pipeline.models import BuildReport, ReportError

__all__ = [
    "BuildReport",
    "ReportError",
    "SiteBuilder",
    "build_site",
    "detect_collisions",
]
