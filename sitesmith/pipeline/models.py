"""Pydantic models for build reporting."""

from __future__ import annotations

from pydantic import BaseModel, Field

from sitesmith.errors import CopyError, RenderError, SiteError


class ReportError(BaseModel):
    file: str
    error: str
    kind: str = "error"

    @classmethod
    def from_exception(cls, exc: SiteError) -> ReportError:
        if isinstance(exc, CopyError):
            return cls(file=exc.src, error=exc.reason, kind="copy")
        if isinstance(exc, RenderError):
            return cls(file=exc.path, error=exc.reason, kind="render")
        return cls(file=getattr(exc, "path", ""), error=str(exc), kind=type(exc).__name__)


class BuildReport(BaseModel):
    documents: int = 0
    written: list[str] = Field(default_factory=list)
    copied: list[str] = Field(default_factory=list)
    errors: list[ReportError] = Field(default_factory=list)
    duration: float = 0.0
    is_production: bool = False

    @property
    def ok(self) -> bool:
        return not self.errors
