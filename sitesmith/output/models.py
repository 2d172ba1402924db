"""Pydantic models for rendered output and passthrough copies."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from sitesmith.errors import CopyError


class RenderResult(BaseModel):
    """One output file produced by the build, held in memory until written."""

    model_config = ConfigDict(frozen=True)

    path: str  # relative to the output root
    data: bytes
    source_path: str
    content: str = ""  # document HTML before layouts were applied


class CopyReport(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    copied: list[str] = Field(default_factory=list)
    errors: list[CopyError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
