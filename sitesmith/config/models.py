import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class PassthroughEntry(BaseModel):
    src: str
    dst: str | None = None


class MarkdownConfig(BaseModel):
    html: bool = True
    breaks: bool = False
    linkify: bool = True
    anchor_levels: list[int] = Field(default_factory=lambda: [1, 2, 3, 4])
    anchor_symbol: str = "#"
    anchor_class: str = "direct-link"


class HighlightConfig(BaseModel):
    enabled: bool = True
    style: str = "default"


class FeedConfig(BaseModel):
    path: str = "feed.xml"
    collection: str = "posts"
    title: str = "Blog"
    subtitle: str = ""
    url: str = "https://example.com/"
    author_name: str = ""
    author_email: str = ""
    limit: int = Field(default=10, ge=0)


class SiteConfig(BaseModel):
    content_root: str = "."
    output_root: str = "_site"
    includes_dir: str = "_includes"
    data_dir: str = "_data"
    template_formats: list[str] = Field(default_factory=lambda: ["md", "njk", "html", "liquid"])
    markdown_template_engine: Literal["jinja", "none"] = "jinja"
    html_template_engine: Literal["jinja", "none"] = "jinja"
    passthrough: list[PassthroughEntry] = Field(default_factory=list)
    worker_count: int = Field(default_factory=lambda: os.cpu_count() or 1, gt=0)
    path_prefix: str = "/"
    site: dict[str, Any] = Field(default_factory=dict)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    highlight: HighlightConfig = Field(default_factory=HighlightConfig)
    plugins: list[str] = Field(default_factory=lambda: ["navigation", "feed"])
    feed: FeedConfig = Field(default_factory=FeedConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

    @field_validator("passthrough", mode="before")
    @classmethod
    def _coerce_passthrough(cls, value: Any) -> Any:
        # Plain strings are shorthand for {src: <string>}
        if isinstance(value, list):
            return [{"src": v} if isinstance(v, str) else v for v in value]
        return value

    @field_validator("template_formats")
    @classmethod
    def _normalize_formats(cls, value: list[str]) -> list[str]:
        return [v.lower().lstrip(".") for v in value]

    @model_validator(mode="after")
    def _output_outside_content(self) -> "SiteConfig":
        # clean() removes the output root, so it must never hold the sources
        content = Path(self.content_root).resolve()
        output = Path(self.output_root).resolve()
        if content.is_relative_to(output):
            raise ValueError(
                f"output_root {self.output_root!r} must not be or contain content_root {self.content_root!r}"
            )
        return self
