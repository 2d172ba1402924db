"""Pydantic models for loaded source documents."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_TRUTHY = {"true", "yes", "on", "1"}


class Document(BaseModel):
    """A source file with its front matter split from the body.

    Documents are never mutated after loading. Derived fields (``url`` and
    ``output_path``) are attached with ``model_copy`` before collections are
    built.
    """

    model_config = ConfigDict(frozen=True)

    source_path: str  # POSIX path relative to the content root
    input_path: str
    template_format: str
    file_slug: str
    body: str
    date: datetime
    front_matter: dict[str, Any] = Field(default_factory=dict)
    tags: frozenset[str] = frozenset()
    url: str | None = None
    output_path: str | None = None

    @property
    def data(self) -> dict[str, Any]:
        return self.front_matter

    @property
    def draft(self) -> bool:
        value = self.front_matter.get("draft", False)
        if isinstance(value, str):
            # quoted YAML values such as "false" or "no"
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @property
    def title(self) -> str:
        return str(self.front_matter.get("title") or self.file_slug)

    @property
    def is_written(self) -> bool:
        return self.output_path is not None
