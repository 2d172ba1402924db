"""Per-document rendering: template pre-processing, Markdown, then layouts."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from jinja2 import TemplateError

from sitesmith.config.models import SiteConfig
from sitesmith.content.models import Document
from sitesmith.errors import ParseError, RenderError
from sitesmith.output.models import RenderResult
from sitesmith.output.paths import resolve_output_path
from sitesmith.render.markdown import MarkdownRenderer
from sitesmith.render.templates import LayoutCycleError, LayoutNotFoundError, TemplateEngine

logger = logging.getLogger(__name__)

OutputPathFn = Callable[[Document], str | None]

# Formats that are template-engine source in their own right
_TEMPLATE_FORMATS = {"njk", "liquid", "jinja", "j2"}


def default_output_path(document: Document) -> str | None:
    if document.output_path is not None:
        return document.output_path
    output_path, _url = resolve_output_path(document.source_path, document.front_matter)
    return output_path


def page_data(document: Document) -> dict[str, Any]:
    """The ``page`` variable exposed to templates."""
    return {
        "url": document.url,
        "input_path": document.source_path,
        "output_path": document.output_path,
        "date": document.date,
        "file_slug": document.file_slug,
    }


class DocumentRenderer:
    """Turns one Document into output bytes using the shared engines.

    Holds no per-build state, so one renderer serves every worker thread.
    """

    def __init__(
        self,
        config: SiteConfig,
        engine: TemplateEngine,
        markdown: MarkdownRenderer | None = None,
    ) -> None:
        self.config = config
        self.engine = engine
        self.markdown = markdown or MarkdownRenderer(config.markdown, config.highlight)

    def uses_template_engine(self, template_format: str) -> bool:
        if template_format == "md":
            return self.config.markdown_template_engine == "jinja"
        if template_format == "html":
            return self.config.html_template_engine == "jinja"
        return template_format in _TEMPLATE_FORMATS

    def render_content(self, document: Document, context: Mapping[str, Any]) -> str:
        """The document's own HTML, before any layout is applied."""
        body = document.body
        if self.uses_template_engine(document.template_format):
            body = self.engine.render_string(body, context)
        if document.template_format == "md":
            body = self.markdown.render(body)
        return body

    def render(
        self,
        document: Document,
        context: Mapping[str, Any] | None = None,
        output_path_fn: OutputPathFn = default_output_path,
    ) -> RenderResult:
        """Render ``document``. Raises RenderError on any template or layout failure."""
        path = output_path_fn(document)
        if path is None:
            raise RenderError(document.source_path, "document has no output path (permalink: false)")

        data = dict(document.front_matter)
        data.pop("layout", None)
        ctx = {**(context or {}), **data, "page": page_data(document)}

        try:
            content = self.render_content(document, ctx)
            html = self.engine.apply_layouts(
                document.front_matter.get("layout"),
                content,
                context or {},
                {**data, "page": ctx["page"]},
            )
        except TemplateError as e:
            raise RenderError(document.source_path, f"{type(e).__name__}: {e}") from e
        except (LayoutNotFoundError, LayoutCycleError, ParseError) as e:
            raise RenderError(document.source_path, str(e)) from e
        except Exception as e:
            # raised from inside templates, filters or layout reads
            raise RenderError(document.source_path, f"{type(e).__name__}: {e}") from e

        logger.debug("rendered %s -> %s", document.source_path, path)
        return RenderResult(
            path=path,
            data=html.encode("utf-8"),
            source_path=document.source_path,
            content=content,
        )


def render_document(
    document: Document,
    renderer: DocumentRenderer,
    output_path_fn: OutputPathFn = default_output_path,
    context: Mapping[str, Any] | None = None,
) -> RenderResult:
    return renderer.render(document, context, output_path_fn)
