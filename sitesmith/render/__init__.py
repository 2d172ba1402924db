"""Rendering subsystem: Markdown, Jinja2 templates, and layout chains."""

from sitesmith.render.document import DocumentRenderer, default_output_path, render_document
from sitesmith.render.markdown import MarkdownRenderer, create_markdown, highlight_code, highlight_css
from sitesmith.render.templates import Layout, TemplateEngine

__all__ = [
    "DocumentRenderer",
    "Layout",
    "MarkdownRenderer",
    "TemplateEngine",
    "create_markdown",
    "default_output_path",
    "highlight_code",
    "highlight_css",
    "render_document",
]
