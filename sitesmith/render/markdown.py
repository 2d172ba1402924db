"""Markdown renderer: markdown-it-py with heading permalinks and Pygments highlighting."""

from __future__ import annotations

import html
import logging
from collections.abc import Callable

from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from mdit_py_plugins.anchors import anchors_plugin
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from sitesmith.config.models import HighlightConfig, MarkdownConfig
from sitesmith.filters.builtin import slugify

logger = logging.getLogger(__name__)

HIGHLIGHT_CSS_CLASS = "highlight"

_formatter = HtmlFormatter(nowrap=True)


def highlight_code(code: str, lang: str, _attrs: str = "") -> str:
    """Highlight a fenced code block.

    Returns a complete ``<pre>`` element, or "" to let markdown-it fall back
    to its own escaped rendering (no language given).
    """
    lang = (lang or "").strip().lower()
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
        body = pygments_highlight(code, lexer, _formatter)
    except ClassNotFound:
        logger.debug("no Pygments lexer for %r, leaving block unhighlighted", lang)
        body = html.escape(code)
    css_lang = html.escape(lang, quote=True)
    return (
        f'<pre class="{HIGHLIGHT_CSS_CLASS} language-{css_lang}">'
        f'<code class="language-{css_lang}">{body}</code></pre>'
    )


def highlight_css(style: str = "default") -> str:
    """Pygments stylesheet matching the markup produced by highlight_code."""
    return HtmlFormatter(style=style).get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")


def _permalink_attrs(css_class: str) -> Callable[[StateCore], None]:
    """Core rule run after the anchors plugin: retag its permalinks."""

    def rule(state: StateCore) -> None:
        for token in state.tokens:
            if token.type != "inline" or not token.children:
                continue
            for child in token.children:
                if child.type == "link_open" and child.attrGet("class") == "header-anchor":
                    child.attrSet("class", css_class)
                    child.attrSet("aria-hidden", "true")

    return rule


def create_markdown(
    config: MarkdownConfig | None = None,
    highlight: HighlightConfig | None = None,
    slug_func: Callable[[str], str] = slugify,
) -> MarkdownIt:
    """Build the markdown-it instance used for every .md document."""
    config = config or MarkdownConfig()
    highlight = highlight or HighlightConfig()

    options = {
        "html": config.html,
        "breaks": config.breaks,
        "linkify": config.linkify,
    }
    if highlight.enabled:
        options["highlight"] = highlight_code

    md = MarkdownIt("js-default", options)
    if config.anchor_levels:
        md.use(
            anchors_plugin,
            min_level=min(config.anchor_levels),
            max_level=max(config.anchor_levels),
            slug_func=slug_func,
            permalink=True,
            permalinkSymbol=config.anchor_symbol,
            permalinkBefore=False,
        )
        md.core.ruler.push("permalink_attrs", _permalink_attrs(config.anchor_class))
    return md


class MarkdownRenderer:
    def __init__(
        self,
        config: MarkdownConfig | None = None,
        highlight: HighlightConfig | None = None,
    ) -> None:
        self._md = create_markdown(config, highlight)

    def render(self, text: str) -> str:
        return self._md.render(text)
