"""SiteBuilder: one full, deterministic build pass over the source tree."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Any

from sitesmith.config.models import SiteConfig
from sitesmith.content.collections import build_collections
from sitesmith.content.loader import DocumentLoader, load_global_data, sort_documents
from sitesmith.content.models import Document
from sitesmith.errors import (
    BuildCancelled,
    BuildError,
    ParseError,
    PathCollisionError,
    RenderError,
    SiteError,
)
from sitesmith.filters import default_registry
from sitesmith.filters.registry import FilterRegistry
from sitesmith.output.models import RenderResult
from sitesmith.output.passthrough import PassthroughCopier
from sitesmith.output.paths import resolve_output_path
from sitesmith.output.writer import OutputWriter
from sitesmith.pipeline.models import BuildReport, ReportError
from sitesmith.plugins.base import PluginPipeline, Site
from sitesmith.plugins.loader import PluginLoader
from sitesmith.render.document import DocumentRenderer
from sitesmith.render.templates import TemplateEngine

logger = logging.getLogger(__name__)


def detect_collisions(claims: Iterable[tuple[str, str]]) -> list[PathCollisionError]:
    """One PathCollisionError per output path claimed by more than one source.

    ``claims`` are (output_path, source_path) pairs.
    """
    sources: dict[str, list[str]] = {}
    for path, source in claims:
        sources.setdefault(path, []).append(source)
    return [
        PathCollisionError(path, srcs)
        for path, srcs in sources.items()
        if len(srcs) > 1
    ]


class SiteBuilder:
    """Runs the build phases with barriers between them.

    Configuration (plugins, filters, engines) is resolved in the constructor
    so configuration errors surface before any file is read. Loading,
    rendering and writing fan out over a thread pool of
    ``config.worker_count`` workers.
    """

    def __init__(
        self,
        config: SiteConfig,
        *,
        is_production: bool = False,
        registry: FilterRegistry | None = None,
        plugins: PluginPipeline | None = None,
    ) -> None:
        self.config = config
        self.is_production = is_production
        self.content_root = Path(config.content_root)

        self.plugins = plugins if plugins is not None else PluginLoader(config).load_pipeline()
        self.registry = registry if registry is not None else default_registry(config)
        if not self.registry.frozen:
            self.plugins.register_filters(self.registry)
            self.registry.freeze()

        self.engine = TemplateEngine(config, self.registry.as_mapping())
        self.renderer = DocumentRenderer(config, self.engine)
        self.loader = DocumentLoader(config)
        self.writer = OutputWriter(config.output_root)
        self.copier = PassthroughCopier(self.content_root, config.output_root)
        self._cancel = threading.Event()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Abort the running build at the next phase boundary."""
        self._cancel.set()

    def build(self, *, clean: bool = False, dry_run: bool = False) -> BuildReport:
        """Build the site.

        Raises BuildError for fatal problems (parse errors, path collisions)
        and BuildCancelled if cancel() was called. Render and copy failures
        are collected in the returned report.
        """
        self._cancel.clear()
        self.engine.reset()
        start = time.monotonic()
        report = BuildReport(is_production=self.is_production)
        mode = "production" if self.is_production else "development"
        logger.info("building %s -> %s (%s)", self.content_root, self.config.output_root, mode)

        with ThreadPoolExecutor(max_workers=self.config.worker_count) as pool:
            self._check("load")
            documents = self._load(pool)
            global_data = self._load_global_data()
            documents, path_errors = self._derive_paths(documents)
            report.errors.extend(ReportError.from_exception(e) for e in path_errors)
            report.documents = len(documents)

            collections = build_collections(documents, self.is_production)
            site = Site(
                config=self.config,
                documents=documents,
                collections=collections,
                global_data=global_data,
                is_production=self.is_production,
            )

            self._check("render")
            context = self._context(site)
            results, render_errors = self._render(pool, documents, context)
            report.errors.extend(ReportError.from_exception(e) for e in render_errors)
            extra = self.plugins.finalize(site, results)
            results.extend(extra)

            # Every written document claims its path, rendered or not
            claims = [(d.output_path, d.source_path) for d in documents if d.is_written]
            claims.extend((r.path, r.source_path) for r in extra)
            collisions = detect_collisions(claims)
            if collisions:
                for c in collisions:
                    logger.error("%s", c)
                raise BuildError(collisions)

            self._check("write")
            if clean and not dry_run:
                self.writer.clean()
            written = list(pool.map(lambda r: self.writer.write(r.path, r.data, dry_run=dry_run), results))
            report.written = [r.path for r in results]
            logger.debug("wrote %d file(s)", len(written))

        if not dry_run:
            self._check("passthrough")
            copy_report = self.copier.copy(self.config.passthrough, reserved=report.written)
            report.copied = copy_report.copied
            report.errors.extend(ReportError.from_exception(e) for e in copy_report.errors)

        report.duration = time.monotonic() - start
        logger.info(
            "built %d file(s), copied %d path(s), %d error(s) in %.2fs",
            len(report.written), len(report.copied), len(report.errors), report.duration,
        )
        return report

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _check(self, phase: str) -> None:
        if self._cancel.is_set():
            logger.warning("build cancelled before %s", phase)
            raise BuildCancelled(phase)

    def _load(self, pool: Executor) -> list[Document]:
        paths = self.loader.discover()
        outcomes = list(pool.map(self._try_load, paths))
        errors = [o for o in outcomes if isinstance(o, ParseError)]
        if errors:
            for e in errors:
                logger.error("%s", e)
            raise BuildError(errors)
        return sort_documents(o for o in outcomes if isinstance(o, Document))

    def _try_load(self, path: Path) -> Document | ParseError:
        try:
            return self.loader.load_file(path)
        except ParseError as e:
            return e

    def _load_global_data(self) -> dict[str, Any]:
        try:
            return load_global_data(self.content_root / self.config.data_dir)
        except ParseError as e:
            logger.error("%s", e)
            raise BuildError([e]) from e

    def _derive_paths(self, documents: list[Document]) -> tuple[list[Document], list[SiteError]]:
        derived: list[Document] = []
        errors: list[SiteError] = []
        for doc in documents:
            try:
                output_path, url = resolve_output_path(doc.source_path, doc.front_matter)
            except RenderError as e:
                logger.error("%s", e)
                errors.append(e)
                continue
            derived.append(doc.model_copy(update={"output_path": output_path, "url": url}))
        return derived, errors

    def _context(self, site: Site) -> dict[str, Any]:
        return {
            **site.global_data,
            "site": self.config.site,
            "collections": site.collections,
            "is_production": self.is_production,
            **self.plugins.prepare(site),
        }

    def _render(
        self,
        pool: Executor,
        documents: list[Document],
        context: dict[str, Any],
    ) -> tuple[list[RenderResult], list[SiteError]]:
        to_render = [d for d in documents if d.is_written]
        outcomes = list(pool.map(lambda d: self._try_render(d, context), to_render))
        results = [o for o in outcomes if isinstance(o, RenderResult)]
        errors: list[SiteError] = [o for o in outcomes if isinstance(o, RenderError)]
        for e in errors:
            logger.error("%s", e)
        return results, errors

    def _try_render(self, document: Document, context: dict[str, Any]) -> RenderResult | RenderError:
        try:
            return self.renderer.render(document, context)
        except RenderError as e:
            return e


def build_site(config: SiteConfig, is_production: bool = False, **kwargs: Any) -> BuildReport:
    return SiteBuilder(config, is_production=is_production).build(**kwargs)
