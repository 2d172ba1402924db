"""Verbatim copies of configured paths into the output tree."""

from __future__ import annotations

import logging
import posixpath
import shutil
from collections.abc import Iterable
from pathlib import Path

from sitesmith.config.models import PassthroughEntry
from sitesmith.errors import CopyError
from sitesmith.output.models import CopyReport

logger = logging.getLogger(__name__)


class PassthroughCopier:
    """Copies files and directories from the content root to the output root.

    A failing entry never stops the others; failures come back as CopyErrors
    in the report.
    """

    def __init__(self, content_root: str | Path, output_root: str | Path) -> None:
        self.content_root = Path(content_root)
        self.output_root = Path(output_root)

    def copy(
        self,
        entries: Iterable[PassthroughEntry | str],
        reserved: Iterable[str] = (),
    ) -> CopyReport:
        """Copy every entry. ``reserved`` holds output paths already written by the build."""
        report = CopyReport()
        reserved = {posixpath.normpath(p) for p in reserved}
        for entry in entries:
            if isinstance(entry, str):
                entry = PassthroughEntry(src=entry)
            try:
                self._copy_one(entry, reserved)
            except CopyError as e:
                logger.warning("passthrough copy failed: %s", e)
                report.errors.append(e)
            except OSError as e:
                err = CopyError(entry.src, str(e))
                logger.warning("passthrough copy failed: %s", err)
                report.errors.append(err)
            else:
                report.copied.append(entry.src)
        return report

    def _copy_one(self, entry: PassthroughEntry, reserved: set[str]) -> None:
        src = self.content_root / entry.src
        if not src.exists():
            raise CopyError(entry.src, "source does not exist")

        dst = self.output_root / (entry.dst if entry.dst is not None else entry.src)
        if not dst.resolve().is_relative_to(self.output_root.resolve()):
            raise CopyError(entry.src, f"destination escapes output root: {dst}")

        clashes = sorted(self._targets(src, dst) & reserved)
        if clashes:
            raise CopyError(entry.src, "would overwrite rendered output: " + ", ".join(clashes))

        if src.is_dir():
            shutil.copytree(src, dst, dirs_exist_ok=True)
        else:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dst)
        logger.debug("copied %s -> %s", src, dst)

    def _targets(self, src: Path, dst: Path) -> set[str]:
        """Output paths, relative to the output root, that copying src to dst would write."""
        rel = dst.resolve().relative_to(self.output_root.resolve())
        if not src.is_dir():
            return {rel.as_posix()}
        return {
            (rel / f.relative_to(src)).as_posix()
            for f in src.rglob("*")
            if f.is_file()
        }
