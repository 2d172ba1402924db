"""Writes rendered bytes under the output root."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes rendered files beneath a single output root.

    Creates intermediate directories and refuses any destination that
    resolves outside the root.
    """

    def __init__(self, output_root: str | Path) -> None:
        self.output_root = Path(output_root)

    def destination(self, rel_path: str) -> Path:
        dest = self.output_root / rel_path
        if not dest.resolve().is_relative_to(self.output_root.resolve()):
            raise ValueError(f"Output path escapes output root: {rel_path}")
        return dest

    def write(self, rel_path: str, data: bytes, *, dry_run: bool = False) -> Path:
        """Write one file. Returns the Path of the written (or would-be) file."""
        dest = self.destination(rel_path)

        if dry_run:
            logger.debug("dry-run: would write %s", dest)
            return dest

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)
        logger.debug("wrote %s (%d bytes)", dest, len(data))
        return dest

    def clean(self) -> bool:
        """Remove the whole output root. Returns True if anything was removed."""
        if not self.output_root.exists():
            return False
        shutil.rmtree(self.output_root)
        logger.info("removed %s", self.output_root)
        return True
