"""File watcher that triggers full rebuilds after a quiet period."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# Directories never worth a rebuild
_IGNORE_PARTS = {".git", "node_modules", "__pycache__"}


class _ChangeHandler(FileSystemEventHandler):
    """Records the time of the latest relevant change under the watched tree."""

    def __init__(self, ignored_roots: list[Path], lock: threading.Lock) -> None:
        super().__init__()
        self._ignored_roots = ignored_roots
        self._lock = lock
        self.changed: set[str] = set()
        self.last_event = 0.0

    def should_ignore(self, path: str) -> bool:
        p = Path(path)
        if any(part in _IGNORE_PARTS for part in p.parts):
            return True
        resolved = p.resolve()
        return any(resolved.is_relative_to(root) for root in self._ignored_roots)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        src = str(event.src_path)
        if self.should_ignore(src):
            return
        with self._lock:
            self.changed.add(src)
            self.last_event = time.monotonic()


class SiteWatcher:
    """Watches the content root and reports when a rebuild is due.

    Editors often save with a temp file plus rename, so changes are only
    reported once ``debounce_seconds`` have passed without a new event.
    The output root is ignored so our own writes never trigger a rebuild.
    """

    def __init__(
        self,
        content_root: str | Path,
        output_root: str | Path,
        debounce_seconds: float = 0.5,
    ) -> None:
        self._content_root = Path(content_root).resolve()
        self._debounce = debounce_seconds
        self._lock = threading.Lock()
        self._handler = _ChangeHandler([Path(output_root).resolve()], self._lock)
        self._observer: Observer | None = None

    def start(self) -> None:
        if self._observer is not None:
            return
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self._content_root), recursive=True)
        self._observer.start()
        logger.info("Watching %s for changes", self._content_root)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self._content_root)

    def take_changes(self, now: float | None = None) -> set[str]:
        """Return and clear the changed paths once the quiet period has elapsed."""
        now = time.monotonic() if now is None else now
        with self._lock:
            if not self._handler.changed or now - self._handler.last_event < self._debounce:
                return set()
            changed = set(self._handler.changed)
            self._handler.changed.clear()
        return changed
