"""Jump from a match row to its location in the document pane.

Cursor placement is the load-bearing step and happens synchronously. The
selection and the transient line highlight are applied after a short settle
delay and are best-effort: a failure there never undoes the jump.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .document_pane import DocumentPane, Position
from .refresh import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

NAVIGATION_SETTLE_SECONDS = 0.1
SELECTION_COLLAPSE_SECONDS = 0.2
LINE_HIGHLIGHT_SECONDS = 2.0


class DocumentStore(Protocol):
    def exists(self, path: str) -> bool: ...

    def read(self, path: str) -> str: ...

    def absolute_path(self, path: str) -> Path: ...


def resolve_selection(line_text: str, matched_text: str, line: int) -> tuple[Position, Position]:
    """Select ``matched_text`` on ``line`` if still present, else the whole line."""
    needle = matched_text.strip()
    start = line_text.lower().find(needle.lower()) if needle else -1
    if start < 0:
        return (line, 0), (line, len(line_text))
    return (line, start), (line, start + len(needle))


class Navigator:
    """Open documents in ``pane`` and mark the activated match."""

    def __init__(
        self,
        store: DocumentStore,
        pane: DocumentPane,
        scheduler: Scheduler,
        visible_rows: Callable[[], int] = lambda: 0,
    ) -> None:
        self.store = store
        self.pane = pane
        self.scheduler = scheduler
        self.visible_rows = visible_rows
        self._pending_highlight: tuple[TimerHandle, str, int] | None = None

    def activate(self, path: str, line: int, text: str) -> bool:
        """Navigate to ``line`` of ``path``. Missing documents are a no-op."""
        if not self.store.exists(path):
            logger.debug("navigation target vanished: %s", path)
            return False
        try:
            source = self.store.read(path)
        except OSError as exc:
            logger.warning("cannot open %s: %s", path, exc)
            return False

        pane = self.pane
        if pane.path != path or pane.source_text != source:
            pane.open(path, source, self.store.absolute_path(path))
        pane.focused = True
        pane.set_cursor(line, 0)
        pane.scroll_into_view(line, self.visible_rows())

        self.scheduler.call_later(
            NAVIGATION_SETTLE_SECONDS,
            lambda: self._mark_match(path, line, text),
        )
        return True

    def _mark_match(self, path: str, line: int, text: str) -> None:
        pane = self.pane
        if pane.path != path:
            return
        pane.set_cursor(line, 0)
        start, end = resolve_selection(pane.get_line(line), text, line)
        pane.set_selection(start, end)
        self.scheduler.call_later(
            SELECTION_COLLAPSE_SECONDS,
            lambda: self._collapse_selection(path, start),
        )

        self._drop_pending_highlight()
        try:
            pane.add_line_highlight(line)
        except Exception:
            logger.debug("line highlight unavailable for %s:%d", path, line, exc_info=True)
            return
        handle = self.scheduler.call_later(
            LINE_HIGHLIGHT_SECONDS,
            lambda: self._clear_highlight(path, line),
        )
        self._pending_highlight = (handle, path, line)

    def _drop_pending_highlight(self) -> None:
        """Cancel the previous highlight timer and clear its line now."""
        if self._pending_highlight is None:
            return
        handle, path, line = self._pending_highlight
        self.scheduler.cancel(handle)
        self._clear_highlight(path, line)

    def _collapse_selection(self, path: str, position: Position) -> None:
        if self.pane.path == path and self.pane.selection is not None:
            self.pane.set_cursor(*position)

    def _clear_highlight(self, path: str, line: int) -> None:
        self._pending_highlight = None
        if self.pane.path == path:
            self.pane.remove_line_highlight(line)
