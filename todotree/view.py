"""One todo-tree view instance.

A view owns its expansion state, the latest scan, the match tree built from
it, and the rendered tree. ``refresh`` runs the full cycle in a fixed order:
capture expansion from the current rendering, rescan, rebuild, re-render.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .expansion import ExpansionState
from .render import (
    FileView,
    FolderView,
    MatchActivated,
    MatchRow,
    RenderedTree,
    capture_expansion,
    collapse_all,
    expand_all,
    render_tree,
    visible_items,
)
from .scanner import DocumentSource, ScanResult, scan_corpus
from .tree_model import TreeNode, build_match_tree

logger = logging.getLogger(__name__)

Row = FolderView | FileView | MatchRow


def row_key(row: Row) -> tuple[str, str, int]:
    """Identity of a row that survives a rebuild."""
    if isinstance(row, MatchRow):
        return ("match", row.path, row.line)
    if isinstance(row, FolderView):
        return ("folder", row.path, -1)
    return ("file", row.path, -1)


class TodoTreeView:
    def __init__(
        self,
        source: DocumentSource,
        markers: Callable[[], Sequence[str]],
        on_match_activated: MatchActivated | None = None,
        state: ExpansionState | None = None,
    ) -> None:
        self.source = source
        self.markers = markers
        self.on_match_activated = on_match_activated
        self.state = state if state is not None else ExpansionState()
        self.scan: ScanResult = {}
        self.root: TreeNode = build_match_tree({})
        self.rendered: RenderedTree | None = None
        self.selected = 0
        self.render_count = 0
        self.detached = False

    @property
    def total_matches(self) -> int:
        return self.root.match_count

    def open(self) -> None:
        """Initial scan and render; expansion state is used as-is."""
        self._rescan()
        self._render()

    def refresh(self) -> None:
        if self.detached:
            return
        previous_key = self._selected_key()
        if self.rendered is not None:
            self.state.replace(capture_expansion(self.rendered))
        self._rescan()
        self._render()
        self._restore_selection(previous_key)
        logger.debug(
            "refreshed view: %d documents, %d matches",
            len(self.scan),
            self.root.match_count,
        )

    def detach(self) -> None:
        self.detached = True
        self.rendered = None

    def _rescan(self) -> None:
        self.scan = scan_corpus(self.source, list(self.markers()))
        self.root = build_match_tree(self.scan)

    def _render(self) -> None:
        self.rendered = render_tree(self.root, self.scan, self.state, self.on_match_activated)
        self.render_count += 1
        self._clamp_selection()

    def rows(self) -> list[Row]:
        if self.rendered is None:
            return []
        return visible_items(self.rendered)

    def selected_row(self) -> Row | None:
        rows = self.rows()
        if 0 <= self.selected < len(rows):
            return rows[self.selected]
        return None

    def _selected_key(self) -> tuple[str, str, int] | None:
        row = self.selected_row()
        return row_key(row) if row is not None else None

    def _restore_selection(self, key: tuple[str, str, int] | None) -> None:
        if key is None:
            return
        for idx, row in enumerate(self.rows()):
            if row_key(row) == key:
                self.selected = idx
                return
        self._clamp_selection()

    def _clamp_selection(self) -> None:
        self.selected = max(0, min(self.selected, len(self.rows()) - 1))

    def move_selection(self, delta: int) -> bool:
        rows = self.rows()
        if not rows:
            return False
        target = max(0, min(self.selected + delta, len(rows) - 1))
        if target == self.selected:
            return False
        self.selected = target
        return True

    def activate_selected(self) -> object:
        """Toggle a selected folder or activate a selected match row."""
        row = self.selected_row()
        if isinstance(row, FolderView):
            row.toggle()
            self._clamp_selection()
            return row.open
        if isinstance(row, MatchRow):
            return row.activate()
        return None

    def set_selected_folder_open(self, is_open: bool) -> bool:
        """Open or close the selected folder; closing on a child jumps to its folder."""
        row = self.selected_row()
        if isinstance(row, FolderView):
            if row.open == is_open:
                return False
            row.set_open(is_open)
            self._clamp_selection()
            return True
        if is_open or row is None:
            return False
        parent_path = row.path.rsplit("/", 1)[0] if "/" in row.path else ""
        for idx, candidate in enumerate(self.rows()):
            if isinstance(candidate, FolderView) and candidate.path == parent_path:
                candidate.set_open(False)
                self.selected = idx
                return True
        return False

    def expand_all(self) -> None:
        if self.rendered is not None:
            expand_all(self.rendered, self.state)

    def collapse_all(self) -> None:
        previous_key = self._selected_key()
        if self.rendered is not None:
            collapse_all(self.rendered, self.state)
        self._restore_selection(previous_key)
