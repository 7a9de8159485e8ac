"""Render a match tree into the view-layer tree and back.

The rendered tree is rebuilt wholesale on every refresh. Folder open state
comes from ``ExpansionState`` at creation time and flows back into it when
the user toggles a folder, which is what makes expansion survive rebuilds.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .expansion import ExpansionState
from .matching import icon_for_match
from .scanner import ScanResult
from .tree_model import TreeNode

MatchActivated = Callable[[str, int, str], object]


@dataclass
class MatchRow:
    """One clickable match line under a file header."""

    path: str
    line: int
    text: str
    icon: str
    depth: int
    on_activate: MatchActivated | None = None

    def activate(self) -> object:
        if self.on_activate is None:
            return None
        return self.on_activate(self.path, self.line, self.text)


@dataclass
class FileView:
    name: str
    path: str
    match_count: int
    depth: int
    rows: list[MatchRow] = field(default_factory=list)


@dataclass
class FolderView:
    """Collapsible folder container; toggling writes through to ``state``."""

    name: str
    path: str
    match_count: int
    depth: int
    state: ExpansionState
    open: bool = False
    children: list[FolderView | FileView] = field(default_factory=list)

    def set_open(self, is_open: bool) -> None:
        self.open = is_open
        self.state.set_expanded(self.path, is_open)

    def toggle(self) -> bool:
        self.set_open(not self.open)
        return self.open


@dataclass
class RenderedTree:
    """Top-level rendered items; the pseudo-root is not represented."""

    items: list[FolderView | FileView] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items


def _render_node(
    node: TreeNode,
    scan: ScanResult,
    state: ExpansionState,
    depth: int,
    on_match_activated: MatchActivated | None,
) -> FolderView | FileView | None:
    if not node.has_matches:
        return None

    if node.is_file:
        file_view = FileView(name=node.name, path=node.path, match_count=node.match_count, depth=depth)
        for match in scan.get(node.path, []):
            file_view.rows.append(
                MatchRow(
                    path=node.path,
                    line=match.line,
                    text=match.text,
                    icon=icon_for_match(match.text),
                    depth=depth + 1,
                    on_activate=on_match_activated,
                )
            )
        return file_view

    folder_view = FolderView(
        name=node.name,
        path=node.path,
        match_count=node.match_count,
        depth=depth,
        state=state,
        open=state.is_expanded(node.path),
    )
    for child in node.children.values():
        rendered = _render_node(child, scan, state, depth + 1, on_match_activated)
        if rendered is not None:
            folder_view.children.append(rendered)
    return folder_view


def render_tree(
    root: TreeNode,
    scan: ScanResult,
    state: ExpansionState,
    on_match_activated: MatchActivated | None = None,
) -> RenderedTree:
    """Render every subtree with matches; subtrees without matches are skipped."""
    rendered = RenderedTree()
    if not root.has_matches:
        return rendered
    for child in root.children.values():
        item = _render_node(child, scan, state, 0, on_match_activated)
        if item is not None:
            rendered.items.append(item)
    return rendered


def iter_folders(rendered: RenderedTree) -> Iterator[FolderView]:
    """Yield every rendered folder, open or not, in pre-order."""
    pending: list[FolderView | FileView] = list(reversed(rendered.items))
    while pending:
        item = pending.pop()
        if isinstance(item, FolderView):
            yield item
            pending.extend(reversed(item.children))


def capture_expansion(rendered: RenderedTree | None) -> set[str]:
    """Collect the paths of all folders currently open in ``rendered``."""
    if rendered is None:
        return set()
    return {folder.path for folder in iter_folders(rendered) if folder.open}


def expand_all(rendered: RenderedTree, state: ExpansionState) -> None:
    """Open every rendered folder and record all of them as expanded."""
    folders = list(iter_folders(rendered))
    for folder in folders:
        folder.open = True
    state.expand_all(folder.path for folder in folders)


def collapse_all(rendered: RenderedTree, state: ExpansionState) -> None:
    for folder in iter_folders(rendered):
        folder.open = False
    state.collapse_all()


def visible_items(rendered: RenderedTree) -> list[FolderView | FileView | MatchRow]:
    """Flatten to display rows, hiding the contents of closed folders."""
    out: list[FolderView | FileView | MatchRow] = []

    def walk(items: list[FolderView | FileView]) -> None:
        for item in items:
            out.append(item)
            if isinstance(item, FolderView):
                if item.open:
                    walk(item.children)
            else:
                out.extend(item.rows)

    walk(rendered.items)
    return out
