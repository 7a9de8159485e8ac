"""Tree node datatype shared by builder and renderer."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TreeNode:
    """Folder or file node in the match tree.

    ``path`` is the ``/``-joined segment chain from the root; the root itself
    has an empty path and is never rendered.
    """

    name: str
    path: str
    is_file: bool = False
    children: dict[str, TreeNode] = field(default_factory=dict)
    match_count: int = 0
    has_matches: bool = False
