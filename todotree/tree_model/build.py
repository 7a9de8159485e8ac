"""Match-tree construction from a flat scan result."""

from __future__ import annotations

from collections.abc import Iterator

from ..scanner import ScanResult
from .types import TreeNode

ROOT_NAME = "root"


def _sibling_sort_key(node: TreeNode) -> tuple[bool, str, str]:
    return (node.is_file, node.name.lower(), node.name)


def _propagate_counts(node: TreeNode) -> int:
    """Post-order pass: fold child counts into folders and derive ``has_matches``."""
    if not node.is_file:
        node.match_count = sum(_propagate_counts(child) for child in node.children.values())
    node.has_matches = node.match_count > 0
    return node.match_count


def _sort_children(node: TreeNode) -> None:
    """Reorder children folders-first, then by case-insensitive name."""
    if node.is_file:
        return
    ordered = sorted(node.children.values(), key=_sibling_sort_key)
    node.children = {child.name: child for child in ordered}
    for child in ordered:
        _sort_children(child)


def build_match_tree(scan: ScanResult) -> TreeNode:
    """Build the folder/file tree for ``scan`` with aggregate match counts."""
    root = TreeNode(name=ROOT_NAME, path="")
    for document_path, matches in scan.items():
        if not document_path:
            continue
        segments = document_path.split("/")
        node = root
        for depth, segment in enumerate(segments):
            child = node.children.get(segment)
            if child is None:
                child = TreeNode(
                    name=segment,
                    path="/".join(segments[: depth + 1]),
                    is_file=depth == len(segments) - 1,
                )
                node.children[segment] = child
            node = child
        node.match_count = len(matches)

    _propagate_counts(root)
    _sort_children(root)
    return root


def iter_nodes(root: TreeNode) -> Iterator[TreeNode]:
    """Yield every node below ``root`` in pre-order (root excluded)."""
    for child in root.children.values():
        yield child
        yield from iter_nodes(child)


def folder_paths(root: TreeNode) -> list[str]:
    """Return paths of every folder with matches, in render order."""
    return [node.path for node in iter_nodes(root) if not node.is_file and node.has_matches]
