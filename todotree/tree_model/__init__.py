"""Match-tree model: node type, builder, and traversal helpers."""

from __future__ import annotations

from .build import ROOT_NAME, build_match_tree, folder_paths, iter_nodes
from .types import TreeNode

__all__ = [
    "ROOT_NAME",
    "TreeNode",
    "build_match_tree",
    "folder_paths",
    "iter_nodes",
]
