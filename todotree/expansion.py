"""Folder expansion state kept per view instance.

State is a set of canonical folder paths, never node references, so it stays
valid across full tree rebuilds as long as the folder paths still exist.
"""

from __future__ import annotations

from collections.abc import Iterable


class ExpansionState:
    """Set of expanded folder paths with capture/restore helpers."""

    def __init__(self, expanded: Iterable[str] = ()) -> None:
        self._expanded: set[str] = set(expanded)

    def __contains__(self, path: object) -> bool:
        return path in self._expanded

    def __len__(self) -> int:
        return len(self._expanded)

    def paths(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def is_expanded(self, folder_path: str) -> bool:
        """Initial open state for a freshly rendered folder (exact path match)."""
        return folder_path in self._expanded

    def set_expanded(self, folder_path: str, expanded: bool) -> None:
        if expanded:
            self._expanded.add(folder_path)
        else:
            self._expanded.discard(folder_path)

    def replace(self, folder_paths: Iterable[str]) -> None:
        """Replace the whole set, e.g. with paths captured from the current UI."""
        self._expanded = set(folder_paths)

    def expand_all(self, folder_paths: Iterable[str]) -> None:
        self._expanded.update(folder_paths)

    def collapse_all(self) -> None:
        self._expanded.clear()
