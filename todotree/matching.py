"""Marker matching and match-row icon selection.

A line matches when its lowercased text contains any lowercased marker.
There is no word-boundary check: ``todo`` also matches inside ``todoist``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

DEFAULT_MARKERS: tuple[str, ...] = ("todo", "fixme", "should remember to")

ICON_TODO = "check-square"
ICON_FIXME = "bug"
ICON_NOTE = "pencil"
ICON_DEFAULT = ICON_TODO

# Keyword sniffing order matters: first hit wins.
_ICON_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("todo", ICON_TODO),
    ("fixme", ICON_FIXME),
    ("note", ICON_NOTE),
)


def normalize_markers(markers: Iterable[str]) -> tuple[str, ...]:
    """Return the markers lowercased, in order."""
    return tuple(marker.lower() for marker in markers)


def line_matches(line: str, markers: Sequence[str]) -> bool:
    """Return whether ``line`` contains any marker, ignoring case."""
    if not markers:
        return False
    folded = line.lower()
    return any(marker.lower() in folded for marker in markers)


def icon_for_match(text: str) -> str:
    lowered = text.lower()
    for keyword, icon in _ICON_KEYWORDS:
        if keyword in lowered:
            return icon
    return ICON_DEFAULT
