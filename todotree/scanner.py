"""Marker scan over a document corpus.

Every call rescans the whole corpus; nothing is cached between scans, so a
result never carries stale matches from a partially invalidated previous run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from .matching import line_matches, normalize_markers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    """One matching line: trimmed text and 0-based line number."""

    text: str
    line: int


# Document path -> matches in ascending line order. Paths with no matches are absent.
ScanResult = dict[str, list[Match]]


class DocumentSource(Protocol):
    def list_documents(self) -> list[str]: ...

    def read(self, path: str) -> str: ...


def scan_text(text: str, markers: Sequence[str]) -> list[Match]:
    """Return matches for one document body.

    Lines are split on ``\\n`` only; a trailing ``\\r`` disappears with trimming.
    """
    folded_markers = normalize_markers(markers)
    if not folded_markers:
        return []
    return [
        Match(text=line.strip(), line=index)
        for index, line in enumerate(text.split("\n"))
        if line_matches(line, folded_markers)
    ]


def scan_documents(documents: Iterable[tuple[str, str]], markers: Sequence[str]) -> ScanResult:
    """Scan in-memory ``(path, text)`` pairs."""
    result: ScanResult = {}
    for path, text in documents:
        matches = scan_text(text, markers)
        if matches:
            result[path] = matches
    return result


def scan_corpus(source: DocumentSource, markers: Sequence[str]) -> ScanResult:
    """Read and scan every document in ``source``.

    A document that cannot be read contributes nothing; the rest of the scan
    continues.
    """
    result: ScanResult = {}
    if not normalize_markers(markers):
        return result
    for path in source.list_documents():
        try:
            text = source.read(path)
        except OSError as exc:
            logger.warning("skipping unreadable document %s: %s", path, exc)
            continue
        matches = scan_text(text, markers)
        if matches:
            result[path] = matches
    return result
