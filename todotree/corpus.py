"""Filesystem document source and poll-based change detection.

Documents are identified by their root-relative POSIX path (``dir/note.md``).
The watcher compares stat snapshots between polls and reports every
difference as a ``CorpusChange``; consumers treat all kinds alike.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CHANGE_MODIFIED = "modified"
CHANGE_CREATED = "created"
CHANGE_DELETED = "deleted"
CHANGE_RENAMED = "renamed"

DEFAULT_SUFFIXES: tuple[str, ...] = (".md",)
CORPUS_WATCH_POLL_SECONDS = 0.5

Snapshot = dict[str, tuple[int, int]]


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1. ``OSError`` propagates so
    callers can decide whether a missing document is fatal.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


@dataclass(frozen=True)
class CorpusChange:
    """One detected change to the document set."""

    kind: str
    path: str
    old_path: str | None = None


class FilesystemCorpus:
    """All files under ``root`` whose suffix is in ``suffixes``."""

    def __init__(
        self,
        root: Path,
        suffixes: Iterable[str] = DEFAULT_SUFFIXES,
        show_hidden: bool = False,
    ) -> None:
        self.root = root.resolve()
        self.suffixes = tuple(suffix.lower() for suffix in suffixes)
        self.show_hidden = show_hidden

    def _accepts(self, name: str) -> bool:
        if not self.show_hidden and name.startswith("."):
            return False
        if not self.suffixes:
            return True
        return name.lower().endswith(self.suffixes)

    def _walk(self) -> Iterable[tuple[str, os.DirEntry]]:
        """Yield ``(relative_path, entry)`` for every accepted document."""
        pending = [self.root]
        while pending:
            directory = pending.pop()
            try:
                with os.scandir(directory) as entries:
                    children = sorted(entries, key=lambda entry: entry.name)
            except OSError as exc:
                logger.warning("cannot list %s: %s", directory, exc)
                continue
            subdirs: list[Path] = []
            for entry in children:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    continue
                if is_dir:
                    if self.show_hidden or not entry.name.startswith("."):
                        subdirs.append(Path(entry.path))
                    continue
                if not self._accepts(entry.name):
                    continue
                relative = Path(entry.path).relative_to(self.root).as_posix()
                yield relative, entry
            pending.extend(reversed(subdirs))

    def list_documents(self) -> list[str]:
        """Return relative paths of all documents currently in the corpus."""
        return [relative for relative, _entry in self._walk()]

    def absolute_path(self, path: str) -> Path:
        return self.root / Path(path)

    def exists(self, path: str) -> bool:
        return self.absolute_path(path).is_file()

    def read(self, path: str) -> str:
        return read_text(self.absolute_path(path))

    def snapshot(self) -> Snapshot:
        """Map each document to ``(mtime_ns, size)`` for change detection."""
        out: Snapshot = {}
        for relative, entry in self._walk():
            try:
                st = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            out[relative] = (int(st.st_mtime_ns), int(st.st_size))
        return out


def diff_snapshots(previous: Snapshot, current: Snapshot) -> list[CorpusChange]:
    """Classify differences between two snapshots.

    A deleted path and a created path with identical stat data are reported
    as a single rename.
    """
    created = [path for path in current if path not in previous]
    deleted = [path for path in previous if path not in current]
    changes: list[CorpusChange] = []

    unmatched_created = list(created)
    for old_path in deleted:
        rename_target = next(
            (path for path in unmatched_created if current[path] == previous[old_path]),
            None,
        )
        if rename_target is None:
            changes.append(CorpusChange(CHANGE_DELETED, old_path))
            continue
        unmatched_created.remove(rename_target)
        changes.append(CorpusChange(CHANGE_RENAMED, rename_target, old_path=old_path))

    for path in unmatched_created:
        changes.append(CorpusChange(CHANGE_CREATED, path))

    for path, stat in current.items():
        if path in previous and previous[path] != stat:
            changes.append(CorpusChange(CHANGE_MODIFIED, path))
    return changes


class CorpusWatcher:
    """Poll a corpus at a bounded rate and forward detected changes."""

    def __init__(
        self,
        corpus: FilesystemCorpus,
        on_change: Callable[[CorpusChange], None],
        *,
        monotonic: Callable[[], float],
        poll_seconds: float = CORPUS_WATCH_POLL_SECONDS,
    ) -> None:
        self.corpus = corpus
        self.on_change = on_change
        self.monotonic = monotonic
        self.poll_seconds = poll_seconds
        self.last_poll = 0.0
        self.snapshot: Snapshot | None = None

    def maybe_poll(self) -> int:
        """Poll when due and return the number of changes forwarded."""
        now = self.monotonic()
        if self.snapshot is not None and (now - self.last_poll) < self.poll_seconds:
            return 0
        self.last_poll = now

        current = self.corpus.snapshot()
        if self.snapshot is None:
            self.snapshot = current
            return 0
        if current == self.snapshot:
            return 0

        changes = diff_snapshots(self.snapshot, current)
        self.snapshot = current
        for change in changes:
            logger.debug("corpus %s: %s", change.kind, change.path)
            self.on_change(change)
        return len(changes)
