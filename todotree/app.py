"""Host workspace for todo-tree views.

Wires the corpus watcher, refresh coordinator, navigator, and document pane
around the active view, and runs the interactive terminal loop.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from .corpus import CorpusWatcher, FilesystemCorpus
from .document_pane import DocumentPane
from .editor import edit_markers, launch_editor
from .input import read_key
from .navigation import Navigator
from .refresh import RefreshCoordinator, Scheduler
from .render import FolderView, MatchRow
from .screen import render_screen
from .settings import Settings, save_markers
from .terminal import TerminalController
from .ui_theme import UITheme, resolve_theme
from .view import TodoTreeView

logger = logging.getLogger(__name__)

KEY_POLL_MS = 50
STATUS_MESSAGE_SECONDS = 3.0


class TodoTreeApp:
    """All todo-tree views plus the shared host collaborators."""

    def __init__(
        self,
        corpus: FilesystemCorpus,
        settings: Settings,
        scheduler: Scheduler | None = None,
        *,
        style: str = "monokai",
        no_color: bool = False,
        persist_settings: bool = True,
    ) -> None:
        self.corpus = corpus
        self.settings = settings
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.persist_settings = persist_settings
        self.theme: UITheme = resolve_theme(settings.theme, no_color=no_color)
        self.pane = DocumentPane(style=style, no_color=no_color)
        self.content_rows = 24
        self.tree_start = 0
        self.views: list[TodoTreeView] = []
        self.navigator = Navigator(
            corpus,
            self.pane,
            self.scheduler,
            visible_rows=lambda: self.content_rows,
        )
        self.coordinator = RefreshCoordinator(self.scheduler, lambda: list(self.views))
        self.watcher = CorpusWatcher(
            corpus,
            self.coordinator.on_corpus_changed,
            monotonic=self.scheduler.monotonic,
        )
        self.status_message = ""
        self.status_message_until = 0.0
        self.dirty = True

    def markers(self) -> list[str]:
        return list(self.settings.markers)

    @property
    def active_view(self) -> TodoTreeView | None:
        return self.views[-1] if self.views else None

    def on_match_activated(self, path: str, line: int, text: str) -> bool:
        opened = self.navigator.activate(path, line, text)
        if not opened:
            self.set_status(f"{path} is no longer available")
        self.dirty = True
        return opened

    def open_view(self) -> TodoTreeView:
        """Replace any existing view with a freshly scanned one."""
        for view in self.views:
            view.detach()
        self.views.clear()
        view = TodoTreeView(self.corpus, self.markers, on_match_activated=self.on_match_activated)
        view.open()
        self.views.append(view)
        self.tree_start = 0
        self.dirty = True
        return view

    def expand_all(self) -> None:
        view = self.active_view
        if view is not None:
            view.expand_all()
            self.dirty = True

    def collapse_all(self) -> None:
        view = self.active_view
        if view is not None:
            view.collapse_all()
            self.dirty = True

    def refresh_now(self) -> None:
        self.coordinator.on_corpus_changed()
        self.coordinator.flush()
        self.dirty = True

    def set_markers(self, markers: list[str]) -> None:
        self.settings.markers = list(markers)
        if self.persist_settings:
            save_markers(self.settings.markers)
        self.refresh_now()

    def set_status(self, message: str) -> None:
        self.status_message = message
        self.status_message_until = self.scheduler.monotonic() + STATUS_MESSAGE_SECONDS
        self.dirty = True

    def tick(self) -> None:
        """Idle work: poll the corpus and run due timers."""
        self.watcher.maybe_poll()
        if self.scheduler.run_due():
            self.dirty = True
        if self.status_message and self.scheduler.monotonic() >= self.status_message_until:
            self.status_message = ""
            self.dirty = True

    def teardown(self) -> None:
        self.coordinator.teardown()
        self.scheduler.cancel_all()
        for view in self.views:
            view.detach()
        self.views.clear()

    def _open_in_editor(self, disable_tui_mode: Callable[[], None], enable_tui_mode: Callable[[], None]) -> None:
        view = self.active_view
        row = view.selected_row() if view is not None else None
        if self.pane.focused and self.pane.path is not None:
            target, line = self.pane.path, self.pane.cursor[0]
        elif isinstance(row, MatchRow):
            target, line = row.path, row.line
        elif row is not None and not isinstance(row, FolderView):
            target, line = row.path, None
        else:
            return
        error = launch_editor(self.corpus.absolute_path(target), disable_tui_mode, enable_tui_mode, line=line)
        if error:
            self.set_status(error)
        self.refresh_now()

    def _edit_markers(self, disable_tui_mode: Callable[[], None], enable_tui_mode: Callable[[], None]) -> None:
        markers, error = edit_markers(self.markers(), disable_tui_mode, enable_tui_mode)
        if error:
            self.set_status(error)
            return
        assert markers is not None
        self.set_markers(markers)
        self.set_status(f"{len(markers)} markers")

    def handle_key(
        self,
        key: str,
        disable_tui_mode: Callable[[], None] = lambda: None,
        enable_tui_mode: Callable[[], None] = lambda: None,
    ) -> bool:
        """Dispatch one key token. Returns ``True`` when the app should quit."""
        view = self.active_view
        if key in {"q", "CTRL_C"}:
            return True
        self.dirty = True
        if key == "o":
            self.open_view()
            return False
        if view is None:
            return False

        if self.pane.focused:
            if key in {"TAB", "ESC"}:
                self.pane.focused = False
            elif key in {"UP", "k"}:
                self.pane.scroll(-1, self.content_rows)
            elif key in {"DOWN", "j"}:
                self.pane.scroll(1, self.content_rows)
            elif key == "PAGE_UP":
                self.pane.scroll(-self.content_rows, self.content_rows)
            elif key == "PAGE_DOWN":
                self.pane.scroll(self.content_rows, self.content_rows)
            elif key == "E":
                self._open_in_editor(disable_tui_mode, enable_tui_mode)
            return False

        if key in {"UP", "k"}:
            view.move_selection(-1)
        elif key in {"DOWN", "j"}:
            view.move_selection(1)
        elif key == "PAGE_UP":
            view.move_selection(-self.content_rows)
        elif key == "PAGE_DOWN":
            view.move_selection(self.content_rows)
        elif key == "HOME":
            view.move_selection(-len(view.rows()))
        elif key == "END":
            view.move_selection(len(view.rows()))
        elif key in {"ENTER", "SPACE"}:
            view.activate_selected()
        elif key in {"RIGHT", "l"}:
            view.set_selected_folder_open(True)
        elif key in {"LEFT", "h"}:
            view.set_selected_folder_open(False)
        elif key == "TAB":
            self.pane.focused = self.pane.is_open
        elif key == "e":
            self.expand_all()
        elif key == "c":
            self.collapse_all()
        elif key == "r":
            self.refresh_now()
        elif key == "E":
            self._open_in_editor(disable_tui_mode, enable_tui_mode)
        elif key == "m":
            self._edit_markers(disable_tui_mode, enable_tui_mode)
        else:
            self.dirty = False
        return False

    def _follow_selection(self) -> None:
        view = self.active_view
        if view is None:
            return
        rows = self.content_rows
        if view.selected < self.tree_start:
            self.tree_start = view.selected
        elif view.selected >= self.tree_start + rows:
            self.tree_start = view.selected - rows + 1
        self.tree_start = max(0, min(self.tree_start, max(0, len(view.rows()) - rows)))

    def screen_rows(self, width: int, height: int) -> list[str]:
        self.content_rows = max(1, height - 1)
        view = self.active_view
        if view is None:
            return [" " * width for _ in range(height)]
        self._follow_selection()
        return render_screen(
            view,
            self.pane,
            width,
            height,
            tree_start=self.tree_start,
            status_message=self.status_message,
            theme=self.theme,
        )


def run_app(app: TodoTreeApp, terminal: TerminalController, stdin_fd: int) -> None:
    """Run the interactive loop until the user quits, then tear the app down."""
    if app.active_view is None:
        app.open_view()
    last_size = None
    try:
        with terminal.raw_mode():
            while True:
                term = shutil.get_terminal_size((80, 24))
                if (term.columns, term.lines) != last_size:
                    last_size = (term.columns, term.lines)
                    app.dirty = True
                if app.dirty:
                    terminal.draw(app.screen_rows(term.columns, term.lines))
                    app.dirty = False

                next_delay = app.scheduler.next_delay()
                timeout_ms = KEY_POLL_MS if next_delay is None else min(KEY_POLL_MS, int(next_delay * 1000))
                key = read_key(stdin_fd, timeout_ms=timeout_ms)
                if key == "":
                    app.tick()
                    continue
                if app.handle_key(key, terminal.disable_tui_mode, terminal.enable_tui_mode):
                    break
                app.tick()
    finally:
        app.teardown()
