"""Right-hand document pane: the editable view navigation lands in.

Holds one open document with a cursor, an optional single-line selection,
and transient line highlights. Syntax colouring uses Pygments; rows that
carry the cursor, selection, or a highlight are drawn from plain text so the
overlay styles are not fighting the lexer's escape codes.
"""

from __future__ import annotations

from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .ansi import fit_ansi_line, sanitize_terminal_text
from .ui_theme import DEFAULT_THEME, UITheme

DEFAULT_STYLE = "monokai"

Position = tuple[int, int]


def normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def colorize_lines(text: str, path: Path, style: str = DEFAULT_STYLE) -> list[str]:
    """Return one ANSI-coloured string per ``\\n``-separated line of ``text``."""
    plain = text.split("\n")
    try:
        lexer = get_lexer_for_filename(path.name, text, stripnl=False, ensurenl=False)
    except ClassNotFound:
        lexer = TextLexer(stripnl=False, ensurenl=False)
    formatter = Terminal256Formatter(style=normalize_style(style))
    colored = highlight(text, lexer, formatter).split("\n")
    if len(colored) != len(plain):
        return plain
    return colored


class DocumentPane:
    """Single-document view with cursor, selection, and line highlights."""

    def __init__(self, style: str = DEFAULT_STYLE, no_color: bool = False) -> None:
        self.style = style
        self.no_color = no_color
        self.path: str | None = None
        self.source_text = ""
        self.lines: list[str] = []
        self._colored: list[str] = []
        self.cursor: Position = (0, 0)
        self.selection: tuple[Position, Position] | None = None
        self.highlighted_lines: set[int] = set()
        self.top = 0
        self.focused = False

    @property
    def is_open(self) -> bool:
        return self.path is not None

    def open(self, path: str, text: str, display_path: Path | None = None) -> None:
        self.source_text = text
        text = sanitize_terminal_text(text)
        self.path = path
        self.lines = [line.rstrip("\r") for line in text.split("\n")]
        if self.no_color:
            self._colored = list(self.lines)
        else:
            self._colored = [
                line.replace("\r", "")
                for line in colorize_lines(text, display_path or Path(path), self.style)
            ]
        self.cursor = (0, 0)
        self.selection = None
        self.highlighted_lines.clear()
        self.top = 0

    def close(self) -> None:
        self.path = None
        self.source_text = ""
        self.lines = []
        self._colored = []
        self.selection = None
        self.highlighted_lines.clear()
        self.focused = False

    def get_line(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""

    def _clamp(self, position: Position) -> Position:
        line = max(0, min(position[0], max(0, len(self.lines) - 1)))
        ch = max(0, min(position[1], len(self.get_line(line))))
        return (line, ch)

    def set_cursor(self, line: int, ch: int = 0) -> None:
        """Move the cursor and collapse any selection."""
        self.cursor = self._clamp((line, ch))
        self.selection = None

    def set_selection(self, start: Position, end: Position) -> None:
        start = self._clamp(start)
        end = self._clamp(end)
        self.selection = (start, end)
        self.cursor = end

    def scroll_into_view(self, line: int, rows: int, context: int = 3) -> None:
        """Adjust ``top`` so ``line`` is visible with a little context above it."""
        if rows <= 0:
            return
        if line < self.top or line >= self.top + rows:
            self.top = max(0, line - context)
        self.top = max(0, min(self.top, max(0, len(self.lines) - rows)))

    def scroll(self, delta: int, rows: int) -> None:
        self.top = max(0, min(self.top + delta, max(0, len(self.lines) - rows)))

    def add_line_highlight(self, line: int) -> None:
        if not 0 <= line < len(self.lines):
            raise IndexError(f"line {line} is outside the document")
        self.highlighted_lines.add(line)

    def remove_line_highlight(self, line: int) -> None:
        self.highlighted_lines.discard(line)

    def _selection_columns(self, line: int) -> tuple[int, int] | None:
        if self.selection is None:
            return None
        (start_line, start_ch), (end_line, end_ch) = sorted(self.selection)
        if line < start_line or line > end_line:
            return None
        start = start_ch if line == start_line else 0
        end = end_ch if line == end_line else len(self.get_line(line))
        return start, end

    def _render_line(self, line: int, theme: UITheme) -> str:
        span = self._selection_columns(line)
        highlighted = line in self.highlighted_lines
        if span is None and not highlighted:
            return self._colored[line] if line < len(self._colored) else self.get_line(line)

        text = self.get_line(line)
        base = theme.line_highlight if highlighted else ""
        if span is None or span[0] == span[1]:
            return f"{base}{text}{theme.reset}"
        start, end = span
        return (
            f"{base}{text[:start]}{theme.reset}"
            f"{theme.selection}{text[start:end]}{theme.reset}"
            f"{base}{text[end:]}{theme.reset}"
        )

    def render_rows(self, width: int, rows: int, theme: UITheme = DEFAULT_THEME) -> list[str]:
        """Return exactly ``rows`` display rows of ``width`` columns."""
        out: list[str] = []
        gutter = max(3, len(str(len(self.lines))))
        text_width = max(1, width - gutter - 1)
        for offset in range(rows):
            line = self.top + offset
            if not self.is_open or line >= len(self.lines):
                out.append(" " * width)
                continue
            marker = ">" if self.focused and line == self.cursor[0] else " "
            number = f"{theme.line_number}{line + 1:>{gutter}}{theme.reset}"
            body = fit_ansi_line(self._render_line(line, theme), text_width)
            out.append(fit_ansi_line(f"{number}{marker}{body}", width))
        return out
