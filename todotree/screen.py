"""Screen composition for the split tree/document layout."""

from __future__ import annotations

from .ansi import fit_ansi_line
from .document_pane import DocumentPane
from .render import FolderView, MatchRow, RenderedTree, visible_items
from .ui_theme import DEFAULT_THEME, ICON_GLYPHS, UITheme, icon_color
from .view import Row, TodoTreeView

INDENT = "  "
MIN_LEFT_WIDTH = 20
DEFAULT_LEFT_PERCENT = 40.0


def selected_with_ansi(text: str) -> str:
    """Apply reverse video without discarding existing ANSI colors."""
    if not text:
        return text
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def format_row(row: Row, theme: UITheme = DEFAULT_THEME) -> str:
    """Render one tree-pane row as ANSI-styled text."""
    reset = theme.reset
    if isinstance(row, MatchRow):
        glyph = ICON_GLYPHS.get(row.icon, ICON_GLYPHS["check-square"])
        return (
            f"{INDENT * row.depth}{icon_color(row.icon, theme)}{glyph}{reset} "
            f"{theme.match_text}{row.text}{reset}"
        )
    badge = f"{theme.tree_badge} ({row.match_count}){reset}"
    if isinstance(row, FolderView):
        marker = "▾ " if row.open else "▸ "
        return f"{INDENT * row.depth}{theme.tree_marker}{marker}{reset}{theme.tree_dir}{row.name}/{reset}{badge}"
    return f"{INDENT * row.depth}{theme.tree_file}{row.name}{reset}{badge}"


def compute_left_width(total_width: int, percent: float = DEFAULT_LEFT_PERCENT) -> int:
    if total_width <= MIN_LEFT_WIDTH + 2:
        return max(1, total_width - 2)
    left = int(total_width * percent / 100.0)
    return max(MIN_LEFT_WIDTH, min(left, total_width - 12))


def build_status_line(left_text: str, width: int, right_text: str, theme: UITheme = DEFAULT_THEME) -> str:
    gap = max(1, width - len(left_text) - len(right_text))
    return fit_ansi_line(f"{theme.status}{left_text}{' ' * gap}{right_text}{theme.reset}", width)


def render_screen(
    view: TodoTreeView,
    pane: DocumentPane,
    width: int,
    height: int,
    *,
    tree_start: int = 0,
    status_message: str = "",
    theme: UITheme = DEFAULT_THEME,
) -> list[str]:
    """Return ``height`` screen rows: content rows followed by the status line."""
    content_rows = max(1, height - 1)
    left_width = compute_left_width(width)
    right_width = max(1, width - left_width - 1)
    rows = view.rows()
    tree_focused = not pane.focused

    left: list[str] = []
    for offset in range(content_rows):
        idx = tree_start + offset
        if idx >= len(rows):
            if idx == 0 and not rows:
                left.append(fit_ansi_line(f"{theme.status}No matches{theme.reset}", left_width))
            else:
                left.append(" " * left_width)
            continue
        text = fit_ansi_line(format_row(rows[idx], theme), left_width)
        if idx == view.selected and tree_focused:
            text = selected_with_ansi(text)
        left.append(text)

    right = pane.render_rows(right_width, content_rows, theme)
    divider = f"{theme.divider}│{theme.reset}"
    out = [f"{l}{divider}{r}" for l, r in zip(left, right)]

    summary = status_message or (
        f" {view.total_matches} matches in {len(view.scan)} documents"
    )
    out.append(build_status_line(summary, width, "e expand  c collapse  q quit ", theme))
    return out


def render_tree_text(rendered: RenderedTree, theme: UITheme = DEFAULT_THEME) -> str:
    """Render every visible row of ``rendered`` as newline-terminated text."""
    return "".join(format_row(row, theme) + "\n" for row in visible_items(rendered))


__all__ = [
    "build_status_line",
    "compute_left_width",
    "format_row",
    "render_screen",
    "render_tree_text",
    "selected_with_ansi",
]
