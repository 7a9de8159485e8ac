"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the tree pane, document pane, and status line.
Syntax colouring inside the document pane is a separate Pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass

ICON_GLYPHS: dict[str, str] = {
    "check-square": "☐",
    "bug": "✗",
    "pencil": "✎",
}


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    tree_marker: str
    tree_dir: str
    tree_file: str
    tree_badge: str
    match_text: str
    icon_todo: str
    icon_fixme: str
    icon_note: str
    line_number: str
    line_highlight: str
    selection: str
    status: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_file="\033[38;5;252m",
    tree_badge="\033[38;5;109m",
    match_text="\033[38;5;250m",
    icon_todo="\033[38;5;42m",
    icon_fixme="\033[38;5;203m",
    icon_note="\033[38;5;214m",
    line_number="\033[38;5;240m",
    line_highlight="\033[48;5;58m",
    selection="\033[7m",
    status="\033[2;38;5;250m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="\033[38;5;39m",
    tree_dir="\033[1;38;5;45m",
    tree_file="\033[38;5;117m",
    tree_badge="\033[38;5;73m",
    match_text="\033[38;5;153m",
    icon_todo="\033[38;5;86m",
    icon_fixme="\033[38;5;211m",
    icon_note="\033[38;5;221m",
    line_number="\033[38;5;24m",
    line_highlight="\033[48;5;24m",
    selection="\033[7m",
    status="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="",
    tree_dir="",
    tree_file="",
    tree_badge="",
    match_text="",
    icon_todo="",
    icon_fixme="",
    icon_note="",
    line_number="",
    line_highlight="\033[4m",
    selection="\033[7m",
    status="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


def icon_color(icon: str, theme: UITheme) -> str:
    if icon == "bug":
        return theme.icon_fixme
    if icon == "pencil":
        return theme.icon_note
    return theme.icon_todo


__all__ = [
    "ICON_GLYPHS",
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "icon_color",
    "normalize_theme_name",
    "resolve_theme",
]
