"""Command-line front door for todotree.

Parses CLI options, merges them over persisted settings, and either prints
the match tree once or starts the interactive terminal UI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .ansi import ANSI_ESCAPE_RE
from .app import TodoTreeApp, run_app
from .corpus import FilesystemCorpus
from .expansion import ExpansionState
from .logging_setup import configure_logging
from .render import render_tree
from .scanner import scan_corpus
from .screen import render_tree_text
from .settings import Settings, load_settings
from .terminal import TerminalController
from .tree_model import build_match_tree, folder_paths
from .ui_theme import available_theme_names, resolve_theme


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todotree",
        description="Browse marker lines (TODO, FIXME, ...) across a folder of documents.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Corpus root. Defaults to current directory.")
    parser.add_argument(
        "--marker",
        action="append",
        default=None,
        help="Marker string to search for (repeatable). Overrides saved markers for this run.",
    )
    parser.add_argument(
        "--suffix",
        action="append",
        default=None,
        help="Document file suffix such as .md (repeatable).",
    )
    parser.add_argument("--hidden", action="store_true", help="Include hidden files and folders.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--style", default="monokai", help="Pygments style for the document pane.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--print", dest="print_tree", action="store_true", help="Print the match tree and exit.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write diagnostic logs to this file.")
    parser.add_argument("--log-level", default="INFO", help="Log level for --log-file (default: INFO).")
    return parser


def merge_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply session-only CLI overrides on top of persisted settings."""
    if args.marker is not None:
        settings.markers = [marker.strip() for marker in args.marker if marker.strip()]
    if args.suffix is not None:
        settings.suffixes = [
            suffix if suffix.startswith(".") else f".{suffix}"
            for suffix in (item.strip() for item in args.suffix)
            if suffix
        ]
    if args.hidden:
        settings.show_hidden = True
    if args.theme is not None:
        settings.theme = args.theme
    return settings


def print_tree(corpus: FilesystemCorpus, settings: Settings, no_color: bool) -> str:
    """Render the fully expanded match tree as text."""
    scan = scan_corpus(corpus, settings.markers)
    root = build_match_tree(scan)
    rendered = render_tree(root, scan, ExpansionState(folder_paths(root)))
    text = render_tree_text(rendered, resolve_theme(settings.theme, no_color=no_color))
    return ANSI_ESCAPE_RE.sub("", text) if no_color else text


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    root = Path(args.path) if args.path is not None else Path.cwd()
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")

    persist = args.marker is None
    settings = merge_settings(load_settings(), args)
    corpus = FilesystemCorpus(root, suffixes=settings.suffixes, show_hidden=settings.show_hidden)

    no_color = args.no_color or not sys.stdout.isatty()
    if args.print_tree or not sys.stdin.isatty() or not sys.stdout.isatty():
        sys.stdout.write(print_tree(corpus, settings, no_color))
        return

    app = TodoTreeApp(
        corpus,
        settings,
        style=args.style,
        no_color=args.no_color,
        persist_settings=persist,
    )
    stdin_fd = sys.stdin.fileno()
    run_app(app, TerminalController(stdin_fd, sys.stdout.fileno()), stdin_fd)


if __name__ == "__main__":
    main()
