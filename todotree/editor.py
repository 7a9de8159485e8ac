"""External ``$EDITOR`` integration.

Runs the editor while temporarily leaving raw/alternate-screen mode.
Failures come back as a message string instead of raising so the UI can
show them on the status line.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path

from .settings import format_marker_text, parse_marker_text


def _editor_command() -> tuple[list[str] | None, str | None]:
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return None, "Cannot edit: $EDITOR is not set."
    cmd = shlex.split(editor_env)
    if not cmd:
        return None, "Cannot edit: $EDITOR is empty."
    return cmd, None


def launch_editor(
    target: Path,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
    line: int | None = None,
) -> str | None:
    """Open ``target`` in ``$EDITOR``, at 0-based ``line`` when given."""
    cmd, error = _editor_command()
    if cmd is None:
        return error
    args = [*cmd]
    if line is not None:
        args.append(f"+{line + 1}")
    args.append(str(target))

    disable_tui_mode()
    try:
        subprocess.run(args, check=False)
    except OSError as exc:
        return f"Failed to launch editor: {exc}"
    finally:
        enable_tui_mode()
    return None


def edit_markers(
    markers: list[str],
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> tuple[list[str] | None, str | None]:
    """Let the user edit the marker list, one per line, in ``$EDITOR``.

    Returns ``(markers, None)`` on success or ``(None, message)`` on failure.
    """
    with tempfile.TemporaryDirectory(prefix="todotree-") as tmp:
        path = Path(tmp) / "markers.txt"
        path.write_text(format_marker_text(markers) + "\n", encoding="utf-8")
        error = launch_editor(path, disable_tui_mode, enable_tui_mode)
        if error is not None:
            return None, error
        try:
            edited = path.read_text(encoding="utf-8")
        except OSError as exc:
            return None, f"Cannot read edited markers: {exc}"
    return parse_marker_text(edited), None
