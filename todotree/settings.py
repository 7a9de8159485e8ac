"""Persistent JSON settings.

Stores the marker list, document suffixes, hidden-file preference, and theme.
All access is defensive: malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .corpus import DEFAULT_SUFFIXES
from .matching import DEFAULT_MARKERS

logger = logging.getLogger(__name__)

APP_NAME = "todotree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass
class Settings:
    markers: list[str] = field(default_factory=lambda: list(DEFAULT_MARKERS))
    suffixes: list[str] = field(default_factory=lambda: list(DEFAULT_SUFFIXES))
    show_hidden: bool = False
    theme: str = "default"


def parse_marker_text(text: str) -> list[str]:
    """One marker per line; lines are trimmed and blanks dropped."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def format_marker_text(markers: list[str]) -> str:
    return "\n".join(markers)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are logged, not raised."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("cannot write config %s: %s", CONFIG_PATH, exc)


def _string_list(value: object, default: list[str]) -> list[str]:
    """Accept only a JSON list; non-string and blank items are dropped."""
    if not isinstance(value, list):
        return list(default)
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def load_settings() -> Settings:
    data = load_config()
    defaults = Settings()
    show_hidden = data.get("show_hidden")
    theme = data.get("theme")
    return Settings(
        markers=_string_list(data.get("markers"), defaults.markers),
        suffixes=_string_list(data.get("suffixes"), defaults.suffixes),
        show_hidden=show_hidden if isinstance(show_hidden, bool) else defaults.show_hidden,
        theme=theme if isinstance(theme, str) and theme else defaults.theme,
    )


def save_markers(markers: list[str]) -> None:
    """Persist only the marker list, leaving other keys untouched."""
    config = load_config()
    config["markers"] = [marker.strip() for marker in markers if marker.strip()]
    save_config(config)
