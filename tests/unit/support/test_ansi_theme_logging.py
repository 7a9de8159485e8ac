"""ANSI helpers, theme resolution, and logging setup."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from todotree.ansi import clip_ansi_line, display_width, fit_ansi_line, sanitize_terminal_text
from todotree.logging_setup import _HANDLER_TAG, configure_logging
from todotree.ui_theme import DEFAULT_THEME, OCEAN_THEME, PLAIN_THEME, icon_color, resolve_theme


class AnsiTests(unittest.TestCase):
    def test_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[31mab\033[0m"), 2)
        self.assertEqual(display_width("日本"), 4)

    def test_fit_pads_and_clips(self) -> None:
        self.assertEqual(fit_ansi_line("abc", 5), "abc  ")
        self.assertEqual(display_width(fit_ansi_line("abcdef", 4)), 4)
        self.assertEqual(display_width(clip_ansi_line("\033[1mabcdef\033[0m", 3)), 3)

    def test_control_characters_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x1b[2Jb"), "a\\x1b[2Jb")
        self.assertEqual(sanitize_terminal_text("tab\tok\n"), "tab\tok\n")


class ThemeTests(unittest.TestCase):
    def test_resolve_theme(self) -> None:
        self.assertIs(resolve_theme("OCEAN"), OCEAN_THEME)
        self.assertIs(resolve_theme("unknown"), DEFAULT_THEME)
        self.assertIs(resolve_theme("ocean", no_color=True), PLAIN_THEME)

    def test_icon_color_by_icon(self) -> None:
        self.assertEqual(icon_color("bug", DEFAULT_THEME), DEFAULT_THEME.icon_fixme)
        self.assertEqual(icon_color("pencil", DEFAULT_THEME), DEFAULT_THEME.icon_note)
        self.assertEqual(icon_color("check-square", DEFAULT_THEME), DEFAULT_THEME.icon_todo)


class LoggingSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.logger = logging.getLogger("todotree")
        self._saved_handlers = list(self.logger.handlers)
        self._saved_level = self.logger.level
        self._saved_propagate = self.logger.propagate

    def tearDown(self) -> None:
        for handler in self._own_handlers():
            handler.close()
        self.logger.handlers[:] = self._saved_handlers
        self.logger.setLevel(self._saved_level)
        self.logger.propagate = self._saved_propagate

    def _own_handlers(self) -> list[logging.Handler]:
        return [handler for handler in self.logger.handlers if getattr(handler, _HANDLER_TAG, False)]

    def test_file_handler_replaces_previous_handler(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "logs" / "todotree.log"
            configure_logging(log_file, "debug")
            logger = configure_logging(log_file, "debug")
            logging.getLogger("todotree.scanner").debug("scanned %d documents", 3)

            own = self._own_handlers()
            self.assertEqual(len(own), 1)
            self.assertIsInstance(own[0], logging.FileHandler)
            own[0].flush()
            self.assertEqual(logger.level, logging.DEBUG)
            self.assertFalse(logger.propagate)
            self.assertIn("todotree.scanner: scanned 3 documents", log_file.read_text(encoding="utf-8"))
            own[0].close()

    def test_default_is_silent(self) -> None:
        configure_logging()
        own = self._own_handlers()
        self.assertEqual(len(own), 1)
        self.assertIsInstance(own[0], logging.NullHandler)


if __name__ == "__main__":
    unittest.main()
