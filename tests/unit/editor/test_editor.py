"""``$EDITOR`` launching and marker editing."""

from __future__ import annotations

import unittest
from pathlib import Path
from unittest import mock

from todotree import editor


class LaunchEditorTests(unittest.TestCase):
    def test_missing_editor_reports_error_without_leaving_tui(self) -> None:
        disable = mock.Mock()
        with mock.patch.dict("os.environ", {"EDITOR": ""}):
            error = editor.launch_editor(Path("/tmp/a.md"), disable, mock.Mock())

        self.assertIn("$EDITOR", error)
        disable.assert_not_called()

    def test_line_is_passed_one_based(self) -> None:
        disable, enable = mock.Mock(), mock.Mock()
        with mock.patch.dict("os.environ", {"EDITOR": "vim -n"}), mock.patch("todotree.editor.subprocess.run") as run:
            error = editor.launch_editor(Path("/vault/a.md"), disable, enable, line=4)

        self.assertIsNone(error)
        run.assert_called_once_with(["vim", "-n", "+5", "/vault/a.md"], check=False)
        disable.assert_called_once_with()
        enable.assert_called_once_with()

    def test_launch_failure_restores_tui(self) -> None:
        enable = mock.Mock()
        with mock.patch.dict("os.environ", {"EDITOR": "missing-editor"}), mock.patch(
            "todotree.editor.subprocess.run", side_effect=OSError("not found")
        ):
            error = editor.launch_editor(Path("/vault/a.md"), mock.Mock(), enable)

        self.assertIn("not found", error)
        enable.assert_called_once_with()


class EditMarkersTests(unittest.TestCase):
    def test_edited_file_is_parsed_back(self) -> None:
        def fake_run(args: list[str], check: bool) -> None:
            Path(args[-1]).write_text("todo\n\n  hack  \n", encoding="utf-8")

        with mock.patch.dict("os.environ", {"EDITOR": "ed"}), mock.patch(
            "todotree.editor.subprocess.run", side_effect=fake_run
        ):
            markers, error = editor.edit_markers(["todo"], mock.Mock(), mock.Mock())

        self.assertIsNone(error)
        self.assertEqual(markers, ["todo", "hack"])

    def test_editor_error_is_returned(self) -> None:
        with mock.patch.dict("os.environ", {"EDITOR": ""}):
            markers, error = editor.edit_markers(["todo"], mock.Mock(), mock.Mock())

        self.assertIsNone(markers)
        self.assertIsNotNone(error)


if __name__ == "__main__":
    unittest.main()
