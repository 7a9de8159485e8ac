"""CLI option merging and one-shot tree printing."""

from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from todotree import cli
from todotree.corpus import FilesystemCorpus
from todotree.settings import Settings


def _write_corpus(root: Path) -> None:
    (root / "notes").mkdir()
    (root / "notes" / "a.md").write_text("TODO one\nplain\n", encoding="utf-8")
    (root / "top.md").write_text("fixme two\n", encoding="utf-8")
    (root / "skip.txt").write_text("todo ignored\n", encoding="utf-8")


class MergeSettingsTests(unittest.TestCase):
    def test_cli_overrides_persisted_values(self) -> None:
        args = cli.build_parser().parse_args(
            ["--marker", "hack", "--marker", " ", "--suffix", "txt", "--suffix", ".md", "--hidden", "--theme", "ocean"]
        )
        merged = cli.merge_settings(Settings(), args)

        self.assertEqual(merged.markers, ["hack"])
        self.assertEqual(merged.suffixes, [".txt", ".md"])
        self.assertTrue(merged.show_hidden)
        self.assertEqual(merged.theme, "ocean")

    def test_no_flags_keep_persisted_values(self) -> None:
        persisted = Settings(markers=["note"], suffixes=[".txt"], theme="ocean")
        merged = cli.merge_settings(persisted, cli.build_parser().parse_args([]))

        self.assertEqual(merged.markers, ["note"])
        self.assertEqual(merged.suffixes, [".txt"])
        self.assertFalse(merged.show_hidden)
        self.assertEqual(merged.theme, "ocean")


class PrintTreeTests(unittest.TestCase):
    def test_print_tree_renders_fully_expanded_plain_text(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write_corpus(root)
            text = cli.print_tree(FilesystemCorpus(root), Settings(), no_color=True)

        self.assertEqual(
            text,
            "▾ notes/ (1)\n"
            "  a.md (1)\n"
            "    ☐ TODO one\n"
            "top.md (1)\n"
            "  ✗ fixme two\n",
        )

    def test_print_tree_is_empty_without_markers(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write_corpus(root)
            text = cli.print_tree(FilesystemCorpus(root), Settings(markers=[]), no_color=True)

        self.assertEqual(text, "")


class MainTests(unittest.TestCase):
    def test_print_flag_writes_tree_to_stdout(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write_corpus(root)
            stdout = io.StringIO()
            with mock.patch("todotree.cli.load_settings", return_value=Settings()), mock.patch(
                "sys.stdout", stdout
            ), mock.patch("todotree.cli.run_app") as run_app, mock.patch("todotree.cli.configure_logging"):
                cli.main([str(root), "--print", "--marker", "plain"])

        run_app.assert_not_called()
        self.assertEqual(stdout.getvalue(), "▾ notes/ (1)\n  a.md (1)\n    ☐ plain\n")

    def test_rejects_missing_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "absent"
            with mock.patch("todotree.cli.load_settings", return_value=Settings()), mock.patch(
                "todotree.cli.configure_logging"
            ):
                with self.assertRaises(SystemExit):
                    cli.main([str(missing)])


if __name__ == "__main__":
    unittest.main()
