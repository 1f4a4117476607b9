"""Tests for the defrag command line tool."""

import sys
import tempfile
import unittest
from pathlib import Path

from click.testing import CliRunner
from loguru import logger

from defrag.scripts.defrag_cli import main

RECORDS = [
    "O draconia;conian devil! Oh la;h lame sa;saint!",
    "This is a test",
    "     ",
    "repeat, now;now let's repeat; repeat now!",
]


class TestDefragCli(unittest.TestCase):
    """Tests for the `defrag` command."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.input_path = Path(self._tmp.name) / "fragments.txt"
        self.runner = CliRunner()

    def tearDown(self):
        self._tmp.cleanup()
        # The command reconfigures loguru for the runner's streams
        logger.remove()
        _ = logger.add(sys.stderr)

    def write_input(self, lines: list[str]) -> None:
        self.input_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def test_prints_one_line_per_record(self):
        self.write_input(RECORDS)

        result = self.runner.invoke(main, [str(self.input_path)])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout.split("\n"), [
            "O draconian devil! Oh lame saint!",
            "This is a test",
            "     ",
            "repeat, now let's repeat now!",
            "",
        ])

    def test_handles_windows_line_endings(self):
        self.input_path.write_bytes(b"ABCDEF;DEFG\r\nab;bc\r\n")

        result = self.runner.invoke(main, [str(self.input_path)])

        self.assertEqual(result.stdout, "ABCDEFG\nabc\n")

    def test_undecodable_bytes_do_not_stop_other_lines(self):
        self.input_path.write_bytes(b"ab;bc\n\xff\xfe;x\ncd;de\n")

        result = self.runner.invoke(main, [str(self.input_path)])

        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.stdout.split("\n")
        self.assertEqual(len(lines), 4)
        self.assertEqual(lines[0], "abc")
        self.assertIn("\ufffd", lines[1])
        self.assertEqual(lines[2], "cde")

    def test_empty_file(self):
        self.input_path.write_text("", encoding="utf-8")

        result = self.runner.invoke(main, [str(self.input_path)])

        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout, "")

    def test_custom_delimiter(self):
        self.write_input(["hello wo|world"])

        result = self.runner.invoke(main, [str(self.input_path), "--delimiter", "|"])

        self.assertEqual(result.stdout, "hello world\n")

    def test_strict_containment(self):
        self.write_input(["bcd;abcdef;efg"])

        result = self.runner.invoke(main, [str(self.input_path), "--strict-containment"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.stdout, "abcdefg\n")

    def test_rejects_long_delimiter(self):
        self.write_input(["a;b"])

        result = self.runner.invoke(main, [str(self.input_path), "--delimiter", "::"])

        self.assertEqual(result.exit_code, 2)
        self.assertIn("--delimiter", result.output)

    def test_missing_file(self):
        result = self.runner.invoke(main, [str(Path(self._tmp.name) / "missing.txt")])

        self.assertEqual(result.exit_code, 2)


if __name__ == "__main__":
    unittest.main()
