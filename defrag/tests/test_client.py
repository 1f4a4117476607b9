"""Unit tests for the WebSocket client's result handling."""

import unittest

from rich.table import Table

from defrag.scripts.defrag_client import ResultTable


class TestResultTable(unittest.TestCase):
    """Tests for ResultTable."""

    def test_orders_lines_by_sequence(self):
        results = ResultTable()
        results.add_message({"text": "second", "sequence": 1})
        results.add_message({"text": "first", "sequence": 0})

        self.assertEqual(results.received, 2)
        self.assertEqual(results.texts(), ["first", "second"])

    def test_collects_errors(self):
        results = ResultTable()
        results.add_message({"error": "Invalid FragmentRecord", "code": "INVALID_MESSAGE"})

        self.assertEqual(results.received, 0)
        self.assertEqual(results.errors, ["Invalid FragmentRecord"])

    def test_render_has_a_row_per_line(self):
        results = ResultTable()
        results.add_message({
            "text": "[not markup]",
            "sequence": 0,
            "fragmentCount": 3,
            "mergeCount": 2,
            "complete": True,
        })
        results.add_message({"text": "xyz12", "sequence": 1, "complete": False})

        table = results.render()

        self.assertIsInstance(table, Table)
        self.assertEqual(table.row_count, 2)


if __name__ == "__main__":
    unittest.main()
