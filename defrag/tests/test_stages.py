"""Unit tests for ReassembleStage and the sink stages."""

import io
import unittest
from unittest.mock import AsyncMock, MagicMock

from defrag.config import ReassemblyConfig
from defrag.data_types import FragmentRecord, ReassembledLine
from defrag.pipeline import SingleStage
from defrag.reassembly import Reassembler
from defrag.stages import ReassembleStage, SinkStage, TextSinkStage


class CollectSink(SingleStage[ReassembledLine, None]):
    """Test sink that collects lines into a list."""

    def __init__(self, result: list[ReassembledLine]):
        super().__init__()
        self._result = result

    async def _process_item(self, item: ReassembledLine) -> None:
        self._result.append(item)


class TestReassembleStage(unittest.IsolatedAsyncioTestCase):
    """Tests for ReassembleStage."""

    async def test_emits_reassembled_line(self):
        results: list[ReassembledLine] = []
        pipeline = ReassembleStage(Reassembler()) + CollectSink(results)

        await pipeline.process(
            FragmentRecord(record="O draconia;conian devil! Oh la;h lame sa;saint!", sequence=7)
        )
        await pipeline.process(None)
        await pipeline.join()

        self.assertEqual(len(results), 1)
        line = results[0]
        self.assertEqual(line.text, "O draconian devil! Oh lame saint!")
        self.assertEqual(line.sequence, 7)
        self.assertEqual(line.fragment_count, 4)
        self.assertEqual(line.merge_count, 3)
        self.assertTrue(line.complete)

    async def test_marks_incomplete_line(self):
        results: list[ReassembledLine] = []
        pipeline = ReassembleStage(Reassembler()) + CollectSink(results)

        await pipeline.process(FragmentRecord(record="abc;xyz12"))
        await pipeline.process(None)
        await pipeline.join()

        self.assertEqual(results[0].text, "xyz12")
        self.assertFalse(results[0].complete)
        self.assertEqual(results[0].merge_count, 0)

    async def test_uses_reassembler_config(self):
        results: list[ReassembledLine] = []
        reassembler = Reassembler(ReassemblyConfig(delimiter=","))
        pipeline = ReassembleStage(reassembler) + CollectSink(results)

        await pipeline.process(FragmentRecord(record="hello wo,world"))
        await pipeline.process(None)
        await pipeline.join()

        self.assertEqual(results[0].text, "hello world")

    async def test_one_line_per_record(self):
        results: list[ReassembledLine] = []
        pipeline = ReassembleStage(Reassembler()) + CollectSink(results)

        for i, record in enumerate(["", "   ", ";;;", "a;b"]):
            await pipeline.process(FragmentRecord(record=record, sequence=i))
        await pipeline.process(None)
        await pipeline.join()

        self.assertEqual([line.text for line in results], ["", "   ", "", "a"])


class TestSinkStage(unittest.IsolatedAsyncioTestCase):
    """Tests for SinkStage."""

    async def test_sends_line_via_websocket(self):
        mock_websocket = MagicMock()
        mock_websocket.send_json = AsyncMock()

        sink = SinkStage(mock_websocket)

        await sink.process(ReassembledLine(text="ABCDEFG", sequence=1, fragment_count=2, merge_count=1))
        await sink.process(None)
        await sink.join()

        mock_websocket.send_json.assert_called_once_with({
            "text": "ABCDEFG",
            "sequence": 1,
            "fragmentCount": 2,
            "mergeCount": 1,
            "complete": True,
        })

    async def test_sends_multiple_lines_in_order(self):
        mock_websocket = MagicMock()
        mock_websocket.send_json = AsyncMock()

        sink = SinkStage(mock_websocket)
        for i, text in enumerate(["First", "Second", "Third"]):
            await sink.process(ReassembledLine(text=text, sequence=i))
        await sink.process(None)
        await sink.join()

        calls = mock_websocket.send_json.call_args_list
        self.assertEqual([c[0][0]["text"] for c in calls], ["First", "Second", "Third"])
        self.assertNotIn("fragment_count", calls[0][0][0])


class TestTextSinkStage(unittest.IsolatedAsyncioTestCase):
    """Tests for TextSinkStage."""

    async def test_writes_one_line_per_item(self):
        stream = io.StringIO()
        sink = TextSinkStage(stream)

        await sink.process(ReassembledLine(text="first line"))
        await sink.process(ReassembledLine(text="   "))
        await sink.process(ReassembledLine(text="third"))
        await sink.process(None)
        await sink.join()

        self.assertEqual(stream.getvalue(), "first line\n   \nthird\n")


if __name__ == "__main__":
    unittest.main()
