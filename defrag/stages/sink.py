"""Sink stages that deliver reassembled lines."""

from typing import TextIO
from typing_extensions import override

from fastapi import WebSocket

from defrag.data_types import ReassembledLine
from defrag.pipeline import SingleStage


class SinkStage(SingleStage[ReassembledLine, None]):
    """Sends each line as camelCase JSON to a WebSocket client."""

    _websocket: WebSocket

    def __init__(self, websocket: WebSocket):
        super().__init__()
        self._websocket = websocket

    @override
    async def _process_item(self, item: ReassembledLine) -> None:
        await self._websocket.send_json(item.model_dump(by_alias=True))


class TextSinkStage(SingleStage[ReassembledLine, None]):
    """Writes the text of each line to a stream, one per line."""

    _stream: TextIO

    def __init__(self, stream: TextIO):
        super().__init__()
        self._stream = stream

    @override
    async def _process_item(self, item: ReassembledLine) -> None:
        self._stream.write(item.text + "\n")
