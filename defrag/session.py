"""Reassembly session management for the server.

A session serves a single WebSocket connection: it accepts fragment records
and produces reassembled lines in the order the records arrived.
"""

import asyncio
from abc import ABC, abstractmethod
from typing_extensions import override

from defrag.config import DEFAULT_CONFIG, ReassemblyConfig
from defrag.data_types import FragmentRecord, ReassembledLine
from defrag.reassembly import Reassembler
from defrag.stages import ReassembleStage


class ReassemblySession(ABC):
    """Abstract base class for reassembly sessions."""

    @abstractmethod
    async def push_record(self, record: FragmentRecord) -> None:
        """Push a fragment record into the session.

        Args:
            record: Record received from the client.
        """
        pass

    @abstractmethod
    async def get_line(self) -> ReassembledLine:
        """Wait for and return the next reassembled line.

        Returns:
            The line for the oldest record not yet returned.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Shut the session down and release waiting get_line() calls."""
        pass


class PipelineSession(ReassemblySession):
    """Session running records through ReassembleStage into a line queue."""

    _stage: ReassembleStage
    _line_queue: asyncio.Queue[ReassembledLine | None]
    _closed: bool

    def __init__(self, config: ReassemblyConfig = DEFAULT_CONFIG):
        self._line_queue = asyncio.Queue()
        self._closed = False

        self._stage = ReassembleStage(Reassembler(config))
        self._stage.connect(self._line_queue)

    @override
    async def push_record(self, record: FragmentRecord) -> None:
        if not self._closed:
            await self._stage.process(record)

    @override
    async def get_line(self) -> ReassembledLine:
        line = await self._line_queue.get()
        if line is None:
            # Stage has shut down, no more lines will come
            raise asyncio.CancelledError()
        return line

    @override
    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        await self._stage.process(None)
        await self._stage.join()


def create_session(config: ReassemblyConfig = DEFAULT_CONFIG) -> ReassemblySession:
    """Factory function to create a reassembly session."""
    return PipelineSession(config)
