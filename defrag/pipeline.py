"""Async stage pipeline for streaming records through reassembly.

Each stage owns an input queue and a task that drains it. A stage emits by
putting items on its output queue, which is the input queue of the next
stage once the two are composed with `+`:

    lines: list[ReassembledLine] = []
    pipeline = ReassembleStage(reassembler) + CollectSink(lines)

    await pipeline.process(FragmentRecord(record="ab;bc", sequence=0))
    await pipeline.process(None)  # shutdown sentinel, forwarded stage to stage
    await pipeline.join()

Items are handled one at a time per stage, so every stage preserves order.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, cast
from typing_extensions import override

In = TypeVar("In")
Out = TypeVar("Out")
T = TypeVar("T")


class Stage(ABC, Generic[In, Out]):
    """Common interface of single stages and chains of stages."""

    def __init__(self, input_queue: asyncio.Queue[In | None]):
        self._input_queue: asyncio.Queue[In | None] = input_queue
        self._output_queue: asyncio.Queue[Out | None] | None = None

    @abstractmethod
    async def process(self, item: In | None) -> None:
        """Queue an item, or the None sentinel to shut the stage down."""
        pass

    @abstractmethod
    def __add__(self, other: Stage[Out, T]) -> ChainedStage[In, T]:
        """Feed this stage's output into `other`."""
        pass

    @abstractmethod
    async def join(self) -> None:
        """Wait until the stage has consumed its sentinel."""
        pass

    def connect(self, queue: asyncio.Queue[Out | None]) -> None:
        """Deliver this stage's output, sentinel included, to a plain queue."""
        self._output_queue = queue


class SingleStage(Stage[In, Out], ABC):
    """A stage backed by its own asyncio task.

    Must be constructed inside a running event loop. Subclasses implement
    _process_item() and put results on self._output_queue when it is set.
    """

    def __init__(self):
        super().__init__(asyncio.Queue())
        self._task: asyncio.Task[None] = asyncio.create_task(self._run())

    @override
    async def process(self, item: In | None) -> None:
        await self._input_queue.put(item)

    @abstractmethod
    async def _process_item(self, item: In) -> None:
        """Handle one item taken from the input queue."""
        pass

    @override
    async def join(self) -> None:
        await self._task

    @override
    def __add__(self, other: Stage[Out, T]) -> ChainedStage[In, T]:
        self.connect(other._input_queue)
        return ChainedStage(cast(Stage[In, object], self), cast(Stage[object, T], other))

    async def _emit(self, item: Out) -> None:
        if self._output_queue is not None:
            await self._output_queue.put(item)

    async def _run(self) -> None:
        while (item := await self._input_queue.get()) is not None:
            await self._process_item(item)
        if self._output_queue is not None:
            await self._output_queue.put(None)


class ChainedStage(Stage[In, Out]):
    """Two stages behaving as one: input goes to the first, output leaves the last."""

    def __init__(self, first: Stage[In, object], last: Stage[object, Out]):
        super().__init__(first._input_queue)
        self._first: Stage[In, object] = first
        self._last: Stage[object, Out] = last

    @override
    async def process(self, item: In | None) -> None:
        await self._first.process(item)

    @override
    async def join(self) -> None:
        await self._first.join()
        await self._last.join()

    @override
    def connect(self, queue: asyncio.Queue[Out | None]) -> None:
        self._last.connect(queue)

    @override
    def __add__(self, other: Stage[Out, T]) -> ChainedStage[In, T]:
        self._last.connect(other._input_queue)
        return ChainedStage(cast(Stage[In, object], self), cast(Stage[object, T], other))
