"""Stage that turns fragment records into reassembled lines."""

from typing_extensions import override

from loguru import logger

from defrag.data_types import FragmentRecord, ReassembledLine
from defrag.pipeline import SingleStage
from defrag.reassembly import Reassembler


class ReassembleStage(SingleStage[FragmentRecord, ReassembledLine]):
    """Runs the greedy reassembly on each incoming record.

    Emits exactly one ReassembledLine per FragmentRecord, carrying the same
    sequence number, in arrival order.

    Args:
        reassembler: The configured Reassembler to run on each record.
    """

    _reassembler: Reassembler

    def __init__(self, reassembler: Reassembler):
        super().__init__()
        self._reassembler = reassembler

    @override
    async def _process_item(self, item: FragmentRecord) -> None:
        result = self._reassembler.run(item.record)
        if not result.complete:
            logger.info(
                f"Record {item.sequence}: {result.fragment_count} fragments, "
                f"stopped after {len(result.merges)} merges without full overlap"
            )
        await self._emit(
            ReassembledLine(
                text=result.text,
                sequence=item.sequence,
                fragment_count=result.fragment_count,
                merge_count=len(result.merges),
                complete=result.complete,
            )
        )
