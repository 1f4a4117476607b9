"""Greedy reassembly of a delimited record of overlapping fragments.

The record is split into a working set of fragments. Each iteration merges
the pair with the largest overlap and replaces the two fragments with the
merged one, until a single fragment (the reconstructed line) remains or no
pair overlaps any more.
"""

from enum import Enum
from typing import NamedTuple

from loguru import logger

from defrag.config import DEFAULT_CONFIG, DEFAULT_DELIMITER, ReassemblyConfig
from defrag.data_types import MergeStep, OverlapCandidate
from defrag.overlap import BruteForceOverlapIndex, OverlapIndex, merge


class ReassemblyState(Enum):
    SPLITTING = "splitting"
    ITERATING = "iterating"
    DONE = "done"


class ReassemblyResult(NamedTuple):
    """Outcome of reassembling one record.

    Attributes:
        text: The reconstructed line.
        fragment_count: Non-empty fragments in the record.
        merges: One MergeStep per iteration, in order.
        complete: False when the loop ran out of overlaps with several
            fragments left; `text` is then the longest of them.
    """

    text: str
    fragment_count: int
    merges: list[MergeStep]
    complete: bool


def split_record(record: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Split a record into fragments, dropping the empty tokens.

    Whitespace-only tokens are kept, only tokens with no characters at all
    are discarded:

        split_record(";;This is a test;") → ["This is a test"]
        split_record(" ;") → [" "]
    """
    return [token for token in record.split(delimiter) if token]


def _select(candidates: list[OverlapCandidate]) -> OverlapCandidate:
    # max() keeps the first of equal lengths
    return max(candidates, key=lambda candidate: candidate.length)


class Reassembler:
    """Reconstructs lines from delimited fragment records.

    Args:
        config: Delimiter and overlap rules. Defaults to DEFAULT_CONFIG.
        index: Overlap enumerator. Defaults to a BruteForceOverlapIndex
            honouring `config.allow_contained`.
    """

    _config: ReassemblyConfig
    _index: OverlapIndex

    def __init__(self, config: ReassemblyConfig = DEFAULT_CONFIG, index: OverlapIndex | None = None):
        self._config = config
        self._index = index if index is not None else BruteForceOverlapIndex(config.allow_contained)

    @property
    def config(self) -> ReassemblyConfig:
        return self._config

    def run(self, record: str) -> ReassemblyResult:
        """Reassemble one record and report how it went."""
        if not record.strip():
            return ReassemblyResult(record, 0, [], True)

        fragments = split_record(record, self._config.delimiter)
        if len(fragments) == 0:
            return ReassemblyResult("", 0, [], True)
        if len(fragments) == 1:
            return ReassemblyResult(fragments[0], 1, [], True)

        fragment_count = len(fragments)
        merges: list[MergeStep] = []
        complete = True
        state = ReassemblyState.ITERATING

        while state is ReassemblyState.ITERATING:
            fragments.sort(key=len, reverse=True)

            candidates = self._index.candidates(fragments)
            if not candidates:
                logger.debug(
                    f"No overlaps left among {len(fragments)} fragments, "
                    f"keeping the longest ({len(fragments[0])} chars)"
                )
                complete = False
                state = ReassemblyState.DONE
                continue

            best = _select(candidates)
            merged = merge(best.prefix, best.suffix, best.length)

            # Remove the higher position first so the lower one stays valid
            for index in sorted((best.prefix_index, best.suffix_index), reverse=True):
                del fragments[index]
            fragments.append(merged)

            merges.append(MergeStep(best.prefix, best.suffix, best.length, merged, len(fragments)))
            logger.debug(
                f"Merged {best.prefix!r} + {best.suffix!r} on {best.length} chars, "
                f"{len(fragments)} fragments left"
            )

            if len(fragments) == 1:
                state = ReassemblyState.DONE

        return ReassemblyResult(fragments[0], fragment_count, merges, complete)

    def reassemble(self, record: str) -> str:
        return self.run(record).text


def reassemble(record: str) -> str:
    """Reconstruct the line encoded by a `;`-delimited record of fragments.

    Examples:
        reassemble("O draconia;conian devil! Oh la;h lame sa;saint!")
            → "O draconian devil! Oh lame saint!"
        reassemble("     ") → "     "
    """
    return Reassembler().reassemble(record)
