"""Reconstruct lines of text from unordered, overlapping fragments."""

from defrag.config import DEFAULT_CONFIG, ReassemblyConfig
from defrag.overlap import BruteForceOverlapIndex, OverlapIndex, enumerate_overlaps, merge, overlap
from defrag.reassembly import Reassembler, ReassemblyResult, reassemble, split_record

__all__ = [
    "DEFAULT_CONFIG",
    "BruteForceOverlapIndex",
    "OverlapIndex",
    "Reassembler",
    "ReassemblyConfig",
    "ReassemblyResult",
    "enumerate_overlaps",
    "merge",
    "overlap",
    "reassemble",
    "split_record",
]
