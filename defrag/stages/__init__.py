"""Pipeline stages for the reassembly service."""

from defrag.stages.reassemble import ReassembleStage
from defrag.stages.sink import SinkStage, TextSinkStage

__all__ = ["ReassembleStage", "SinkStage", "TextSinkStage"]
