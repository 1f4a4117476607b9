#!/usr/bin/env python3
"""Reassemble every line of a file of fragment records.

Usage:
    defrag fragments.txt
    defrag fragments.txt --delimiter '|'
    defrag fragments.txt --strict-containment --verbose

Each input line is one record of fragments joined by the delimiter. The
reconstructed text of each record is printed on its own line, in input order.
"""

import asyncio
import sys
from pathlib import Path
from typing import TextIO

import click
from loguru import logger
from pydantic import ValidationError

from defrag.config import DEFAULT_DELIMITER, ReassemblyConfig
from defrag.data_types import FragmentRecord
from defrag.reassembly import Reassembler
from defrag.stages import ReassembleStage, TextSinkStage


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level, keeping stdout for results."""
    logger.remove()
    _ = logger.add(sys.stderr, level=level)


async def reassemble_lines(lines: list[str], config: ReassemblyConfig, out: TextIO) -> None:
    """Stream records through reassembly into `out`.

    Args:
        lines: Input lines, line terminators already removed.
        config: Reassembly settings.
        out: Stream receiving one reconstructed line per record.
    """
    pipeline = ReassembleStage(Reassembler(config)) + TextSinkStage(out)

    for sequence, line in enumerate(lines):
        await pipeline.process(FragmentRecord(record=line, sequence=sequence))
    await pipeline.process(None)
    await pipeline.join()


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--delimiter",
    default=DEFAULT_DELIMITER,
    show_default=True,
    help="Character separating fragments within a line",
)
@click.option(
    "--strict-containment",
    is_flag=True,
    help="Only merge on suffix/prefix overlaps, never on a fragment contained in another",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every merge to stderr")
def main(input_file: Path, delimiter: str, strict_containment: bool, verbose: bool):
    """Reconstruct each line of INPUT_FILE from its overlapping fragments."""
    try:
        config = ReassemblyConfig(
            delimiter=delimiter,
            allow_contained=not strict_containment,
        )
    except ValidationError as e:
        raise click.BadParameter(e.errors()[0]["msg"], param_hint="--delimiter") from e

    configure_logging("DEBUG" if verbose else "WARNING")

    # Undecodable bytes become U+FFFD so one bad line does not lose the rest
    with input_file.open(encoding="utf-8", errors="replace") as f:
        lines = [line.rstrip("\n") for line in f]
    logger.debug(f"Read {len(lines)} records from {input_file}")

    asyncio.run(reassemble_lines(lines, config, sys.stdout))


if __name__ == "__main__":
    main()
