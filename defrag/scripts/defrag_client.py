#!/usr/bin/env python3
"""WebSocket client for the defrag server.

Usage:
    # Reassemble every line of a file on a running server
    python -m defrag.scripts.defrag_client fragments.txt

    # Against another server, plain output only
    python -m defrag.scripts.defrag_client fragments.txt --uri ws://host:8000/ws/reassemble --plain
"""

import asyncio
import json
from pathlib import Path

import click
import websockets
from rich.console import Console
from rich.table import Table
from rich.text import Text
from websockets.asyncio.client import ClientConnection

DEFAULT_URI = "ws://localhost:8000/ws/reassemble"


class ResultTable:
    """Collects reassembled lines and renders them in input order."""

    def __init__(self) -> None:
        self._lines: dict[int, dict[str, str | int | bool]] = {}
        self._errors: list[str] = []

    def add_message(self, message: dict[str, str | int | bool]) -> None:
        """Record one server message, either a line or an error."""
        if "error" in message:
            self._errors.append(str(message["error"]))
        else:
            self._lines[int(message.get("sequence", 0))] = message

    @property
    def received(self) -> int:
        return len(self._lines)

    @property
    def errors(self) -> list[str]:
        return self._errors

    def texts(self) -> list[str]:
        return [str(self._lines[i]["text"]) for i in sorted(self._lines)]

    def render(self) -> Table:
        table = Table(title="Reassembled Lines")
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Fragments", justify="right")
        table.add_column("Merges", justify="right")
        table.add_column("Text", style="green")

        for i in sorted(self._lines):
            line = self._lines[i]
            text = Text(str(line["text"]))
            if not line.get("complete", True):
                text.stylize("yellow")
            table.add_row(
                str(i),
                str(line.get("fragmentCount", 0)),
                str(line.get("mergeCount", 0)),
                text,
            )
        return table


async def receive_lines(ws: ClientConnection, results: ResultTable, expected: int) -> None:
    """Receive server messages until every record has an answer."""
    try:
        async for message in ws:
            results.add_message(json.loads(message))
            if results.received + len(results.errors) >= expected:
                break
    except websockets.ConnectionClosed:
        pass


async def reassemble_file(uri: str, input_path: Path) -> ResultTable:
    """Send every line of a file to the server and collect the answers.

    Args:
        uri: WebSocket URI (e.g., ws://localhost:8000/ws/reassemble)
        input_path: Text file with one fragment record per line.

    Returns:
        The collected results.
    """
    with input_path.open(encoding="utf-8", errors="replace") as f:
        records = [line.rstrip("\n") for line in f]

    results = ResultTable()
    if not records:
        return results

    async with websockets.connect(uri) as ws:
        receiver_task = asyncio.create_task(receive_lines(ws, results, len(records)))

        for sequence, record in enumerate(records):
            await ws.send(json.dumps({"record": record, "sequence": sequence}))

        await receiver_task

    return results


@click.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--uri", default=DEFAULT_URI, show_default=True, help="WebSocket URI")
@click.option("--plain", is_flag=True, help="Print only the reassembled text, one line per record")
def main(input_file: Path, uri: str, plain: bool):
    """Reassemble each line of INPUT_FILE using the defrag server."""
    console = Console()
    results = asyncio.run(reassemble_file(uri, input_file))

    if plain:
        for text in results.texts():
            click.echo(text)
    else:
        console.print(results.render())

    for error in results.errors:
        console.print(f"[red]{error}[/red]")


if __name__ == "__main__":
    main()
